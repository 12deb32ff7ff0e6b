from .base import CRUDBase, storage_guard
from .crud_driver import driver

__all__ = [
    'CRUDBase',
    'storage_guard',
    'driver',
]
