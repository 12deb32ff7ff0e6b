from .driver import (
    Driver, DriverFieldsUpdate, VisitEvent, VisitResult, Message, ErrorResponse, VehicleType
)

__all__ = [
    'Driver', 'DriverFieldsUpdate', 'VisitEvent', 'VisitResult', 'Message', 'ErrorResponse', 'VehicleType'
]
