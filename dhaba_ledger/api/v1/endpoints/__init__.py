from . import drivers, reference

__all__ = ["drivers", "reference"]
