# Import all models so that Base.metadata sees them
from dhaba_ledger.db.base_class import Base
from dhaba_ledger.models.driver import DriverRecord

__all__ = ["Base", "DriverRecord"]
