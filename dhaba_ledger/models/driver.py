from sqlalchemy import Column, String, DateTime, Integer, Boolean, Enum, UniqueConstraint
from dhaba_ledger.db.base_class import Base
import enum
from datetime import datetime

class VehicleType(str, enum.Enum):
    SUV = "SUV"
    Sedan = "Sedan"
    Hatchback = "Hatchback"
    Bus = "Bus"
    Truck = "Truck"
    Van = "Van"
    Pickup = "Pickup"

class DriverRecord(Base):
    __tablename__ = "drivers"
    __table_args__ = (
        # One ledger line per driver and location
        UniqueConstraint("license_number", "last_visited_location", name="uq_drivers_license_location"),
    )

    id = Column(Integer, primary_key=True, index=True)
    driver_id = Column(String, nullable=False)  # display only, e.g. "AMR-1718000000000"
    name = Column(String, nullable=False)
    mobile_number = Column(String(10), nullable=False)
    license_number = Column(String(15), nullable=False, index=True)
    vehicle_number = Column(String(10), nullable=False)
    vehicle_type = Column(Enum(VehicleType, name="vehicletype"), nullable=False)
    last_visited_location = Column(String, nullable=False)

    # Visit accounting
    visits = Column(Integer, nullable=False, default=0)
    total_visits = Column(Integer, nullable=False, default=0)
    eligible_for_commission = Column(Boolean, nullable=False, default=False)
    commission_received = Column(Boolean, nullable=False, default=False)

    # Bumped on every write; guards the visit update against lost increments
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<DriverRecord {self.license_number} @ {self.last_visited_location}>"
