"""
Visit accounting for drivers stopping at partner dhabas.

Each (license number, location) pair is one ledger line. Every matching visit
bumps the streak and the lifetime total; the streak earns a commission when it
reaches COMMISSION_THRESHOLD, and the first visit after the operator has paid
that commission starts a new streak.
"""
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from dhaba_ledger import crud
from dhaba_ledger.core.cache import DriverListCache
from dhaba_ledger.models.driver import DriverRecord, VehicleType
from dhaba_ledger.schemas.driver import Driver, VisitEvent, VisitResult

logger = logging.getLogger(__name__)

COMMISSION_THRESHOLD = 4


class VisitTransition(str, Enum):
    CONTINUE_STREAK = "continue_streak"
    BECOME_ELIGIBLE = "become_eligible"
    RESET_STREAK = "reset_streak"


@dataclass(frozen=True)
class VisitUpdate:
    """The column changes one matching visit makes to an existing record."""
    transition: VisitTransition
    name: str
    mobile_number: str
    vehicle_number: str
    vehicle_type: VehicleType
    last_visited_location: str
    visits: int
    total_visits: int
    # None leaves the stored flag untouched
    eligible_for_commission: Optional[bool] = None
    commission_received: Optional[bool] = None

    def values(self) -> Dict[str, Any]:
        values = {
            "name": self.name,
            "mobile_number": self.mobile_number,
            "vehicle_number": self.vehicle_number,
            "vehicle_type": self.vehicle_type,
            "last_visited_location": self.last_visited_location,
            "visits": self.visits,
            "total_visits": self.total_visits,
        }
        if self.eligible_for_commission is not None:
            values["eligible_for_commission"] = self.eligible_for_commission
        if self.commission_received is not None:
            values["commission_received"] = self.commission_received
        return values


def plan_visit(current: DriverRecord, event: VisitEvent) -> VisitUpdate:
    """
    Work out how a matching visit changes an existing record.

    The streak is only reset once the commission has been acknowledged; until
    then visits keep counting past the threshold and the record stays eligible.

    Args:
        current: The stored record matched by license number and location
        event: The incoming visit

    Returns:
        VisitUpdate describing every column to overwrite
    """
    new_visits = (current.visits or 0) + 1
    new_total_visits = (current.total_visits or 0) + 1

    transition = VisitTransition.CONTINUE_STREAK
    visits = new_visits
    eligible = None
    received = None

    if new_visits == COMMISSION_THRESHOLD:
        transition = VisitTransition.BECOME_ELIGIBLE
        eligible = True

    if new_visits > COMMISSION_THRESHOLD and current.commission_received:
        transition = VisitTransition.RESET_STREAK
        visits = 1
        eligible = False
        received = False

    return VisitUpdate(
        transition=transition,
        name=event.name,
        mobile_number=event.mobile_number,
        vehicle_number=event.vehicle_number,
        vehicle_type=event.vehicle_type,
        last_visited_location=event.last_visited_location,
        visits=visits,
        total_visits=new_total_visits,
        eligible_for_commission=eligible,
        commission_received=received,
    )


def make_driver_id(location: str, created_ms: Optional[int] = None) -> str:
    """Display id such as "AMR-1718000000000" built from the location and creation time."""
    if created_ms is None:
        created_ms = int(time.time() * 1000)
    return f"{location[:3].upper()}-{created_ms}"


class VisitLedger:
    """Records visits against the driver ledger."""

    def __init__(self, db: Session, cache: Optional[DriverListCache] = None):
        self.db = db
        self.cache = cache

    def record_visit(self, event: VisitEvent) -> VisitResult:
        """
        Create or update the ledger line for this driver and location.

        Raises:
            WriteConflict: A concurrent visit for the same record won the race
            StorageFailure: The database is unavailable or rejected the write
        """
        with crud.storage_guard(self.db, "recording visit"):
            existing = crud.driver.get_by_visit_key(
                self.db,
                license_number=event.license_number,
                location=event.last_visited_location,
            )

            if existing is None:
                record = crud.driver.create_from_visit(
                    self.db,
                    obj_in=event,
                    driver_id=make_driver_id(event.last_visited_location),
                )
                logger.info(
                    f"Created driver {record.id} for {record.license_number} at {record.last_visited_location}"
                )
                result = VisitResult(
                    message="Driver added successfully",
                    created=True,
                    driver=Driver.model_validate(record),
                )
            else:
                update = plan_visit(existing, event)
                record = crud.driver.apply_visit(
                    self.db,
                    record_id=existing.id,
                    seen_version=existing.version,
                    values=update.values(),
                )
                logger.info(
                    f"Driver {record.id} visit recorded ({update.transition.value}): "
                    f"visits={record.visits} total_visits={record.total_visits}"
                )
                result = VisitResult(
                    message="Driver updated successfully",
                    created=False,
                    driver=Driver.model_validate(record),
                )

        if self.cache is not None:
            self.cache.invalidate()
        return result
