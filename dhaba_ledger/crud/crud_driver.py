from typing import Optional
from sqlalchemy.orm import Session

from dhaba_ledger.core.exceptions import WriteConflict
from dhaba_ledger.crud.base import CRUDBase
from dhaba_ledger.models.driver import DriverRecord
from dhaba_ledger.schemas.driver import VisitEvent, DriverFieldsUpdate

class CRUDDriver(CRUDBase[DriverRecord, VisitEvent, DriverFieldsUpdate]):
    def get_by_visit_key(
        self, db: Session, *, license_number: str, location: str
    ) -> Optional[DriverRecord]:
        return (
            db.query(DriverRecord)
            .filter(
                DriverRecord.license_number == license_number,
                DriverRecord.last_visited_location == location,
            )
            .first()
        )

    def create_from_visit(
        self, db: Session, *, obj_in: VisitEvent, driver_id: str
    ) -> DriverRecord:
        db_obj = DriverRecord(
            driver_id=driver_id,
            name=obj_in.name,
            mobile_number=obj_in.mobile_number,
            license_number=obj_in.license_number,
            vehicle_number=obj_in.vehicle_number,
            vehicle_type=obj_in.vehicle_type,
            last_visited_location=obj_in.last_visited_location,
            visits=1,
            total_visits=1,
            eligible_for_commission=False,
            commission_received=False,
            version=1,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def apply_visit(
        self, db: Session, *, record_id: int, seen_version: int, values: dict
    ) -> DriverRecord:
        """
        Apply a visit update only if the row is still at the version we read.

        Raises:
            WriteConflict: Another write changed or removed the row first
        """
        changes = dict(values)
        changes["version"] = DriverRecord.version + 1
        matched = (
            db.query(DriverRecord)
            .filter(DriverRecord.id == record_id, DriverRecord.version == seen_version)
            .update(changes, synchronize_session=False)
        )
        if matched == 0:
            db.rollback()
            raise WriteConflict(
                "The driver was changed by another request, please retry",
                detail=f"record {record_id} is no longer at version {seen_version}",
            )
        db.commit()
        return self.get(db, id=record_id)

    def replace_fields(
        self, db: Session, *, record_id: int, obj_in: DriverFieldsUpdate
    ) -> Optional[DriverRecord]:
        values = obj_in.model_dump()
        values["version"] = DriverRecord.version + 1
        return self.update_by_id(db, id=record_id, values=values)

    def acknowledge_commission(self, db: Session, *, record_id: int) -> Optional[DriverRecord]:
        return self.update_by_id(
            db,
            id=record_id,
            values={"commission_received": True, "version": DriverRecord.version + 1},
        )

# Create a singleton instance
driver = CRUDDriver(DriverRecord)
