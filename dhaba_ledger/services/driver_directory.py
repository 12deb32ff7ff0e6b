import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from dhaba_ledger import crud
from dhaba_ledger.core.cache import DriverListCache
from dhaba_ledger.core.exceptions import NotFound
from dhaba_ledger.schemas.driver import Driver, DriverFieldsUpdate

logger = logging.getLogger(__name__)


class DriverDirectory:
    """Read, correct, acknowledge and delete driver records."""

    def __init__(self, db: Session, cache: Optional[DriverListCache] = None):
        self.db = db
        self.cache = cache

    def list_all(self, search: Optional[str] = None) -> List[Driver]:
        """
        List every driver record, optionally keeping only license numbers
        that contain `search` (case-insensitive).
        """
        drivers = self.cache.get_all() if self.cache is not None else None
        if drivers is None:
            # Read before the query so a write committed meanwhile blocks the refill
            generation = self.cache.generation() if self.cache is not None else None
            with crud.storage_guard(self.db, "fetching drivers"):
                records = crud.driver.get_multi(self.db)
            drivers = [Driver.model_validate(record) for record in records]
            if self.cache is not None:
                self.cache.set_all(drivers, generation)

        if search:
            needle = search.strip().lower()
            drivers = [d for d in drivers if needle in d.license_number.lower()]
        return drivers

    def get(self, record_id: int) -> Driver:
        with crud.storage_guard(self.db, "fetching driver"):
            record = crud.driver.get(self.db, id=record_id)
        if record is None:
            raise NotFound(record_id)
        return Driver.model_validate(record)

    def replace_fields(self, record_id: int, fields: DriverFieldsUpdate) -> Driver:
        with crud.storage_guard(self.db, "updating driver"):
            record = crud.driver.replace_fields(self.db, record_id=record_id, obj_in=fields)
            if record is None:
                raise NotFound(record_id)
            driver = Driver.model_validate(record)
        logger.info(f"Driver {record_id} fields replaced")
        self._invalidate()
        return driver

    def acknowledge_commission(self, record_id: int) -> Driver:
        """Mark the commission as paid; eligibility is not checked here."""
        with crud.storage_guard(self.db, "updating commission status"):
            record = crud.driver.acknowledge_commission(self.db, record_id=record_id)
            if record is None:
                raise NotFound(record_id)
            driver = Driver.model_validate(record)
        if not driver.eligible_for_commission:
            logger.warning(f"Commission acknowledged for driver {record_id} before it became eligible")
        else:
            logger.info(f"Commission acknowledged for driver {record_id}")
        self._invalidate()
        return driver

    def delete(self, record_id: int) -> None:
        with crud.storage_guard(self.db, "deleting driver"):
            deleted = crud.driver.remove(self.db, id=record_id)
        if not deleted:
            raise NotFound(record_id)
        logger.info(f"Driver {record_id} deleted")
        self._invalidate()

    def _invalidate(self) -> None:
        if self.cache is not None:
            self.cache.invalidate()
