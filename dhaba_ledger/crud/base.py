import logging
from contextlib import contextmanager
from typing import Any, Generic, Iterator, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from dhaba_ledger.core.exceptions import StorageFailure, WriteConflict
from dhaba_ledger.db.base_class import Base

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


@contextmanager
def storage_guard(db: Session, action: str) -> Iterator[None]:
    """
    Translate database errors raised inside the block into ledger errors.

    The session is rolled back before re-raising so no partial write survives.

    Args:
        db: Session used inside the block
        action: Short description used in messages, e.g. "recording visit"

    Raises:
        WriteConflict: A uniqueness constraint rejected the write
        StorageFailure: Any other database error
    """
    try:
        yield
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Conflicting write while {action}: {str(e.orig)}")
        raise WriteConflict(f"Conflicting write while {action}", detail=str(e.orig)) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Database error while {action}")
        raise StorageFailure(f"Error {action}", detail=str(e)) from e


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        """
        CRUD object with default methods to Read, Update and Delete by id.

        Args:
            model: A SQLAlchemy model class
        """
        self.model = model

    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        return db.query(self.model).filter(self.model.id == id).first()

    def get_multi(
        self, db: Session, *, skip: int = 0, limit: Optional[int] = None
    ) -> List[ModelType]:
        query = db.query(self.model).order_by(self.model.id).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def update_by_id(self, db: Session, *, id: Any, values: dict) -> Optional[ModelType]:
        """
        Overwrite columns of one row in a single UPDATE statement.

        Returns:
            The refreshed row, or None if no row has this id
        """
        matched = (
            db.query(self.model)
            .filter(self.model.id == id)
            .update(values, synchronize_session=False)
        )
        if matched == 0:
            db.rollback()
            return None
        db.commit()
        return self.get(db, id=id)

    def remove(self, db: Session, *, id: Any) -> bool:
        deleted = (
            db.query(self.model)
            .filter(self.model.id == id)
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted > 0
