import secrets
from typing import Generator, Optional

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from dhaba_ledger.core.cache import DriverListCache
from dhaba_ledger.core.config import Settings
from dhaba_ledger.services.driver_directory import DriverDirectory
from dhaba_ledger.services.visit_ledger import VisitLedger

operator_key_header = APIKeyHeader(name="X-Operator-Key", auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Dependency that provides a database session.
    """
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()


def get_cache(request: Request) -> Optional[DriverListCache]:
    return getattr(request.app.state, "driver_cache", None)


def require_operator(
    settings: Settings = Depends(get_settings),
    api_key: Optional[str] = Security(operator_key_header),
) -> None:
    """
    Reject requests without the operator key when one is configured.
    """
    expected = settings.OPERATOR_API_KEY
    if not expected:
        return
    if not api_key or not secrets.compare_digest(api_key, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="A valid operator key is required",
        )


def get_visit_ledger(
    db: Session = Depends(get_db),
    cache: Optional[DriverListCache] = Depends(get_cache),
) -> VisitLedger:
    return VisitLedger(db, cache=cache)


def get_driver_directory(
    db: Session = Depends(get_db),
    cache: Optional[DriverListCache] = Depends(get_cache),
) -> DriverDirectory:
    return DriverDirectory(db, cache=cache)
