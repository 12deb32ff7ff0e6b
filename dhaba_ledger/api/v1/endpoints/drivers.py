from typing import List, Optional
from fastapi import APIRouter, Depends, Response, status

from dhaba_ledger import schemas
from dhaba_ledger.api import deps
from dhaba_ledger.core.config import Settings
from dhaba_ledger.core.exceptions import ValidationError
from dhaba_ledger.services.driver_directory import DriverDirectory
from dhaba_ledger.services.visit_ledger import VisitLedger

router = APIRouter(
    prefix="/driver",
    tags=["driver"],
    dependencies=[Depends(deps.require_operator)],
    responses={
        404: {"model": schemas.ErrorResponse},
        409: {"model": schemas.ErrorResponse},
        503: {"model": schemas.ErrorResponse},
    },
)

@router.get("", response_model=List[schemas.Driver])
def read_drivers(
    directory: DriverDirectory = Depends(deps.get_driver_directory),
    search: Optional[str] = None,
):
    """
    Retrieve drivers, optionally filtered by a license number fragment.
    """
    return directory.list_all(search=search)

@router.post(
    "",
    response_model=schemas.VisitResult,
    status_code=status.HTTP_201_CREATED,
    responses={200: {"model": schemas.VisitResult, "description": "Existing driver updated"}},
)
def record_visit(
    *,
    response: Response,
    ledger: VisitLedger = Depends(deps.get_visit_ledger),
    settings: Settings = Depends(deps.get_settings),
    visit_in: schemas.VisitEvent,
):
    """
    Record a driver's visit to a partner location.

    Creates the ledger line on the first visit (201) and updates it on every
    later one (200).
    """
    if (
        settings.RESTRICT_TO_PARTNER_LOCATIONS
        and visit_in.last_visited_location not in settings.partner_locations_list
    ):
        raise ValidationError(
            "Unknown partner location",
            detail=visit_in.last_visited_location,
        )

    result = ledger.record_visit(visit_in)
    if not result.created:
        response.status_code = status.HTTP_200_OK
    return result

@router.get("/{record_id}", response_model=schemas.Driver)
def read_driver(
    record_id: int,
    directory: DriverDirectory = Depends(deps.get_driver_directory),
):
    """
    Get driver by ID.
    """
    return directory.get(record_id)

@router.put("/{record_id}", response_model=schemas.Driver)
def update_driver(
    *,
    record_id: int,
    directory: DriverDirectory = Depends(deps.get_driver_directory),
    driver_in: schemas.DriverFieldsUpdate,
):
    """
    Correct a driver's name, license, vehicle number and vehicle type.

    Visit counters and commission flags are left alone.
    """
    return directory.replace_fields(record_id, driver_in)

@router.patch("/{record_id}/commission", response_model=schemas.Driver)
def acknowledge_commission(
    record_id: int,
    directory: DriverDirectory = Depends(deps.get_driver_directory),
):
    """
    Mark the driver's commission as received.
    """
    return directory.acknowledge_commission(record_id)

@router.delete("/{record_id}", response_model=schemas.Message)
def delete_driver(
    record_id: int,
    directory: DriverDirectory = Depends(deps.get_driver_directory),
):
    """
    Delete a driver.
    """
    directory.delete(record_id)
    return {"message": "Driver deleted successfully"}
