from typing import List
from fastapi import APIRouter, Depends

from dhaba_ledger.api import deps
from dhaba_ledger.core.config import Settings
from dhaba_ledger.models.driver import VehicleType

router = APIRouter(prefix="/reference", tags=["reference"])

@router.get("/locations", response_model=List[str])
def read_partner_locations(settings: Settings = Depends(deps.get_settings)):
    """
    Partner locations a visit can be recorded against.
    """
    return settings.partner_locations_list

@router.get("/vehicle-types", response_model=List[str])
def read_vehicle_types():
    return [vehicle_type.value for vehicle_type in VehicleType]
