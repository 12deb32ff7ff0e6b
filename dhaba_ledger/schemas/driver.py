from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import Any, Optional
import re

from dhaba_ledger.models.driver import VehicleType

MOBILE_PATTERN = re.compile(r"^\d{10}$")
LICENSE_PATTERN = re.compile(r"^[A-Z]{2}\d{13}$")
VEHICLE_NUMBER_PATTERN = re.compile(r"^[A-Z]{2}[0-9]{1,2}[A-Z]{1,2}[0-9]{4}$")


def _clean_alphanumeric(v):
    if isinstance(v, str):
        return re.sub(r"[^A-Za-z0-9]", "", v).upper()
    return v


def check_license_number(v: str) -> str:
    if not LICENSE_PATTERN.match(v):
        raise ValueError("DL number must be in the format XX0000000000000 (2 letters followed by 13 numbers)")
    return v


def check_vehicle_number(v: str) -> str:
    if not VEHICLE_NUMBER_PATTERN.match(v):
        raise ValueError("Vehicle number must be in the format XX00XX0000 or XX00X0000")
    return v


class VisitEvent(BaseModel):
    """One driver arriving at a partner location."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    mobile_number: str
    license_number: str
    vehicle_number: str
    vehicle_type: VehicleType
    last_visited_location: str = Field(..., min_length=1, max_length=200)

    @field_validator('mobile_number', mode='before')
    @classmethod
    def clean_mobile_number(cls, v):
        if isinstance(v, str):
            return re.sub(r"\D", "", v)
        return v

    @field_validator('mobile_number')
    @classmethod
    def validate_mobile_number(cls, v):
        if not MOBILE_PATTERN.match(v):
            raise ValueError("Mobile number must be exactly 10 digits")
        return v

    @field_validator('license_number', 'vehicle_number', mode='before')
    @classmethod
    def clean_registration(cls, v):
        return _clean_alphanumeric(v)

    @field_validator('license_number')
    @classmethod
    def validate_license_number(cls, v):
        return check_license_number(v)

    @field_validator('vehicle_number')
    @classmethod
    def validate_vehicle_number(cls, v):
        return check_vehicle_number(v)


class DriverFieldsUpdate(BaseModel):
    """Manual correction of a record; every field is overwritten."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    license_number: str
    vehicle_number: str
    vehicle_type: VehicleType

    @field_validator('license_number', 'vehicle_number', mode='before')
    @classmethod
    def clean_registration(cls, v):
        return _clean_alphanumeric(v)

    @field_validator('license_number')
    @classmethod
    def validate_license_number(cls, v):
        return check_license_number(v)

    @field_validator('vehicle_number')
    @classmethod
    def validate_vehicle_number(cls, v):
        return check_vehicle_number(v)


class Driver(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    driver_id: str
    name: str
    mobile_number: str
    license_number: str
    vehicle_number: str
    vehicle_type: VehicleType
    last_visited_location: str
    visits: int
    total_visits: int
    eligible_for_commission: bool
    commission_received: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class VisitResult(BaseModel):
    message: str
    created: bool
    driver: Driver


class Message(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    message: str
    error: Optional[Any] = None
