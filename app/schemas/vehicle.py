# app/schemas/vehicle.py
# Wire models use camelCase names; Python attributes stay snake_case.
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Optional, Union


class _CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


class RegistrationForm(_CamelModel):
    """Raw registration form. Every field is checked by registration_service.validate_form."""
    vehicle_type: str = ""
    vehicle_number: str = ""
    capacity: Union[str, int] = ""
    from_district: str = ""
    driver_name: str = ""
    contact_number: str = ""


class VehicleDisplay(_CamelModel):
    id: str
    vehicle_type: str
    vehicle_number: str
    capacity: int
    from_district: str
    driver_name: str
    contact_number: str
    registration_time: datetime
    arrived: bool
    arrival_time: Optional[datetime] = None
    verification_link: Optional[str] = None


class RegistrationResult(_CamelModel):
    vehicle: VehicleDisplay
    verification_link: str
    link_saved: bool = True
    qr_code: Optional[str] = None      # data:image/png;base64,...
    qr_error: Optional[str] = None


class VehicleStats(_CamelModel):
    total: int = 0
    arrived: int = 0
    pending: int = 0
    by_district: dict[str, int] = Field(default_factory=dict)


class VehicleFilter(_CamelModel):
    search_term: str = ""
    status_filter: str = "all"        # all | arrived | pending
    district_filter: str = "all"

    class Config:
        frozen = True


class AdminVehicleList(_CamelModel):
    vehicles: list[VehicleDisplay]
    stats: VehicleStats
    districts: list[str]
    shown: int
    total: int


class VehicleOptions(_CamelModel):
    vehicle_types: list[str]
    districts: list[str]
