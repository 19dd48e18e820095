"""
Storage row → display record.
Every read path goes through here so column names never reach the API layer.
"""

from typing import Iterable
from app.models.vehicle import Vehicle
from app.schemas.vehicle import VehicleDisplay


def to_display(record: Vehicle) -> VehicleDisplay:
    return VehicleDisplay(
        id=record.id,
        vehicle_type=record.vehicle_type,
        vehicle_number=record.vehicle_number,
        capacity=record.capacity,
        from_district=record.from_district,
        driver_name=record.driver_name,
        contact_number=record.contact_number,
        registration_time=record.registration_time,
        arrived=bool(record.arrived),
        arrival_time=record.arrival_time,
        verification_link=record.verification_link,
    )


def to_display_list(records: Iterable[Vehicle]) -> list[VehicleDisplay]:
    return [to_display(r) for r in records]
