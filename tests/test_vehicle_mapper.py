# tests/test_vehicle_mapper.py
"""Unit tests for the storage → display mapping."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import datetime
from pydantic import ValidationError
from app.models.vehicle import Vehicle
from app.schemas.vehicle import VehicleDisplay
from app.services.vehicle_mapper import to_display, to_display_list


def make_record(**overrides):
    fields = dict(
        id="veh-1",
        vehicle_type="Van",
        vehicle_number="TN58CD4321",
        capacity=12,
        from_district="Madurai",
        driver_name="S Ravi",
        contact_number="9123456780",
        registration_time=datetime(2026, 1, 10, 9, 30),
        arrived=False,
        arrival_time=None,
        verification_link=None,
    )
    fields.update(overrides)
    return Vehicle(**fields)


class TestVehicleMapper:
    def test_fields_are_copied(self):
        display = to_display(make_record())
        assert display.id == "veh-1"
        assert display.vehicle_number == "TN58CD4321"
        assert display.capacity == 12
        assert display.from_district == "Madurai"
        assert display.arrived is False
        assert display.arrival_time is None

    def test_wire_names_are_camel_case(self):
        dumped = to_display(make_record()).model_dump(by_alias=True)
        assert set(dumped) == {
            "id", "vehicleType", "vehicleNumber", "capacity", "fromDistrict", "driverName",
            "contactNumber", "registrationTime", "arrived", "arrivalTime", "verificationLink",
        }
        assert "vehicle_number" not in dumped

    def test_unflushed_arrived_default_resolves_to_false(self):
        record = make_record()
        record.arrived = None
        assert to_display(record).arrived is False

    def test_arrived_record(self):
        arrived_at = datetime(2026, 1, 11, 7, 0)
        display = to_display(make_record(arrived=True, arrival_time=arrived_at,
                                         verification_link="http://x/verify?id=veh-1"))
        assert display.arrived is True
        assert display.arrival_time == arrived_at
        assert display.verification_link == "http://x/verify?id=veh-1"

    def test_list_keeps_order(self):
        records = [make_record(id="b"), make_record(id="a"), make_record(id="c")]
        assert [d.id for d in to_display_list(records)] == ["b", "a", "c"]

    def test_display_model_does_not_read_orm_rows_directly(self):
        # to_display is the only path from a row to the wire model
        with pytest.raises(ValidationError):
            VehicleDisplay.model_validate(make_record())
