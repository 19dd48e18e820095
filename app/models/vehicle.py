"""
Registered event vehicles table.
One row per vehicle; `arrived` flips once when the vehicle is verified at the venue.
`verification_link` is backfilled right after insert because it embeds the generated id.
"""

import uuid
from sqlalchemy import Boolean, Column, DateTime, Integer, String
from app.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(String(36), primary_key=True, default=_new_id)
    vehicle_type = Column(String(50), nullable=False)
    vehicle_number = Column(String(50), nullable=False, index=True)
    capacity = Column(Integer, nullable=False)
    from_district = Column(String(100), nullable=False, index=True)
    driver_name = Column(String(200), nullable=False)
    contact_number = Column(String(30), nullable=False)
    registration_time = Column(DateTime, nullable=False, index=True)
    arrived = Column(Boolean, default=False, nullable=False)
    arrival_time = Column(DateTime)
    verification_link = Column(String(500))

    def __repr__(self):
        return f"<Vehicle {self.vehicle_number} id={self.id} arrived={self.arrived}>"
