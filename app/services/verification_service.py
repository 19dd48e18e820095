"""
Arrival verification flow.

A vehicle is looked up by id (from the QR link's ?id= or typed in by hand),
then marked as arrived exactly once. The arrival write is conditional on
arrived=false, so a second marker racing on the same id gets AlreadyArrivedError
instead of overwriting arrival_time.

VerificationSession tracks one lookup session:
    IDLE → LOOKING_UP → FOUND | NOT_FOUND
    FOUND (pending) → MARKING → FOUND (arrived)
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from app.exceptions import (
    AlreadyArrivedError,
    FormValidationError,
    InvalidTransitionError,
    StoreError,
    VehicleNotFoundError,
)
from app.schemas.vehicle import VehicleDisplay
from app.services.vehicle_mapper import to_display
from app.services.vehicle_store import VehicleStore
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _clean_id(vehicle_id: Optional[str]) -> str:
    vehicle_id = (vehicle_id or "").strip()
    if not vehicle_id:
        raise FormValidationError({"id": "Please enter a vehicle ID"})
    return vehicle_id


def lookup(store: VehicleStore, vehicle_id: Optional[str]) -> VehicleDisplay:
    vehicle_id = _clean_id(vehicle_id)
    vehicle = store.get_by_id(vehicle_id)
    if vehicle is None:
        logger.info(f"[VERIFY] Lookup miss for id={vehicle_id}")
        raise VehicleNotFoundError(vehicle_id)
    logger.info(f"[VERIFY] Found {vehicle.vehicle_number} id={vehicle_id} arrived={vehicle.arrived}")
    return to_display(vehicle)


def mark_arrived(store: VehicleStore, vehicle_id: Optional[str]) -> VehicleDisplay:
    """Flip a pending vehicle to arrived. Never touches a vehicle that has already arrived."""
    vehicle_id = _clean_id(vehicle_id)
    vehicle = store.get_by_id(vehicle_id)
    if vehicle is None:
        raise VehicleNotFoundError(vehicle_id)
    if vehicle.arrived:
        raise AlreadyArrivedError(vehicle_id)

    # Clock skew between writers must not put arrival before registration
    arrival_time = max(datetime.utcnow(), vehicle.registration_time)
    updated = store.update(vehicle_id, {"arrived": True, "arrival_time": arrival_time}, only_pending=True)
    if updated is None:
        logger.warning(f"[VERIFY] {vehicle_id} was marked arrived by another session first")
        raise AlreadyArrivedError(vehicle_id)

    logger.info(f"[VERIFY] {updated.vehicle_number} id={vehicle_id} arrived at {updated.arrival_time}")
    return to_display(updated)


class VerificationState(str, Enum):
    IDLE = "idle"
    LOOKING_UP = "looking_up"
    FOUND = "found"
    NOT_FOUND = "not_found"
    MARKING = "marking"


class VerificationSession:
    """State of one verification screen. Holds the last successfully loaded vehicle."""

    def __init__(self, store: VehicleStore):
        self.store = store
        self.state = VerificationState.IDLE
        self.vehicle: Optional[VehicleDisplay] = None

    @property
    def can_mark_arrived(self) -> bool:
        return self.state == VerificationState.FOUND and self.vehicle is not None and not self.vehicle.arrived

    def lookup(self, vehicle_id: Optional[str]) -> VehicleDisplay:
        previous = self.state
        self.state = VerificationState.LOOKING_UP
        try:
            vehicle = lookup(self.store, vehicle_id)
        except VehicleNotFoundError:
            # The previously shown vehicle (if any) stays on screen
            self.state = VerificationState.NOT_FOUND
            raise
        except (FormValidationError, StoreError):
            self.state = previous
            raise
        self.vehicle = vehicle
        self.state = VerificationState.FOUND
        return vehicle

    def mark_arrived(self) -> VehicleDisplay:
        if self.vehicle is None or self.state != VerificationState.FOUND:
            raise InvalidTransitionError(f"Cannot mark arrival while {self.state.value}")
        if self.vehicle.arrived:
            raise AlreadyArrivedError(self.vehicle.id)

        self.state = VerificationState.MARKING
        try:
            self.vehicle = mark_arrived(self.store, self.vehicle.id)
        finally:
            self.state = VerificationState.FOUND
        return self.vehicle

    def clear(self):
        self.vehicle = None
        self.state = VerificationState.IDLE
