"""
Domain errors raised by the registration, verification and admin services.
Each one is scoped to a single user action; app.main maps them to HTTP responses.
"""

from typing import Optional


class VehicleRegistryError(Exception):
    """Base class for every error the services raise on purpose."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FormValidationError(VehicleRegistryError):
    """One or more input fields are missing or malformed. Raised before any store call."""

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(self.errors.values()) or "Invalid input")


class StoreError(VehicleRegistryError):
    """The record store rejected an insert, update or fetch."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation


class VehicleNotFoundError(VehicleRegistryError):
    def __init__(self, vehicle_id: str):
        super().__init__(f"Vehicle not found: {vehicle_id}")
        self.vehicle_id = vehicle_id


class AlreadyArrivedError(VehicleRegistryError):
    def __init__(self, vehicle_id: str):
        super().__init__(f"Vehicle {vehicle_id} is already marked as arrived")
        self.vehicle_id = vehicle_id


class InvalidTransitionError(VehicleRegistryError):
    """A verification session was asked to do something its current state does not allow."""


class EncodingError(VehicleRegistryError):
    """The QR image for a verification link could not be generated."""
