"""
Vehicle registration flow.

How it works:
  - validate_form checks every field and reports all failures at once (FormValidationError)
  - register_vehicle inserts the row (arrived=False, no link yet)
  - the verification link embeds the new id, so it is written back in a second update
  - the link is encoded as a QR image for display/download

The second write and the QR step are best-effort: if either fails the vehicle
stays registered and the result says what is missing.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Union
from app.exceptions import EncodingError, FormValidationError, StoreError
from app.schemas.vehicle import RegistrationForm, RegistrationResult
from app.services import qr_service
from app.services.vehicle_mapper import to_display
from app.services.vehicle_store import VehicleStore
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Seats per vehicle; also keeps the value inside a 32-bit INTEGER column
MAX_CAPACITY = 1000

VEHICLE_TYPES = ["Van", "Bus", "Mini Bus", "Car", "Bike", "Auto Rickshaw", "Truck", "Tempo"]

DISTRICTS = [
    "Chennai", "Coimbatore", "Madurai", "Tiruchirappalli", "Salem", "Tirunelveli",
    "Vellore", "Erode", "Thanjavur", "Dindigul", "Cuddalore", "Kanchipuram",
    "Namakkal", "Karur", "Tiruvannamalai", "Virudhunagar", "Theni", "Sivaganga",
    "Ramanathapuram", "Thoothukudi", "Kanniyakumari", "Dharmapuri", "Krishnagiri",
    "The Nilgiris", "Nagapattinam", "Pudukkottai", "Tiruvarur", "Ariyalur",
    "Perambalur", "Kallakurichi", "Chengalpattu", "Tenkasi", "Tirupathur",
    "Mayiladuthurai", "Ranipet",
]


@dataclass(frozen=True)
class ValidatedRegistration:
    vehicle_type: str
    vehicle_number: str
    capacity: int
    from_district: str
    driver_name: str
    contact_number: str


def validate_form(form: Union[RegistrationForm, dict]) -> ValidatedRegistration:
    if isinstance(form, dict):
        form = RegistrationForm.model_validate(form)

    vehicle_type = form.vehicle_type.strip()
    vehicle_number = form.vehicle_number.strip().upper()
    capacity_raw = str(form.capacity).strip()
    from_district = form.from_district.strip()
    driver_name = form.driver_name.strip()
    contact_number = form.contact_number.strip()

    errors = {}
    if not vehicle_type:
        errors["vehicleType"] = "Vehicle type is required"
    if len(vehicle_number) < 3:
        errors["vehicleNumber"] = "Vehicle number must be at least 3 characters"

    capacity = 0
    if not capacity_raw:
        errors["capacity"] = "Capacity is required"
    elif not capacity_raw.isdecimal():
        errors["capacity"] = "Capacity must be a number"
    else:
        capacity = int(capacity_raw)
        if capacity <= 0:
            errors["capacity"] = "Capacity must be a positive number"
        elif capacity > MAX_CAPACITY:
            errors["capacity"] = f"Capacity must be at most {MAX_CAPACITY}"

    if not from_district:
        errors["fromDistrict"] = "District is required"
    if len(driver_name) < 2:
        errors["driverName"] = "Driver name must be at least 2 characters"
    if len(contact_number) < 10:
        errors["contactNumber"] = "Contact number must be at least 10 digits"

    if errors:
        raise FormValidationError(errors)

    return ValidatedRegistration(
        vehicle_type=vehicle_type,
        vehicle_number=vehicle_number,
        capacity=capacity,
        from_district=from_district,
        driver_name=driver_name,
        contact_number=contact_number,
    )


def build_verification_link(base_url: str, vehicle_id: str) -> str:
    return f"{base_url.rstrip('/')}/verify?id={vehicle_id}"


def register_vehicle(store: VehicleStore, form: Union[RegistrationForm, dict], base_url: str) -> RegistrationResult:
    data = validate_form(form)

    # Step 1: insert. StoreError propagates to the caller unchanged.
    vehicle = store.insert({
        "vehicle_type": data.vehicle_type,
        "vehicle_number": data.vehicle_number,
        "capacity": data.capacity,
        "from_district": data.from_district,
        "driver_name": data.driver_name,
        "contact_number": data.contact_number,
        "registration_time": datetime.utcnow(),
        "arrived": False,
        "arrival_time": None,
        "verification_link": None,
    })
    # Row attributes expire on a failed write's rollback; keep what we need now
    vehicle_id = vehicle.id
    display = to_display(vehicle)
    logger.info(f"[REGISTER] {display.vehicle_number} ({display.vehicle_type}) from {display.from_district} → id={vehicle_id}")

    # Step 2: backfill the self-referencing link
    link = build_verification_link(base_url, vehicle_id)
    link_saved = False
    try:
        updated = store.update(vehicle_id, {"verification_link": link})
        if updated is not None:
            display = to_display(updated)
            link_saved = True
        else:
            logger.warning(f"[REGISTER] Vehicle {vehicle_id} vanished before its link was saved")
    except StoreError as e:
        logger.warning(f"[REGISTER] Vehicle {vehicle_id} registered but link not saved: {e.message}")

    # Step 3: QR image
    qr_code, qr_error = None, None
    try:
        qr_code = qr_service.encode_data_url(link)
    except EncodingError as e:
        qr_error = e.message
        logger.warning(f"[REGISTER] QR code not generated for {vehicle_id}: {e.message}")

    return RegistrationResult(
        vehicle=display,
        verification_link=link,
        link_saved=link_saved,
        qr_code=qr_code,
        qr_error=qr_error,
    )
