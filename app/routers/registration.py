"""Vehicle registration: form submit, QR download, form options"""

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session
from app.config import settings
from app.database import get_db
from app.exceptions import VehicleNotFoundError
from app.schemas.vehicle import RegistrationForm, RegistrationResult, VehicleOptions
from app.services import qr_service
from app.services.registration_service import (
    DISTRICTS,
    VEHICLE_TYPES,
    build_verification_link,
    register_vehicle,
)
from app.services.vehicle_store import VehicleStore

router = APIRouter()


def _base_url(request: Request) -> str:
    return settings.PUBLIC_BASE_URL or str(request.base_url)


@router.get("/options", response_model=VehicleOptions, summary="Vehicle types and districts for the form")
def get_options():
    return VehicleOptions(vehicle_types=VEHICLE_TYPES, districts=DISTRICTS)


@router.post(
    "/vehicles",
    response_model=RegistrationResult,
    status_code=status.HTTP_201_CREATED,
    summary="Register a vehicle",
)
def create_vehicle(body: RegistrationForm, request: Request, db: Session = Depends(get_db)):
    """
    Validates the form, stores the vehicle and returns it with its
    verification link and QR code (PNG data URL).
    `linkSaved=false` or a `qrError` means the vehicle is registered but that extra step failed.
    """
    return register_vehicle(VehicleStore(db), body, _base_url(request))


@router.get(
    "/vehicles/{vehicle_id}/qr.png",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}},
    summary="Download the QR code of a vehicle",
)
def download_qr(vehicle_id: str, request: Request, db: Session = Depends(get_db)):
    vehicle = VehicleStore(db).get_by_id(vehicle_id)
    if vehicle is None:
        raise VehicleNotFoundError(vehicle_id)
    link = vehicle.verification_link or build_verification_link(_base_url(request), vehicle.id)
    png = qr_service.encode_png(link)
    return Response(
        content=png,
        media_type="image/png",
        headers={"Content-Disposition": f'attachment; filename="vehicle-qr-{vehicle.id}.png"'},
    )
