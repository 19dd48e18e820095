"""Arrival verification: look up a vehicle by id, mark it as arrived"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional
from app.database import get_db
from app.schemas.vehicle import VehicleDisplay
from app.services.verification_service import VerificationSession, lookup
from app.services.vehicle_store import VehicleStore

router = APIRouter()


@router.get("/verify", response_model=VehicleDisplay, summary="Look up a vehicle by id")
def verify_vehicle(id: Optional[str] = None, db: Session = Depends(get_db)):
    """Target of the QR verification link (`/verify?id=...`). 404 when the id is unknown."""
    return lookup(VehicleStore(db), id)


@router.post("/verify/{vehicle_id}/arrive", response_model=VehicleDisplay, summary="Mark a vehicle as arrived")
def mark_vehicle_arrived(vehicle_id: str, db: Session = Depends(get_db)):
    """One-way: 409 if the vehicle has already arrived."""
    session = VerificationSession(VehicleStore(db))
    session.lookup(vehicle_id)
    return session.mark_arrived()
