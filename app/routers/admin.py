"""Admin dashboard: all registrations with stats, filters and CSV export"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.vehicle import AdminVehicleList, VehicleFilter
from app.services.admin_service import (
    CSV_FILENAME,
    compute_stats,
    filter_vehicles,
    load_all,
    to_csv,
    unique_districts,
)
from app.services.vehicle_store import VehicleStore

router = APIRouter()


def _criteria(search: str = "", status: str = "all", district: str = "all") -> VehicleFilter:
    return VehicleFilter(search_term=search, status_filter=status, district_filter=district)


@router.get("/admin/vehicles", response_model=AdminVehicleList, summary="List and filter registrations")
def list_vehicles(criteria: VehicleFilter = Depends(_criteria), db: Session = Depends(get_db)):
    """
    Stats and the district list always cover every registration;
    `vehicles` is the filtered subset, newest first.
    """
    vehicles = load_all(VehicleStore(db))
    shown = filter_vehicles(vehicles, criteria)
    return AdminVehicleList(
        vehicles=shown,
        stats=compute_stats(vehicles),
        districts=unique_districts(vehicles),
        shown=len(shown),
        total=len(vehicles),
    )


@router.get("/admin/vehicles/export", summary="Export registrations as CSV")
def export_vehicles(criteria: VehicleFilter = Depends(_criteria), db: Session = Depends(get_db)):
    """Same filters as the list endpoint."""
    vehicles = filter_vehicles(load_all(VehicleStore(db)), criteria)
    return Response(
        content=to_csv(vehicles),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'},
    )
