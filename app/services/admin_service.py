"""
Admin dashboard aggregation.
load_all is the only store call; stats, filtering and CSV export are pure
functions over display records so the router decides what state to keep.
"""

import csv
import io
from collections import Counter
from typing import Iterable, Optional, Sequence
from app.config import settings
from app.exceptions import FormValidationError
from app.schemas.vehicle import VehicleDisplay, VehicleFilter, VehicleStats
from app.services.vehicle_mapper import to_display_list
from app.services.vehicle_store import VehicleStore
from app.utils.logger import get_logger

logger = get_logger(__name__)

STATUS_FILTERS = ("all", "arrived", "pending")

CSV_HEADERS = [
    "Vehicle ID",
    "Vehicle Number",
    "Type",
    "Driver",
    "District",
    "Capacity",
    "Status",
    "Registered",
    "Arrived",
]

CSV_FILENAME = "vehicle-registrations.csv"


def load_all(store: VehicleStore) -> list[VehicleDisplay]:
    vehicles = to_display_list(store.list_all())
    logger.debug(f"[ADMIN] Loaded {len(vehicles)} vehicles")
    return vehicles


def compute_stats(records: Sequence[VehicleDisplay]) -> VehicleStats:
    total = len(records)
    arrived = sum(1 for r in records if r.arrived)
    by_district = Counter(r.from_district for r in records)
    return VehicleStats(total=total, arrived=arrived, pending=total - arrived, by_district=dict(by_district))


def filter_vehicles(records: Iterable[VehicleDisplay], criteria: Optional[VehicleFilter] = None) -> list[VehicleDisplay]:
    """Search term, status and district filters, ANDed. Keeps the input order."""
    criteria = criteria or VehicleFilter()
    status = (criteria.status_filter or "all").lower()
    if status not in STATUS_FILTERS:
        raise FormValidationError({"status": f"Status must be one of: {', '.join(STATUS_FILTERS)}"})
    term = criteria.search_term.strip().lower()
    district = criteria.district_filter or "all"

    result = []
    for r in records:
        if term and not (
            term in r.vehicle_number.lower()
            or term in r.driver_name.lower()
            or term in r.id.lower()
        ):
            continue
        if status == "arrived" and not r.arrived:
            continue
        if status == "pending" and r.arrived:
            continue
        if district != "all" and r.from_district != district:
            continue
        result.append(r)
    return result


def unique_districts(records: Iterable[VehicleDisplay]) -> list[str]:
    return sorted({r.from_district for r in records})


def to_csv(records: Iterable[VehicleDisplay], date_format: Optional[str] = None) -> str:
    """Header plus one row per vehicle. Fields are quoted when they contain commas or quotes."""
    date_format = date_format or settings.CSV_DATE_FORMAT
    buff = io.StringIO()
    writer = csv.writer(buff, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for r in records:
        writer.writerow([
            r.id,
            r.vehicle_number,
            r.vehicle_type,
            r.driver_name,
            r.from_district,
            r.capacity,
            "Arrived" if r.arrived else "Pending",
            r.registration_time.strftime(date_format),
            r.arrival_time.strftime(date_format) if r.arrival_time else "N/A",
        ])
    return buff.getvalue().rstrip("\n")
