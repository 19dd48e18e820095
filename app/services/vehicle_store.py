"""
Record store for the vehicles table.
The four operations the flows need: insert, update-by-id, get-by-id, list-all.
SQLAlchemy failures are rolled back and re-raised as StoreError; nothing is retried.
"""

from typing import Optional
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.exceptions import StoreError
from app.models.vehicle import Vehicle
from app.utils.logger import get_logger

logger = get_logger(__name__)


class VehicleStore:
    def __init__(self, db: Session):
        self.db = db

    def _fail(self, operation: str, exc: SQLAlchemyError) -> StoreError:
        self.db.rollback()
        logger.error(f"[STORE] {operation} failed: {exc}")
        return StoreError(f"Could not {operation} vehicle: {exc.__class__.__name__}", operation=operation)

    def insert(self, row: dict) -> Vehicle:
        """Insert one vehicle. The id is assigned by the column default, never by the caller."""
        row = {k: v for k, v in row.items() if k != "id"}
        vehicle = Vehicle(**row)
        try:
            self.db.add(vehicle)
            self.db.commit()
            self.db.refresh(vehicle)
        except SQLAlchemyError as e:
            raise self._fail("insert", e)
        return vehicle

    def update(self, vehicle_id: str, values: dict, only_pending: bool = False) -> Optional[Vehicle]:
        """
        Apply `values` to one row and return it re-read from the database.
        With only_pending=True the write is conditional on arrived=false;
        returns None when no row matched (unknown id, or already arrived).
        """
        stmt = update(Vehicle).where(Vehicle.id == vehicle_id)
        if only_pending:
            stmt = stmt.where(Vehicle.arrived.is_(False))
        try:
            result = self.db.execute(stmt.values(**values).execution_options(synchronize_session=False))
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("update", e)
        if result.rowcount == 0:
            return None
        return self.get_by_id(vehicle_id, refresh=True)

    def get_by_id(self, vehicle_id: str, refresh: bool = False) -> Optional[Vehicle]:
        try:
            vehicle = self.db.get(Vehicle, vehicle_id)
            if vehicle is not None and refresh:
                self.db.refresh(vehicle)
        except SQLAlchemyError as e:
            raise self._fail("fetch", e)
        return vehicle

    def list_all(self) -> list[Vehicle]:
        """All vehicles, newest registration first."""
        try:
            return self.db.query(Vehicle).order_by(Vehicle.registration_time.desc()).all()
        except SQLAlchemyError as e:
            raise self._fail("list", e)
