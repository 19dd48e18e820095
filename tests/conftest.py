# tests/conftest.py
"""Shared fixtures: in-memory SQLite session, vehicle factory, API client."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from app.database import create_tables, get_db
from app.services.vehicle_store import VehicleStore


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def store(db):
    return VehicleStore(db)


@pytest.fixture
def make_vehicle(store):
    """Insert a vehicle straight into the store, bypassing the registration flow."""
    def _make(**overrides):
        row = {
            "vehicle_type": "Bus",
            "vehicle_number": "TN01AB1234",
            "capacity": 40,
            "from_district": "Chennai",
            "driver_name": "A Kumar",
            "contact_number": "9876543210",
            "registration_time": datetime(2026, 1, 10, 8, 0, 0),
            "arrived": False,
            "arrival_time": None,
        }
        row.update(overrides)
        return store.insert(row)
    return _make


@pytest.fixture
def client(db):
    from fastapi.testclient import TestClient
    from app.main import app

    app.dependency_overrides[get_db] = lambda: db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
