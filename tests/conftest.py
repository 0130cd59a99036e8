import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from database import Database
from main import create_app
from services.code_sequencer import CodeSequencer
from services.request_store import RequestStore
from services.status_machine import StatusMachine

FIXED_NOW = datetime(2025, 3, 14, 9, 30)


@pytest.fixture
def database():
    database = Database("sqlite://")
    database.init_db()
    yield database
    database.dispose()


@pytest.fixture
def db(database):
    session = database.SessionLocal()
    yield session
    session.close()


@pytest.fixture
def sequencer():
    return CodeSequencer(clock=lambda: FIXED_NOW)


@pytest.fixture
def store(sequencer):
    return RequestStore(sequencer=sequencer)


@pytest.fixture
def machine(store):
    return StatusMachine(store)


@pytest.fixture
def client(database):
    app = create_app(database=database)
    with TestClient(app) as test_client:
        yield test_client


def purchase_header(**overrides):
    header = {
        "user_id": 7,
        "request_by": "Maria Santos",
        "employee_id": "EMP-007",
        "branch": "Makati",
        "department": "Operations",
        "request_date": "2025-03-14",
        "purpose": "Office supplies",
    }
    header.update(overrides)
    return header


def purchase_items():
    return [
        {"purchase_item": "Bond paper A4", "quantity": 10},
        {"purchase_item": "Stapler", "quantity": "2"},
    ]
