import asyncio

import pytest
from datetime import date
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shiftgrid.db.database import Base
from shiftgrid.db.models.employees import Employees
from shiftgrid.services.grid_editor.grid_index import GridIndex
from shiftgrid.services.grid_editor.persistence import InMemoryScheduleStore
from shiftgrid.services.grid_editor.session import EditorSession
from shiftgrid.services.grid_editor.types import CellKey


ROSTER = ["emp-1", "emp-2", "emp-3", "emp-4", "emp-5", "emp-6"]

NAMES = {
    "emp-1": "Ana Gomez",
    "emp-2": "Bruno Diaz",
    "emp-3": "Carla Ruiz",
    "emp-4": "Diego Sosa",
    "emp-5": "Elena Paz",
    "emp-6": "Fede Luna",
}


def get_test_month() -> tuple[int, int]:
    # March 2025 starts on a Saturday and has 31 days
    return 2025, 3


def get_test_dates() -> list[date]:
    year, month = get_test_month()
    return [date(year, month, day) for day in range(1, 32)]


def cell(row: int, col: int) -> CellKey:
    """Key of the cell at (roster row, date column) of the test month."""
    return CellKey(ROSTER[row], get_test_dates()[col])


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def grid() -> GridIndex:
    return GridIndex(ROSTER, get_test_dates())


@pytest.fixture
def store() -> InMemoryScheduleStore:
    return InMemoryScheduleStore()


@pytest.fixture
def session(store) -> EditorSession:
    # the store is both the original source and the persistence collaborator
    return EditorSession(
        ROSTER,
        get_test_dates(),
        store,
        persistence=store,
        employee_names=NAMES,
        positions={"cashier": "Cashier", "kitchen": "Kitchen"},
    )


@pytest.fixture
def db():
    """Fresh in-memory SQLite database with the roster loaded."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    db_session = TestingSession()

    for order, emp_id in enumerate(ROSTER):
        db_session.add(Employees(id=emp_id, full_name=NAMES[emp_id], display_order=order, is_active=True))
    db_session.commit()

    try:
        yield db_session
    finally:
        db_session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()
