"""Pytest configuration and fixtures for service layer tests."""

import csv
import io

import openpyxl
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, scoped_session

from src import models  # noqa: F401  (registers tables with Base)
from src.models.base import Base
from src.services.database import create_database_engine
from src.utils.config import reset_config
from src.utils.constants import SECTION_HEADERS, SHEET_NAMES


@pytest.fixture(scope="function")
def test_db():
    """Provide a clean test database for each test function.

    This fixture:
    1. Creates an in-memory SQLite database shared across threads
    2. Creates all tables
    3. Provides the database to the test
    4. Drops all tables after the test completes
    """
    # StaticPool keeps one connection, so the API test client's worker
    # threads see the same in-memory database
    engine = create_database_engine("sqlite:///:memory:")

    # Create all tables
    Base.metadata.create_all(engine)

    # Create session factory
    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    Session = scoped_session(session_factory)

    # Monkey-patch the global session factory for tests
    import src.services.database as db_module

    original_get_session = db_module.get_session_factory
    db_module.get_session_factory = lambda: Session

    # Provide database to test
    yield Session

    # Cleanup
    Session.remove()
    Base.metadata.drop_all(engine)
    engine.dispose()

    # Restore original session factory
    db_module.get_session_factory = original_get_session


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Rebuild the config singleton around each test so env overrides apply."""
    monkeypatch.delenv("MENU_IMPORT_MAX_FILE_SIZE", raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture(scope="function")
def restaurant(test_db):
    """Provide an active restaurant for tests."""
    from src.services import restaurant_service

    return restaurant_service.create_restaurant(name="Test Bistro")


@pytest.fixture(scope="function")
def other_restaurant(test_db):
    """Provide a second tenant for isolation tests."""
    from src.services import restaurant_service

    return restaurant_service.create_restaurant(name="Other Diner")


@pytest.fixture
def make_xlsx():
    """Build XLSX bytes from {section: [row, ...]}.

    Each section's sheet gets the canonical header row unless the section
    maps to a (headers, rows) tuple, which supplies custom headers.
    """

    def _make(sections):
        wb = openpyxl.Workbook()
        wb.remove(wb.active)
        for section, content in sections.items():
            if isinstance(content, tuple):
                headers, rows = content
            else:
                headers, rows = SECTION_HEADERS[section], content
            ws = wb.create_sheet(title=SHEET_NAMES.get(section, section))
            ws.append(list(headers))
            for row in rows:
                ws.append(list(row))
        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue()

    return _make


@pytest.fixture
def make_csv():
    """Build UTF-8 CSV bytes from a header row and data rows."""

    def _make(headers, rows, bom=False):
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(headers)
        for row in rows:
            writer.writerow(row)
        text = buffer.getvalue()
        return text.encode("utf-8-sig" if bom else "utf-8")

    return _make


@pytest.fixture
def client(test_db):
    """Provide an API test client bound to the test database."""
    from src.api import create_app

    with TestClient(create_app()) as test_client:
        yield test_client
