"""Shared pytest fixtures for finance tracker tests."""

import os
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from finance_tracker.api import app
from finance_tracker.config import AppConfig
from finance_tracker.database import SQLiteRepository
from finance_tracker.seeding import SampleDataService
from finance_tracker.services import FinanceService


@pytest.fixture
def temp_db_path():
    """Create a temporary database file path."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    yield Path(db_path)

    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def repository(temp_db_path):
    """Create a repository with an initialised schema."""
    repo = SQLiteRepository(temp_db_path)
    repo.initialise_schema()

    yield repo

    repo.close()


@pytest.fixture
def config(temp_db_path):
    return AppConfig(
        project_root=temp_db_path.parent,
        database_file=temp_db_path,
        currency="PKR",
        log_level="DEBUG",
        export_context="finance-tracker",
    )


@pytest.fixture
def finance_service(config, repository):
    """Create a FinanceService with a temporary database."""
    return FinanceService(config, repository)


@pytest.fixture
def sample_data_service(repository, finance_service):
    """Create a SampleDataService with a temporary database."""
    return SampleDataService(repository, finance_service)


@pytest.fixture
def client(temp_db_path, monkeypatch):
    """Run the application against a temporary database."""
    monkeypatch.setenv("FINANCE_TRACKER_DB_FILE", str(temp_db_path))
    with TestClient(app) as test_client:
        yield test_client
