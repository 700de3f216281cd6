"""Shared pytest fixtures for fiscoets tests."""

import tempfile
import os
from decimal import Decimal
import pytest

from fiscoets.database.factories import create_sqlite_database
from fiscoets.domain.activity import ActivityService
from fiscoets.domain.entities import EntityType, TargetType
from fiscoets.domain.evaluation import EvaluationService
from fiscoets.domain.fiscal_year import FiscalYearService
from fiscoets.domain.movement import MovementService
from fiscoets.domain.profile import ProfileService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def profile_service(temp_db):
    """Create a ProfileService with a temporary database."""
    return ProfileService(temp_db)


@pytest.fixture
def fiscal_year_service(temp_db):
    """Create a FiscalYearService with a temporary database."""
    return FiscalYearService(temp_db)


@pytest.fixture
def activity_service(temp_db):
    """Create an ActivityService with a temporary database."""
    return ActivityService(temp_db)


@pytest.fixture
def movement_service(temp_db):
    """Create a MovementService with a temporary database."""
    return MovementService(temp_db)


@pytest.fixture
def evaluation_service(temp_db):
    """Create an EvaluationService with a temporary database."""
    return EvaluationService(temp_db)


@pytest.fixture
def sample_profile(profile_service):
    """Configure an APS profile."""
    return profile_service.set_profile(EntityType.APS, name="Circolo Test")


@pytest.fixture
def sample_year(fiscal_year_service):
    """Create fiscal year 2025 with €40.000 prior-year revenue."""
    fiscal_year_id = fiscal_year_service.create_fiscal_year(2025, Decimal("40000"))
    return fiscal_year_service.get_fiscal_year(fiscal_year_id)


@pytest.fixture
def sample_activities(activity_service, sample_year):
    """Create one activity of each family in the sample year."""
    return {
        "aig": activity_service.create_activity(
            sample_year.id, TargetType.ACTIVITY_OF_GENERAL_INTEREST, "Corsi"
        ),
        "diverse": activity_service.create_activity(
            sample_year.id, TargetType.DIVERSE_ACTIVITY, "Bar sociale"
        ),
        "fundraiser": activity_service.create_activity(
            sample_year.id, TargetType.FUNDRAISER, "Lotteria"
        ),
    }


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
