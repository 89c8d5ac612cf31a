from datetime import UTC, datetime
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from linkbio.adapters.clock import FixedClock
from linkbio.adapters.sqlite.migrator import SQLiteMigrator
from linkbio.adapters.sqlite.repos import (
    SQLiteAnalyticsRepo,
    SQLiteLinkRepo,
    SQLiteProfileRepo,
    SQLiteUnitOfWork,
)
from linkbio.api.auth_utils import create_access_token
from linkbio.api.deps import Settings, get_clock, get_rules, get_settings
from linkbio.api.main import app
from linkbio.components.analytics import AnalyticsConfig, EventIngestionService, ReportingService
from linkbio.components.links import LinkConfig, LinkService
from linkbio.components.onboarding import OnboardingService
from linkbio.components.profiles import ProfileConfig, ProfileService
from linkbio.rules.loader import load_rules

ROOT = Path(__file__).resolve().parents[1]
MIGRATIONS_DIR = str(ROOT / "migrations")
RULES_PATH = ROOT / "rules.yaml"

# 2024-03-15 is a Friday.
NOW = datetime(2024, 3, 15, 10, 0, 0, tzinfo=UTC)


@pytest.fixture
def db_path(tmp_path):
    """Temporary SQLite database with all migrations applied."""
    path = str(tmp_path / "linkbio.db")
    SQLiteMigrator(path, MIGRATIONS_DIR).run_migrations()
    return path


@pytest.fixture
def rules():
    """The real rules file from the project root."""
    return load_rules(RULES_PATH)


@pytest.fixture
def clock():
    return FixedClock(NOW)


# --- Repos ---


@pytest.fixture
def profile_repo(db_path):
    return SQLiteProfileRepo(db_path)


@pytest.fixture
def link_repo(db_path):
    return SQLiteLinkRepo(db_path)


@pytest.fixture
def analytics_repo(db_path):
    return SQLiteAnalyticsRepo(db_path)


# --- Services ---


@pytest.fixture
def profile_service(profile_repo, link_repo, clock, rules):
    return ProfileService(
        profile_repo, link_repo, clock, ProfileConfig.from_rules(rules.profiles)
    )


@pytest.fixture
def link_service(link_repo, profile_repo, clock, rules):
    return LinkService(link_repo, profile_repo, clock, LinkConfig.from_rules(rules.links))


@pytest.fixture
def ingestion_service(analytics_repo, profile_repo, link_repo, clock):
    return EventIngestionService(analytics_repo, profile_repo, link_repo, clock)


@pytest.fixture
def reporting_service(analytics_repo, profile_repo, link_repo, clock, rules):
    return ReportingService(
        analytics_repo,
        profile_repo,
        link_repo,
        clock,
        AnalyticsConfig.from_rules(rules.analytics),
    )


@pytest.fixture
def onboarding_service(db_path, profile_repo, clock, rules):
    return OnboardingService(
        profile_repo,
        lambda: SQLiteUnitOfWork(db_path),
        clock,
        ProfileConfig.from_rules(rules.profiles),
        LinkConfig.from_rules(rules.links),
    )


@pytest.fixture
def make_profile(profile_service):
    """Factory: create a profile and return it."""

    def _make(owner_id: str = "owner-1", username: str = "alice"):
        profile, errors = profile_service.create(owner_id=owner_id, username=username)
        assert errors == []
        assert profile is not None
        return profile

    return _make


# --- API ---


@pytest.fixture
def client(db_path, rules, clock):
    """TestClient bound to the temp database; lifespan is not run."""
    settings = Settings()
    settings.db_path = db_path

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_rules] = lambda: rules
    app.dependency_overrides[get_clock] = lambda: clock
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def auth_headers(owner_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token({'sub': owner_id})}"}


@pytest.fixture
def alice_headers():
    return auth_headers("owner-1")


@pytest.fixture
def bob_headers():
    return auth_headers("owner-2")
