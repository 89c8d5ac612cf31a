import os
from collections.abc import Callable
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from linkbio.adapters.clock import SystemClock
from linkbio.adapters.sqlite.repos import (
    SQLiteAnalyticsRepo,
    SQLiteLinkRepo,
    SQLiteProfileRepo,
    SQLiteUnitOfWork,
)
from linkbio.api.auth_utils import decode_access_token
from linkbio.components.analytics import (
    AnalyticsConfig,
    EventIngestionService,
    ReportingService,
)
from linkbio.components.links import LinkConfig, LinkService
from linkbio.components.onboarding import OnboardingService
from linkbio.components.profiles import ProfileConfig, ProfileService
from linkbio.ports.clock import ClockPort
from linkbio.rules.loader import load_rules
from linkbio.rules.models import Rules

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("LINKBIO_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "linkbio.db")
        self.rules_path = Path(os.environ.get("LINKBIO_RULES_PATH", self.base_dir / "rules.yaml"))
        self.migrations_dir = str(self.base_dir / "migrations")
        self.cors_origins = [
            origin.strip()
            for origin in os.environ.get("LINKBIO_CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(",")
            if origin.strip()
        ]


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


# --- Clock ---
_clock_instance: SystemClock | None = None


def get_clock() -> ClockPort:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


# --- Repos ---
def get_profile_repo(settings: Settings = Depends(get_settings)) -> SQLiteProfileRepo:
    return SQLiteProfileRepo(settings.db_path)


def get_link_repo(settings: Settings = Depends(get_settings)) -> SQLiteLinkRepo:
    return SQLiteLinkRepo(settings.db_path)


def get_analytics_repo(settings: Settings = Depends(get_settings)) -> SQLiteAnalyticsRepo:
    return SQLiteAnalyticsRepo(settings.db_path)


def get_uow_factory(
    settings: Settings = Depends(get_settings),
) -> Callable[[], SQLiteUnitOfWork]:
    return lambda: SQLiteUnitOfWork(settings.db_path)


# --- Component Services ---
def get_profile_service(
    repo: SQLiteProfileRepo = Depends(get_profile_repo),
    link_repo: SQLiteLinkRepo = Depends(get_link_repo),
    clock: ClockPort = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> ProfileService:
    """Get profile component service."""
    return ProfileService(
        repo=repo, links=link_repo, clock=clock, config=ProfileConfig.from_rules(rules.profiles)
    )


def get_link_service(
    repo: SQLiteLinkRepo = Depends(get_link_repo),
    profile_repo: SQLiteProfileRepo = Depends(get_profile_repo),
    clock: ClockPort = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> LinkService:
    """Get link component service."""
    return LinkService(
        repo=repo, profiles=profile_repo, clock=clock, config=LinkConfig.from_rules(rules.links)
    )


def get_ingestion_service(
    events: SQLiteAnalyticsRepo = Depends(get_analytics_repo),
    profile_repo: SQLiteProfileRepo = Depends(get_profile_repo),
    link_repo: SQLiteLinkRepo = Depends(get_link_repo),
    clock: ClockPort = Depends(get_clock),
) -> EventIngestionService:
    return EventIngestionService(
        events=events, profiles=profile_repo, links=link_repo, clock=clock
    )


def get_reporting_service(
    repo: SQLiteAnalyticsRepo = Depends(get_analytics_repo),
    profile_repo: SQLiteProfileRepo = Depends(get_profile_repo),
    link_repo: SQLiteLinkRepo = Depends(get_link_repo),
    clock: ClockPort = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> ReportingService:
    return ReportingService(
        repo=repo,
        profiles=profile_repo,
        links=link_repo,
        clock=clock,
        config=AnalyticsConfig.from_rules(rules.analytics),
    )


def get_onboarding_service(
    profile_repo: SQLiteProfileRepo = Depends(get_profile_repo),
    uow_factory: Callable[[], SQLiteUnitOfWork] = Depends(get_uow_factory),
    clock: ClockPort = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> OnboardingService:
    return OnboardingService(
        profiles=profile_repo,
        uow_factory=uow_factory,
        clock=clock,
        profile_config=ProfileConfig.from_rules(rules.profiles),
        link_config=LinkConfig.from_rules(rules.links),
    )


# --- Auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token", auto_error=False)


async def get_current_owner_id(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
) -> str:
    """
    Caller identity from the session token.

    The token comes from the HttpOnly ``access_token`` cookie or the
    Authorization header; its ``sub`` claim is the owner id.
    """
    cookie_token = request.cookies.get("access_token")
    if cookie_token:
        token = cookie_token.split(" ", 1)[1] if cookie_token.startswith("Bearer ") else cookie_token

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_access_token(token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    owner_id = payload.get("sub")
    if not owner_id or not isinstance(owner_id, str):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    return owner_id
