import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from linkbio import __version__
from linkbio.adapters.sqlite.migrator import SQLiteMigrator
from linkbio.api.deps import get_settings
from linkbio.app_shell.config import validate_ops_rules
from linkbio.rules.loader import load_rules

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    logging.basicConfig(level=logging.INFO)
    settings = get_settings()

    # Load rules, validate ops and migrate on startup (fail-fast)
    try:
        rules = load_rules(settings.rules_path)
        validate_ops_rules(rules, settings.data_dir)
        logger.info("Rules loaded from %s", settings.rules_path)
        SQLiteMigrator(settings.db_path, settings.migrations_dir).run_migrations()
    except Exception:
        logger.critical("Startup failed", exc_info=True)
        sys.exit(1)

    yield


app = FastAPI(
    title="linkbio API",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Routers ---
from linkbio.api.routes import analytics, links, onboarding, profiles, public  # noqa: E402

app.include_router(links.router, prefix="/api", tags=["Links"])
app.include_router(public.router, prefix="/api", tags=["Public"])
app.include_router(analytics.router, prefix="/api", tags=["Analytics"])
app.include_router(profiles.router, prefix="/api", tags=["Profile"])
app.include_router(onboarding.router, prefix="/api", tags=["Onboarding"])


# CORS (Allow Frontend)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "api"}
