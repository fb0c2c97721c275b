"""FastAPI backend for photostats.

Exposes the diagnostics report to the gallery's admin dashboard.  The record
store connection is opened once at startup, shared by every request, and
closed on shutdown.
"""

import logging
import secrets
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel

from photostats.config import get_settings
from photostats.observability.metrics import (
    APP_INFO,
    RECORD_STORE_HEALTHY,
    REQUEST_DURATION,
    REQUESTS_IN_PROGRESS,
    REQUESTS_TOTAL,
)
from photostats.report.assembler import DiagnosticsReportAssembler
from photostats.report.models import DiagnosticsReport
from photostats.store.records import RecordStore
from photostats.workers.pool import provider_from_settings

logger = logging.getLogger(__name__)

STATS_ENDPOINT = "/api/system/stats"

_bearer = HTTPBearer(auto_error=False)


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """Response body for GET /health."""

    status: str
    record_store: str
    detail: str | None = None


# ---------------------------------------------------------------------------
# Application lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the record store and build the assembler once at startup."""
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    APP_INFO.info({"version": "0.1.0"})

    store = RecordStore(settings.db_path)
    try:
        store.open()
    except Exception:
        logger.exception("Failed to open record store at startup")
        raise

    app.state.store = store
    app.state.assembler = DiagnosticsReportAssembler(store, provider_from_settings())
    logger.info("photostats ready (record store: %s)", settings.db_path)
    yield
    store.close()
    logger.info("Shutting down photostats")


app = FastAPI(title="Photo Gallery Diagnostics", lifespan=lifespan)


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------


async def require_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),  # noqa: B008
) -> None:
    """Reject the request unless it carries the configured API token.

    Authentication is disabled when no token is configured.
    """
    expected = get_settings().api_token
    if not expected:
        return
    if credentials is None or not secrets.compare_digest(credentials.credentials, expected):
        raise HTTPException(status_code=401, detail="Unauthorized", headers={"WWW-Authenticate": "Bearer"})


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/metrics")
async def metrics() -> Response:
    """Expose Prometheus metrics in exposition format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get(STATS_ENDPOINT, response_model=DiagnosticsReport, dependencies=[Depends(require_session)])
async def system_stats(request: Request) -> DiagnosticsReport:
    """Return a point-in-time diagnostics report."""
    assembler: DiagnosticsReportAssembler = request.app.state.assembler
    REQUESTS_IN_PROGRESS.labels(endpoint=STATS_ENDPOINT).inc()
    start = time.monotonic()

    try:
        report = await assembler.assemble()
    except Exception as exc:
        REQUESTS_TOTAL.labels(endpoint=STATS_ENDPOINT, status="error").inc()
        REQUEST_DURATION.labels(endpoint=STATS_ENDPOINT).observe(time.monotonic() - start)
        logger.exception("Diagnostics report assembly failed")
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    finally:
        REQUESTS_IN_PROGRESS.labels(endpoint=STATS_ENDPOINT).dec()

    REQUEST_DURATION.labels(endpoint=STATS_ENDPOINT).observe(time.monotonic() - start)
    REQUESTS_TOTAL.labels(endpoint=STATS_ENDPOINT, status="success").inc()
    return report


@app.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Check that the record store answers queries."""
    store: RecordStore = request.app.state.store
    if store.ping():
        RECORD_STORE_HEALTHY.set(1.0)
        return HealthResponse(status="healthy", record_store="healthy")

    RECORD_STORE_HEALTHY.set(0.0)
    return HealthResponse(status="unhealthy", record_store="unhealthy", detail=f"{store.db_path} not queryable")
