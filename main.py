# type: ignore
# pyright: reportGeneralTypeIssues=false
# pyright: reportOptionalMemberAccess=false
"""
Mission Participation Service
=============================
Admin and participant API for volunteer missions: joining, the participation
state machine, per-mission question answers, admin mailings and sidebar
navigation.

Enforces the participation state-machine:
    created ─► awaiting_approval ─► approved ─► completed
    created ─► approved  (auto-approval on an error-free update)
    any     ─► cancelled

Port: 8006
"""
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from missionhub.controllers import (
    admin_controller,
    email_controller,
    participation_controller,
    system_controller,
)
from missionhub.core.config import settings
from missionhub.core.database import create_schema, engine
from missionhub.core.dependencies import get_participation_service, get_role_catalog
from missionhub.core.logging import get_logger
from missionhub.middleware import MetricsMiddleware, RequestIDMiddleware
from missionhub.schemas.participation import ErrorResponse

logger = get_logger(__name__)


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    create_schema(engine)
    roles = get_role_catalog().seed()
    logger.info("Public roles ready: %s", ", ".join(r.name for r in roles))
    try:
        get_participation_service().seed_gauges()
    except Exception:
        logger.warning("Could not seed gauges: DB may not be ready yet")
    yield
    engine.dispose()
    logger.info("Shutting down: connection pool disposed")


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="Mission Participation Service",
    description="Volunteer mission participation workflow, answers and admin mailings.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
    responses={
        422: {"model": ErrorResponse, "description": "Validation error"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)


# ── Global exception handler ─────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    req_id = getattr(request.state, "request_id", None) or str(uuid.uuid4())
    logger.exception("Unhandled exception", extra={"request_id": req_id})
    return JSONResponse(
        status_code=500,
        content={"error": "internal_server_error", "detail": str(exc), "request_id": req_id},
    )


app.include_router(system_controller.router)
app.include_router(participation_controller.router)
app.include_router(email_controller.router)
app.include_router(admin_controller.router)


# ── Entrypoint ────────────────────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8006, log_level=settings.LOG_LEVEL.lower())
