# type: ignore
# pyright: reportGeneralTypeIssues=false
# pyright: reportOptionalMemberAccess=false
"""
Skill Matrix Service
====================
Directory of members, projects, groups, skills and specialties backed by
MongoDB. Skill / specialty catalogs are kept in step with member profiles by
a sync that recounts references and recomputes popularity.

Every API answer is an envelope ``{success, data?, message?, error?, ...}``;
expected failures (invalid ID, not found, validation, missing configuration)
are ``success: false`` with HTTP 200.

Port: 8000
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from skillmatrix.controllers.catalog_controller import skills_router, specialties_router
from skillmatrix.controllers.function_controller import router as function_router
from skillmatrix.controllers.interaction_controller import router as interaction_router
from skillmatrix.controllers.member_controller import router as member_router
from skillmatrix.controllers.project_controller import router as project_router
from skillmatrix.controllers.stats_controller import router as stats_router
from skillmatrix.controllers.system_controller import router as system_router
from skillmatrix.core.config import settings
from skillmatrix.core.database import Database
from skillmatrix.core.errors import ConfigurationError, SkillMatrixError, ValidationFailed
from skillmatrix.core.logging import get_logger
from skillmatrix.middleware import MetricsMiddleware, RequestIDMiddleware
from skillmatrix.schemas.common import format_errors
from skillmatrix.schemas.envelope import error_envelope, failure
from skillmatrix.services.synergy_client import SynergyClient

logger = get_logger(settings.SERVICE_NAME)


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    """Open the process-wide Database; close it on shutdown."""
    application.state.database = None
    application.state.database_error = None
    application.state.synergy_client = SynergyClient()
    try:
        application.state.database = Database.from_settings()
    except ConfigurationError as exc:
        # Requests report the problem in their envelope.
        application.state.database_error = exc.message
        logger.error("Database not configured: %s", exc)
    if application.state.database is not None:
        try:
            application.state.database.ensure_indexes()
        except PyMongoError as exc:
            logger.error("Index creation FAILED, service starts without indexes: %s", exc)
    logger.info("Skill matrix service started (version %s)", settings.SERVICE_VERSION)
    yield
    if application.state.database is not None:
        application.state.database.close()
        logger.info("Database connection closed, shutting down")


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="Skill Matrix Service",
    description="Members, projects, groups and the skill / specialty matrix.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
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


# ── Exception handlers ───────────────────────────────────────────────────
@app.exception_handler(SkillMatrixError)
async def domain_exception_handler(request: Request, exc: SkillMatrixError):
    logger.info("Request rejected: %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=200, content=error_envelope(exc))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = format_errors(exc)
    message = f"Validation failed: {errors[0]}" if errors else "Validation failed"
    return JSONResponse(status_code=200, content=error_envelope(ValidationFailed(message, errors)))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    req_id = getattr(request.state, "request_id", None)
    logger.exception("Unhandled exception", extra={"request_id": req_id})
    return JSONResponse(
        status_code=500,
        content=failure("Internal server error", error=str(exc), request_id=req_id),
    )


# ── Routers ──────────────────────────────────────────────────────────────
app.include_router(system_router)
app.include_router(member_router)
app.include_router(project_router)
app.include_router(skills_router)
app.include_router(specialties_router)
app.include_router(interaction_router)
app.include_router(stats_router)
app.include_router(function_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT, log_level="info")
