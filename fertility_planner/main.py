"""
Fertility Planner - FastAPI Application Entry Point

Registers every router under /api, installs the JSON error handlers, and
creates the database tables on startup (optionally seeding a demo patient).
"""

import logging
from pathlib import Path

from dotenv import load_dotenv

# Resolve .env relative to project root (parent of fertility_planner/)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from fertility_planner.config import settings
from fertility_planner.core import patient_db
from fertility_planner.core.database import SessionLocal, init_db
from fertility_planner.core.errors import PlannerError
from fertility_planner.routers import (
    analysis,
    care,
    doctors,
    health,
    journey,
    patients,
    wizard,
)

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Fertility Planner API")

# CORS - allow all origins for development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(wizard.router, prefix="/api", tags=["wizard"])
app.include_router(patients.router, prefix="/api", tags=["patients"])
app.include_router(doctors.router, prefix="/api", tags=["doctors"])
app.include_router(analysis.router, prefix="/api", tags=["analysis"])
app.include_router(journey.router, prefix="/api", tags=["journey"])
app.include_router(care.router, prefix="/api", tags=["care"])


# ── Error handlers ─────────────────────────────────────────────────────────

@app.exception_handler(PlannerError)
async def planner_error_handler(request: Request, exc: PlannerError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Invalid request",
            "errorCode": "INVALID_REQUEST",
            "details": errors,
        },
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Database operation failed",
            "errorCode": "DATABASE_ERROR",
        },
    )


@app.on_event("startup")
async def startup_event():
    """Create tables and seed the demo patient when configured."""
    init_db()
    if settings.SEED_DEMO_PATIENT:
        db = SessionLocal()
        try:
            patient_db.seed_demo_patient(db)
        finally:
            db.close()
    logger.info("Fertility Planner ready")
