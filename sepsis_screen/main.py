from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .config import AppConfig, get_config
from .db import close_db, init_db
from .log import configure_logging
from .schemas import ReadingIn
from .service import patient_summary, record_reading
from .simulator import demo_scenario
from .storage import list_patients, list_recent_readings

logger = structlog.get_logger(__name__)

MISSING_FIELDS = "Missing required fields. Require respiratoryRate, systolicBP, mentalStatus, timestamp."


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def get_session_factory(request: Request) -> sessionmaker:
    return request.app.state.Session


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    config = config or get_config()
    configure_logging(config.logging)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            app.state.Session = init_db(config.database.url)
        except SQLAlchemyError:
            logger.exception("storage_open_failed", database_url=config.database.url)
            raise
        logger.info("storage_opened", environment=config.environment)
        try:
            yield
        finally:
            close_db(app.state.Session)
            logger.info("storage_closed")

    app = FastAPI(title="Sepsis Screening API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError):
        logger.info("reading_rejected", path=request.url.path, errors=len(exc.errors()))
        return _error(400, MISSING_FIELDS)

    @app.get("/api/health")
    def health():
        return {"status": "ok", "message": "Rule-Based Sepsis Screening API running (screening only)."}

    @app.get("/api/patients")
    def get_patients(Session: sessionmaker = Depends(get_session_factory)):
        try:
            patients = list_patients(Session)
        except SQLAlchemyError:
            logger.exception("patients_fetch_failed")
            return _error(500, "Failed to fetch patients")
        return {"count": len(patients), "patients": [p.to_dict() for p in patients]}

    @app.get("/api/readings")
    def get_readings(Session: sessionmaker = Depends(get_session_factory)):
        try:
            readings = list_recent_readings(Session, limit=100)
        except SQLAlchemyError:
            logger.exception("readings_fetch_failed")
            return _error(500, "Failed to fetch readings")
        return {"count": len(readings), "readings": readings}

    @app.post("/api/patients/{external_id}/readings", status_code=201)
    def create_reading(
        external_id: str, body: ReadingIn, Session: sessionmaker = Depends(get_session_factory)
    ):
        if not body.is_complete():
            return _error(400, MISSING_FIELDS)
        try:
            reading = record_reading(
                Session, external_id, body.observation(), body.timestamp, body.name, body.location
            )
        except SQLAlchemyError:
            logger.exception("reading_create_failed", external_id=external_id)
            return _error(500, "Failed to record reading")
        return {"patientId": external_id, "reading": reading.to_dict()}

    @app.get("/api/patients/{external_id}/summary")
    def get_summary(external_id: str, Session: sessionmaker = Depends(get_session_factory)):
        try:
            summary = patient_summary(Session, external_id)
        except SQLAlchemyError:
            logger.exception("summary_fetch_failed", external_id=external_id)
            return _error(500, "Failed to fetch summary")
        if summary is None:
            return _error(404, "Patient not found")
        return summary

    # Evolving patient scenario (demo only, not real data)
    @app.get("/api/demo/scenario")
    def get_demo_scenario():
        return demo_scenario().to_dict()

    return app


app = create_app()
