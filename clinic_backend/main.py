"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from clinic_backend.errors import AdvisoryCancelledError, PatientNotFoundError, StoreError
from clinic_backend.routers import get_api_router
from clinic_backend.services.advisory import AdvisoryGateway
from clinic_backend.services.advisory_tasks import AdvisoryTaskRegistry
from clinic_backend.services.navigation import ViewController
from clinic_backend.services.records import RecordManager, StoreKeys, load_state
from clinic_backend.services.store import KeyValueStore, create_store
from clinic_backend.utils.config import Settings, get_settings
from clinic_backend.utils.log_config import configure_logging

LOGGER = logging.getLogger(__name__)


def build_gateway(settings: Settings) -> AdvisoryGateway:
    return AdvisoryGateway(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
        doctor_name=settings.doctor_name,
        use_stub=settings.gemini_use_stub,
        timeout_seconds=settings.gemini_timeout_seconds,
    )


def create_app(
    settings: Optional[Settings] = None,
    *,
    store: Optional[KeyValueStore] = None,
    gateway: Optional[AdvisoryGateway] = None,
) -> FastAPI:
    """Build the application; collections are loaded on startup."""

    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings)
        kv_store = store or create_store(settings)
        keys = StoreKeys(
            patients=settings.patients_key,
            appointments=settings.appointments_key,
        )
        state = load_state(kv_store, keys, seed=settings.seed_sample_data)
        LOGGER.info(
            "Loaded %d patients and %d appointments",
            len(state.patients),
            len(state.appointments),
        )

        records = RecordManager(state, kv_store, keys)
        tasks = AdvisoryTaskRegistry()
        app.state.records = records
        app.state.advisory_tasks = tasks
        app.state.advisory = gateway or build_gateway(settings)
        app.state.view = ViewController(records, tasks)
        yield

    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
    app.state.settings = settings
    app.include_router(get_api_router())

    @app.exception_handler(PatientNotFoundError)
    async def patient_not_found(request: Request, exc: PatientNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(StoreError)
    async def store_unavailable(request: Request, exc: StoreError) -> JSONResponse:
        LOGGER.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Clinic records are temporarily unavailable. Please try again."},
        )

    @app.exception_handler(AdvisoryCancelledError)
    async def advisory_cancelled(request: Request, exc: AdvisoryCancelledError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})

    @app.get("/health")
    def health_check() -> dict[str, str]:
        """Return service health status."""

        return {"status": "ok"}

    @app.get("/version")
    def version() -> dict[str, str]:
        """Return application version metadata."""

        return {"version": settings.app_version}

    return app


app = create_app()
