import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from geokml.api import websocket
from geokml.api.routes import health, jobs
from geokml.config.settings import Settings
from geokml.conversion import KmlConverter
from geokml.database.repositories.geo_record_repository import GeoRecordRepository
from geokml.database.repositories.job_repository import JobRepository
from geokml.jobs.exceptions import (
    InvalidStatusFilterError,
    JobNotFoundError,
    JobNotReadyError,
    JobServiceError,
)
from geokml.jobs.service import JobService
from geokml.logging.logger import Log
from geokml.notifications.hub import NotificationHub
from geokml.worker.job_runner import JobRunner
from geokml.worker.wake_signal import WakeSignal
from geokml.worker.worker import Worker

WORKER_STOP_TIMEOUT_SECONDS = 30.0

_ERROR_STATUS_CODES: dict[type[JobServiceError], int] = {
    JobNotFoundError: 404,
    InvalidStatusFilterError: 400,
    JobNotReadyError: 400,
}


def create_app(
    job_service: JobService,
    hub: NotificationHub,
    worker: Worker | None = None,
) -> FastAPI:
    """Build the FastAPI app. The worker (if given) lives as long as the app."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if worker is not None:
            worker.start()
        try:
            yield
        finally:
            if worker is not None:
                Log.info("Stopping worker")
                await asyncio.to_thread(worker.stop, WORKER_STOP_TIMEOUT_SECONDS)

    app = FastAPI(title="GeoJSON to KML API", version="0.1.0", lifespan=lifespan)
    app.state.job_service = job_service
    app.state.hub = hub
    app.state.worker = worker

    @app.exception_handler(JobServiceError)
    async def handle_job_service_error(request: Request, exc: JobServiceError) -> JSONResponse:
        return JSONResponse(
            status_code=_ERROR_STATUS_CODES.get(type(exc), 400),
            content={"error": str(exc)},
        )

    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(jobs.router, prefix="/api/job", tags=["jobs"])
    app.include_router(websocket.router, tags=["push"])
    return app


def build_app(settings: Settings) -> FastAPI:
    """Wire repositories, worker, hub and service into an app."""
    job_repo = JobRepository()
    record_repo = GeoRecordRepository()
    wake_signal = WakeSignal()
    hub = NotificationHub(default_user_id=settings.ws_default_user_id)
    runner = JobRunner(KmlConverter(), job_repo, record_repo, hub)
    worker = Worker(job_repo, runner, wake_signal, settings)
    job_service = JobService(job_repo, record_repo, wake_signal)
    return create_app(job_service, hub, worker)
