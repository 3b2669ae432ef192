import json
from typing import Any
from uuid import UUID

from geokml.database.models import JobRecord, JobStatus
from geokml.database.repositories.geo_record_repository import GeoRecordRepository
from geokml.database.repositories.job_repository import JobRepository
from geokml.jobs.exceptions import InvalidStatusFilterError, JobNotFoundError, JobNotReadyError
from geokml.jobs.models import (
    JobBundleView,
    JobListView,
    JobStatusView,
    JobSummary,
    OutputDownload,
    SubmitResult,
)
from geokml.logging.logger import Log
from geokml.worker.wake_signal import WakeSignal

OUTPUT_EXTENSION = "kml"


class JobService:
    """Request-side job operations. Never converts inline; only enqueues."""

    def __init__(
        self,
        job_repo: JobRepository,
        record_repo: GeoRecordRepository,
        wake_signal: WakeSignal,
    ) -> None:
        self._job_repo = job_repo
        self._record_repo = record_repo
        self._wake_signal = wake_signal

    def submit(self, owner_id: str, document: Any) -> SubmitResult:
        """Create a PENDING job plus its geo record and wake the worker."""
        job_id = self._job_repo.create_job(owner_id)
        record_id = self._record_repo.create_record(job_id, owner_id, json.dumps(document))
        self._wake_signal.send()
        Log.info("Submitted job", job_id=job_id, geo_record_id=record_id)
        return SubmitResult(job_id=job_id, geo_record_id=record_id, status=JobStatus.PENDING)

    def get_status(self, job_id: UUID) -> JobStatusView:
        job = self._require_job(job_id)
        record = self._record_repo.find_by_job_id(job_id)
        return JobStatusView(
            job_id=job.id,
            geo_record_id=record.id if record is not None else None,
            status=job.status,
        )

    def list_jobs(
        self,
        status: str | None = None,
        page: int = 0,
        page_size: int = 20,
    ) -> JobListView:
        """List jobs newest-first, optionally filtered by a status name."""
        status_filter = parse_status_filter(status)
        jobs = self._job_repo.list_jobs(status_filter, page=page, page_size=page_size)
        summaries = []
        for job in jobs:
            record = self._record_repo.find_by_job_id(job.id)
            summaries.append(
                JobSummary(
                    id=job.id,
                    geo_record_id=record.id if record is not None else None,
                    status=job.status,
                    attempts=job.attempts,
                    last_error=job.last_error,
                )
            )
        return JobListView(page=page, page_size=page_size, jobs=summaries)

    def get_bundle(self, job_id: UUID) -> JobBundleView:
        job = self._require_job(job_id)
        record = self._record_repo.find_by_job_id(job_id)
        if record is None:
            raise JobNotFoundError(f"GeoJSON record for Job ID: {job_id} not found")
        return JobBundleView(
            job_id=job.id,
            geo_record_id=record.id,
            status=job.status,
            input_text=record.input_text,
            output_text=record.output_text if job.status is JobStatus.DONE else None,
        )

    def download_output(self, job_id: UUID) -> OutputDownload:
        """Return the KML of a DONE job.

        Raises:
            JobNotFoundError: unknown job, or its record/output is missing.
            JobNotReadyError: the job is FAILED or still in flight.
        """
        job = self._require_job(job_id)
        if job.status is JobStatus.FAILED:
            raise JobNotReadyError("Job has failed. Cannot download KML.")
        if job.status is not JobStatus.DONE:
            raise JobNotReadyError(
                f"Job is not complete yet. Current status: {job.status.value}"
            )
        record = self._record_repo.find_by_job_id(job_id)
        if record is None:
            raise JobNotFoundError(f"GeoJSON record for Job ID: {job_id} not found")
        if record.output_text is None:
            raise JobNotFoundError("KML not available for this job")
        return OutputDownload(
            filename=f"job-{job_id}.{OUTPUT_EXTENSION}",
            content=record.output_text,
        )

    def delete(self, job_id: UUID) -> None:
        """Delete the job regardless of status; the geo record cascades."""
        if not self._job_repo.delete(job_id):
            raise JobNotFoundError(f"Job ID: {job_id} not found")

    def _require_job(self, job_id: UUID) -> JobRecord:
        job = self._job_repo.find_by_id(job_id)
        if job is None:
            raise JobNotFoundError(f"Job ID: {job_id} not found")
        return job


def parse_status_filter(raw: str | None) -> JobStatus | None:
    """Map a case-insensitive status name to JobStatus.

    Raises:
        InvalidStatusFilterError: if the name is not a known status.
    """
    if raw is None:
        return None
    try:
        return JobStatus(raw.upper())
    except ValueError as exc:
        allowed = ", ".join(status.value for status in JobStatus)
        raise InvalidStatusFilterError(
            f"Invalid status value. Must be one of: {allowed}"
        ) from exc
