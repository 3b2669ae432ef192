from uuid import UUID

from geokml.conversion.base import BaseConverter
from geokml.conversion.models import ConversionSuccess
from geokml.database.models import JobRecord, JobStatus, truncate_error
from geokml.database.repositories.geo_record_repository import GeoRecordRepository
from geokml.database.repositories.job_repository import JobRepository
from geokml.logging.logger import Log
from geokml.notifications.hub import NotificationHub
from geokml.notifications.models import JobStatusEvent


class JobRunner:
    """Drive one job from PENDING to a terminal state and notify its owner."""

    def __init__(
        self,
        converter: BaseConverter,
        job_repo: JobRepository,
        record_repo: GeoRecordRepository,
        hub: NotificationHub,
    ) -> None:
        self._converter = converter
        self._job_repo = job_repo
        self._record_repo = record_repo
        self._hub = hub

    def run(self, job: JobRecord) -> None:
        """Process a single PENDING job.

        Store errors while claiming the job propagate to the caller. Anything
        that goes wrong after the claim ends the job as FAILED.
        """
        self._notify(job, JobStatus.PENDING)
        if not self._job_repo.mark_processing(job.id):
            Log.warning("Job is no longer pending, skipping", job_id=job.id)
            return
        self._notify(job, JobStatus.PROCESSING)
        Log.info("Running job", job_id=job.id, owner_id=job.owner_id)

        try:
            failure = self._process(job)
        except Exception as exc:
            Log.exception("Unexpected error while processing job", job_id=job.id)
            failure = str(exc) or type(exc).__name__

        if failure is not None:
            self._fail(job, failure)

    def _process(self, job: JobRecord) -> str | None:
        """Convert and persist. Returns a failure message, or None on success."""
        record = self._record_repo.find_by_job_id(job.id)
        if record is None:
            return f"GeoJSON record not found for job {job.id}"

        result = self._converter.convert(record.input_text)
        if not isinstance(result, ConversionSuccess):
            return result.message

        self._record_repo.update_output(record.id, result.output)
        if not self._job_repo.mark_done(job.id):
            Log.warning("Job left PROCESSING before completion", job_id=job.id)
            return None
        self._notify(job, JobStatus.DONE, geo_record_id=record.id)
        Log.info("Job completed", job_id=job.id, geo_record_id=record.id)
        return None

    def _fail(self, job: JobRecord, message: str) -> None:
        error = truncate_error(message)
        Log.error(f"Job failed: {error}", job_id=job.id)
        self._job_repo.mark_failed(job.id, error)
        self._notify(job, JobStatus.FAILED, error=error)

    def _notify(
        self,
        job: JobRecord,
        status: JobStatus,
        geo_record_id: UUID | None = None,
        error: str | None = None,
    ) -> None:
        self._hub.notify_user(
            job.owner_id,
            JobStatusEvent(
                job_id=job.id,
                status=status,
                geo_record_id=geo_record_id,
                error=error,
            ),
        )
