from dataclasses import dataclass, field
from uuid import UUID

from geokml.database.models import JobStatus


@dataclass(frozen=True)
class SubmitResult:
    job_id: UUID
    geo_record_id: UUID
    status: JobStatus


@dataclass(frozen=True)
class JobStatusView:
    job_id: UUID
    geo_record_id: UUID | None
    status: JobStatus


@dataclass(frozen=True)
class JobSummary:
    id: UUID
    geo_record_id: UUID | None
    status: JobStatus
    attempts: int
    last_error: str | None


@dataclass(frozen=True)
class JobListView:
    page: int
    page_size: int
    jobs: list[JobSummary] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.jobs)


@dataclass(frozen=True)
class JobBundleView:
    """Input document plus output document (only once the job is DONE)."""

    job_id: UUID
    geo_record_id: UUID
    status: JobStatus
    input_text: str
    output_text: str | None = None


@dataclass(frozen=True)
class OutputDownload:
    filename: str
    content: str
