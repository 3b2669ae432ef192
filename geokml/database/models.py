from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

MAX_ERROR_LENGTH = 1000


class JobStatus(str, Enum):
    """Lifecycle states stored in jobs.status.

    IN_PROGRESS is part of the stored vocabulary but nothing assigns it.
    """

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.DONE, JobStatus.FAILED)


@dataclass
class JobRecord:
    """Represents a row from the jobs table."""

    id: UUID
    owner_id: str
    status: JobStatus
    attempts: int = 0
    last_error: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class GeoRecord:
    """Represents a row from the geo_records table."""

    id: UUID
    job_id: UUID
    owner_id: str
    input_text: str
    output_text: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


def truncate_error(message: str) -> str:
    """Clamp an error message to the width of jobs.last_error."""
    return message[:MAX_ERROR_LENGTH]
