from dataclasses import dataclass
from uuid import UUID

from geokml.database.models import JobStatus


@dataclass(frozen=True)
class JobStatusEvent:
    """Status transition pushed to the job owner's connections."""

    job_id: UUID
    status: JobStatus
    geo_record_id: UUID | None = None
    error: str | None = None
    type: str = "JOB_STATUS"
    job_type: str = "CONVERT"

    def to_payload(self) -> dict[str, str]:
        payload = {
            "type": self.type,
            "jobId": str(self.job_id),
            "status": self.status.value,
            "jobType": self.job_type,
        }
        if self.geo_record_id is not None:
            payload["geoRecordId"] = str(self.geo_record_id)
        if self.error is not None:
            payload["error"] = self.error
        return payload


@dataclass(frozen=True)
class WelcomeEvent:
    """Acknowledgement sent once a connection is registered."""

    user_id: str
    type: str = "WELCOME"

    def to_payload(self) -> dict[str, str]:
        return {"type": self.type, "userId": self.user_id}
