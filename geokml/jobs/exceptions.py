class JobServiceError(Exception):
    """Base exception for job request errors."""


class JobNotFoundError(JobServiceError):
    """Raised when a job (or its geo record) does not exist."""


class InvalidStatusFilterError(JobServiceError):
    """Raised when a list request names an unknown status."""


class JobNotReadyError(JobServiceError):
    """Raised when the job's output is requested before the job is DONE."""
