import uuid
from typing import Any
from uuid import UUID

from psycopg.rows import dict_row

from geokml.database.connection import get_connection
from geokml.database.models import JobRecord, JobStatus, truncate_error
from geokml.logging.logger import Log

_JOB_COLUMNS = "id, owner_id, status, attempts, last_error, created_at, updated_at"


class JobRepository:
    """Database operations for the jobs table."""

    def create_job(self, owner_id: str) -> UUID:
        """Insert a PENDING job for the owner and return its id."""
        job_id = uuid.uuid4()
        with get_connection() as conn:
            conn.execute(
                """
                INSERT INTO jobs (id, owner_id, status, attempts, last_error)
                VALUES (%s, %s, %s, 0, NULL)
                """,
                (job_id, owner_id, JobStatus.PENDING.value),
            )
            conn.commit()
        Log.info("Created job", job_id=job_id, owner_id=owner_id)
        return job_id

    def find_by_id(self, job_id: UUID) -> JobRecord | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_JOB_COLUMNS} FROM jobs WHERE id = %s",
                    (job_id,),
                )
                row = cur.fetchone()

        return _row_to_job(row) if row is not None else None

    def find_next_pending(self) -> JobRecord | None:
        """Return the oldest PENDING job, or None when the queue is empty."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_JOB_COLUMNS}
                    FROM jobs
                    WHERE status = %s
                    ORDER BY created_at ASC, seq ASC
                    LIMIT 1
                    """,
                    (JobStatus.PENDING.value,),
                )
                row = cur.fetchone()

        return _row_to_job(row) if row is not None else None

    def list_jobs(
        self,
        status: JobStatus | None,
        page: int = 0,
        page_size: int = 20,
    ) -> list[JobRecord]:
        """Page through jobs newest-first, optionally filtered by status."""
        offset = page * page_size
        where = "WHERE status = %s" if status is not None else ""
        params: tuple[Any, ...] = (status.value,) if status is not None else ()
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_JOB_COLUMNS}
                    FROM jobs
                    {where}
                    ORDER BY created_at DESC, seq DESC
                    LIMIT %s OFFSET %s
                    """,
                    (*params, page_size, offset),
                )
                rows = cur.fetchall()

        return [_row_to_job(row) for row in rows]

    def mark_processing(self, job_id: UUID) -> bool:
        """Move a PENDING job to PROCESSING. False if the job was not PENDING."""
        return self._transition(job_id, JobStatus.PENDING, JobStatus.PROCESSING)

    def mark_done(self, job_id: UUID) -> bool:
        """Move a PROCESSING job to DONE. False if the job was not PROCESSING."""
        return self._transition(job_id, JobStatus.PROCESSING, JobStatus.DONE)

    def mark_failed(self, job_id: UUID, error: str) -> bool:
        """Move a PROCESSING job to FAILED and record the truncated error."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE jobs
                    SET status = %s, last_error = %s, updated_at = NOW()
                    WHERE id = %s AND status = %s
                    """,
                    (
                        JobStatus.FAILED.value,
                        truncate_error(error),
                        job_id,
                        JobStatus.PROCESSING.value,
                    ),
                )
                updated = cur.rowcount > 0
            conn.commit()
        if updated:
            Log.info(f"Marked job {job_id} as FAILED: {error}")
        return updated

    def delete(self, job_id: UUID) -> bool:
        """Delete a job regardless of status. Its geo record cascades."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM jobs WHERE id = %s", (job_id,))
                deleted = cur.rowcount > 0
            conn.commit()
        if deleted:
            Log.info(f"Deleted job {job_id}")
        return deleted

    def _transition(self, job_id: UUID, source: JobStatus, target: JobStatus) -> bool:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE jobs
                    SET status = %s, updated_at = NOW()
                    WHERE id = %s AND status = %s
                    """,
                    (target.value, job_id, source.value),
                )
                updated = cur.rowcount > 0
            conn.commit()
        if updated:
            Log.info(f"Job status {source.value} -> {target.value}", job_id=job_id)
        return updated


def _row_to_job(row: dict[str, Any]) -> JobRecord:
    return JobRecord(
        id=row["id"],
        owner_id=row["owner_id"],
        status=JobStatus(row["status"]),
        attempts=row["attempts"],
        last_error=row["last_error"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
