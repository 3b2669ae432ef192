import uuid
from typing import Any
from uuid import UUID

from psycopg.rows import dict_row

from geokml.database.connection import get_connection
from geokml.database.exceptions import RecordNotFoundError
from geokml.database.models import GeoRecord
from geokml.logging.logger import Log

_RECORD_COLUMNS = (
    "id, job_id, owner_id, input_text, output_text, created_at, updated_at"
)


class GeoRecordRepository:
    """Database operations for the geo_records table."""

    def create_record(self, job_id: UUID, owner_id: str, input_text: str) -> UUID:
        """Insert the input document for a job and return the record id."""
        record_id = uuid.uuid4()
        with get_connection() as conn:
            conn.execute(
                """
                INSERT INTO geo_records (id, job_id, owner_id, input_text, output_text)
                VALUES (%s, %s, %s, %s, NULL)
                """,
                (record_id, job_id, owner_id, input_text),
            )
            conn.commit()
        Log.info(f"Created geo record {record_id} for job {job_id}")
        return record_id

    def find_by_id(self, record_id: UUID) -> GeoRecord | None:
        return self._find_one("id", record_id)

    def find_by_job_id(self, job_id: UUID) -> GeoRecord | None:
        return self._find_one("job_id", job_id)

    def update_output(self, record_id: UUID, output_text: str) -> None:
        """Persist the converted document.

        Raises:
            RecordNotFoundError: if no record with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE geo_records
                    SET output_text = %s, updated_at = NOW()
                    WHERE id = %s
                    """,
                    (output_text, record_id),
                )
                if cur.rowcount == 0:
                    raise RecordNotFoundError(f"Geo record {record_id} not found")
            conn.commit()
        Log.info(f"Stored output for geo record {record_id}")

    def _find_one(self, column: str, value: UUID) -> GeoRecord | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_RECORD_COLUMNS} FROM geo_records WHERE {column} = %s LIMIT 1",
                    (value,),
                )
                row = cur.fetchone()

        return _row_to_record(row) if row is not None else None


def _row_to_record(row: dict[str, Any]) -> GeoRecord:
    return GeoRecord(
        id=row["id"],
        job_id=row["job_id"],
        owner_id=row["owner_id"],
        input_text=row["input_text"],
        output_text=row["output_text"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
