"""Idempotent DDL for the jobs and geo_records tables."""

from geokml.database.connection import get_connection
from geokml.logging.logger import Log

_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS jobs (
        id UUID PRIMARY KEY,
        seq BIGINT GENERATED ALWAYS AS IDENTITY,
        owner_id VARCHAR(100) NOT NULL,
        status VARCHAR(32) NOT NULL,
        attempts INTEGER NOT NULL DEFAULT 0,
        last_error VARCHAR(1000),
        created_at TIMESTAMPTZ NOT NULL DEFAULT clock_timestamp(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT clock_timestamp()
    )
    """,
    "CREATE INDEX IF NOT EXISTS jobs_owner_id_idx ON jobs (owner_id)",
    "ALTER TABLE jobs ADD COLUMN IF NOT EXISTS seq BIGINT GENERATED ALWAYS AS IDENTITY",
    "CREATE INDEX IF NOT EXISTS jobs_status_created_at_idx ON jobs (status, created_at, seq)",
    """
    CREATE TABLE IF NOT EXISTS geo_records (
        id UUID PRIMARY KEY,
        job_id UUID NOT NULL UNIQUE REFERENCES jobs (id) ON DELETE CASCADE,
        owner_id VARCHAR(100) NOT NULL,
        input_text TEXT NOT NULL,
        output_text TEXT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT clock_timestamp(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT clock_timestamp()
    )
    """,
    "CREATE INDEX IF NOT EXISTS geo_records_owner_id_idx ON geo_records (owner_id)",
)


def ensure_schema() -> None:
    """Create missing tables and indexes."""
    with get_connection() as conn:
        with conn.cursor() as cur:
            for statement in _STATEMENTS:
                cur.execute(statement)
        conn.commit()
    Log.info("Database schema is up to date")
