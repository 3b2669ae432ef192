from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from geokml.jobs.models import (
    JobBundleView,
    JobListView,
    JobStatusView,
    JobSummary,
    SubmitResult,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ConvertRequest(CamelModel):
    user_id: str
    geo: Any


class ConvertJobResponse(CamelModel):
    job_id: UUID
    geo_record_id: UUID
    status: str

    @classmethod
    def from_result(cls, result: SubmitResult) -> "ConvertJobResponse":
        return cls(
            job_id=result.job_id,
            geo_record_id=result.geo_record_id,
            status=result.status.value,
        )


class JobStatusResponse(CamelModel):
    job_id: UUID
    geo_record_id: UUID | None
    status: str

    @classmethod
    def from_view(cls, view: JobStatusView) -> "JobStatusResponse":
        return cls(job_id=view.job_id, geo_record_id=view.geo_record_id, status=view.status.value)


class JobSummaryResponse(CamelModel):
    id: UUID
    geo_record_id: UUID | None
    status: str
    attempts: int
    last_error: str | None

    @classmethod
    def from_summary(cls, summary: JobSummary) -> "JobSummaryResponse":
        return cls(
            id=summary.id,
            geo_record_id=summary.geo_record_id,
            status=summary.status.value,
            attempts=summary.attempts,
            last_error=summary.last_error,
        )


class JobListResponse(CamelModel):
    jobs: list[JobSummaryResponse]
    page: int
    page_size: int
    count: int

    @classmethod
    def from_view(cls, view: JobListView) -> "JobListResponse":
        return cls(
            jobs=[JobSummaryResponse.from_summary(s) for s in view.jobs],
            page=view.page,
            page_size=view.page_size,
            count=view.count,
        )


class JobFilesResponse(CamelModel):
    job_id: UUID
    geo_record_id: UUID
    status: str
    geo_json: str
    kml: str | None = None

    @classmethod
    def from_view(cls, view: JobBundleView) -> "JobFilesResponse":
        return cls(
            job_id=view.job_id,
            geo_record_id=view.geo_record_id,
            status=view.status.value,
            geo_json=view.input_text,
            kml=view.output_text,
        )


class DeleteJobResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
