from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status

from geokml.api.schemas import (
    ConvertJobResponse,
    ConvertRequest,
    DeleteJobResponse,
    ErrorResponse,
    JobFilesResponse,
    JobListResponse,
    JobStatusResponse,
)
from geokml.jobs.service import JobService

KML_MEDIA_TYPE = "application/vnd.google-earth.kml+xml"

router = APIRouter()

_NOT_FOUND = {404: {"model": ErrorResponse}}
_BAD_REQUEST = {400: {"model": ErrorResponse}}


def get_job_service(request: Request) -> JobService:
    return request.app.state.job_service


@router.post(
    "/convert",
    response_model=ConvertJobResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def convert_job(
    body: ConvertRequest,
    service: JobService = Depends(get_job_service),
) -> ConvertJobResponse:
    result = service.submit(body.user_id, body.geo)
    return ConvertJobResponse.from_result(result)


@router.get("", response_model=JobListResponse, responses=_BAD_REQUEST)
def list_jobs(
    job_status: str | None = Query(None, alias="status"),
    page: int = Query(0, ge=0),
    page_size: int = Query(20, alias="pageSize", ge=1, le=500),
    service: JobService = Depends(get_job_service),
) -> JobListResponse:
    view = service.list_jobs(job_status, page=page, page_size=page_size)
    return JobListResponse.from_view(view)


@router.get("/{job_id}", response_model=JobStatusResponse, responses=_NOT_FOUND)
def get_job_status(
    job_id: UUID,
    service: JobService = Depends(get_job_service),
) -> JobStatusResponse:
    return JobStatusResponse.from_view(service.get_status(job_id))


@router.get("/{job_id}/files", response_model=JobFilesResponse, responses=_NOT_FOUND)
def get_files(
    job_id: UUID,
    service: JobService = Depends(get_job_service),
) -> JobFilesResponse:
    return JobFilesResponse.from_view(service.get_bundle(job_id))


@router.get("/{job_id}/kml", responses={**_NOT_FOUND, **_BAD_REQUEST})
def download_kml(
    job_id: UUID,
    service: JobService = Depends(get_job_service),
) -> Response:
    download = service.download_output(job_id)
    return Response(
        content=download.content,
        media_type=KML_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{download.filename}"'},
    )


@router.delete("/{job_id}", response_model=DeleteJobResponse, responses=_NOT_FOUND)
def delete_job(
    job_id: UUID,
    service: JobService = Depends(get_job_service),
) -> DeleteJobResponse:
    service.delete(job_id)
    return DeleteJobResponse(message="Deleted")
