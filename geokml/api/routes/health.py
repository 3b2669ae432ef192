from fastapi import APIRouter, Request

router = APIRouter()


@router.get("")
def health_check(request: Request) -> dict[str, object]:
    worker = request.app.state.worker
    return {
        "status": "ok",
        "workerRunning": worker is not None and worker.is_running,
    }
