from fastapi import APIRouter

from coderunner.dependencies import AppSettings
from coderunner.models.submissions import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(settings: AppSettings) -> HealthResponse:
    assignments = settings.workspace.assignments_dir
    status = "ok" if assignments.is_dir() else "degraded"
    return HealthResponse(status=status, assignments_dir=str(assignments))
