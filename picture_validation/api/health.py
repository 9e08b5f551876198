from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from picture_validation.api.dependencies import get_settings
from picture_validation.config import Settings
from picture_validation.observability import metrics_registry
from picture_validation.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health(settings: Settings = Depends(get_settings)) -> HealthResponse:
    checks = {
        "storage": "configured" if settings.storage_configured() else "missing",
        "vision": "configured" if settings.cognitive_api_url else "missing",
    }
    return HealthResponse(status="ok", service="picture-validation", checks=checks)


@router.get("/metrics", response_class=PlainTextResponse)
def metrics() -> str:
    return metrics_registry.render_prometheus()
