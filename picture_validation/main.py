import contextlib
import logging

from fastapi import FastAPI

from picture_validation.adapter.storage import BlobStorageBinding, StorageBinding
from picture_validation.api.health import router as health_router
from picture_validation.api.upload import router as upload_router
from picture_validation.config import Settings, validate_settings
from picture_validation.config import settings as default_settings
from picture_validation.observability import RequestMetricsAndLoggingMiddleware, configure_logging

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    storage: StorageBinding | None = None,
) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings)

    @contextlib.asynccontextmanager
    async def lifespan(_: FastAPI):
        validate_settings(settings)
        logger.info("picture validation started in %s mode", settings.environment)
        yield

    app = FastAPI(title="Picture Validation Service", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.storage = storage or BlobStorageBinding(settings)
    app.add_middleware(RequestMetricsAndLoggingMiddleware, enable_metrics=settings.enable_metrics)
    app.include_router(health_router)
    app.include_router(upload_router)
    return app


app = create_app()
