import os
from dataclasses import dataclass

from dotenv import load_dotenv

from picture_validation.errors import ConfigurationError

load_dotenv()

PRODUCTION = "Production"
MIN_STORAGE_CONNECTION_LENGTH = 10


@dataclass(frozen=True)
class Settings:
    environment: str = os.getenv("Environment", "Development")
    storage_connection_string: str = os.getenv("AzureWebJobsStorage", "")
    storage_container: str = os.getenv("STORAGE_CONTAINER", "pictures")
    storage_account_url: str = os.getenv(
        "STORAGE_ACCOUNT_URL", "https://roboticastorage.blob.core.windows.net"
    )
    cognitive_api_key: str = os.getenv("CognitiveApiKey", "")
    cognitive_api_url: str = os.getenv("CognitiveApiUrl", "")
    vision_timeout_s: float = float(os.getenv("VISION_TIMEOUT_S", "30.0"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_json: bool = os.getenv("LOG_JSON", "true").lower() == "true"
    enable_metrics: bool = os.getenv("ENABLE_METRICS", "true").lower() == "true"

    @property
    def is_production(self) -> bool:
        return self.environment == PRODUCTION

    def storage_configured(self) -> bool:
        return len(self.storage_connection_string or "") >= MIN_STORAGE_CONNECTION_LENGTH


def validate_settings(settings: Settings) -> None:
    if settings.is_production and not settings.storage_configured():
        raise ConfigurationError(
            "Storage isn't configured correctly - get Storage Connection string from Azure portal"
        )


settings = Settings()
