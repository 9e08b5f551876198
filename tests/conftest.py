import os

import pytest

# Keep tests deterministic and offline-safe.
os.environ["Environment"] = "Test"
os.environ["AzureWebJobsStorage"] = ""
os.environ["CognitiveApiKey"] = "test-key"
os.environ["CognitiveApiUrl"] = "https://vision.test"
os.environ["LOG_JSON"] = "false"

from picture_validation.config import Settings  # noqa: E402


class RecordingStorage:
    def __init__(self) -> None:
        self.writes: list[tuple[str, str, bytes]] = []

    def write(self, robot_name: str, filename: str, data: bytes) -> None:
        self.writes.append((robot_name, filename, data))


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        environment="Test",
        storage_connection_string="",
        cognitive_api_key="test-key",
        cognitive_api_url="https://vision.test",
        log_json=False,
    )


@pytest.fixture
def storage() -> RecordingStorage:
    return RecordingStorage()
