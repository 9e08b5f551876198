import logging
from typing import Protocol

from azure.core.exceptions import AzureError
from azure.storage.blob import BlobServiceClient

from picture_validation.config import Settings
from picture_validation.errors import UpstreamError

logger = logging.getLogger(__name__)


class StorageBinding(Protocol):
    def write(self, robot_name: str, filename: str, data: bytes) -> None: ...


def blob_name(robot_name: str, filename: str) -> str:
    return f"{robot_name}/{filename}"


class BlobStorageBinding:
    """Writes uploads to an Azure Blob Storage container."""

    def __init__(self, settings: Settings) -> None:
        self._connection_string = settings.storage_connection_string
        self._container = settings.storage_container
        self._service: BlobServiceClient | None = None

    def _client(self) -> BlobServiceClient:
        if self._service is None:
            self._service = BlobServiceClient.from_connection_string(self._connection_string)
        return self._service

    def write(self, robot_name: str, filename: str, data: bytes) -> None:
        name = blob_name(robot_name, filename)
        try:
            blob = self._client().get_blob_client(container=self._container, blob=name)
            blob.upload_blob(data, overwrite=True)
        except (AzureError, ValueError) as exc:
            raise UpstreamError(f"storage write failed: {exc}") from exc
        logger.info("stored %d bytes at %s/%s", len(data), self._container, name)
