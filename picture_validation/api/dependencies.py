from fastapi import Request

from picture_validation.adapter.storage import StorageBinding
from picture_validation.config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> StorageBinding:
    return request.app.state.storage
