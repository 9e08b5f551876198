from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from picture_validation.adapter.storage import StorageBinding
from picture_validation.api.dependencies import get_settings, get_storage
from picture_validation.config import Settings
from picture_validation.services.upload_service import process_upload

router = APIRouter(tags=["upload"])


@router.post("/upload")
async def upload(
    request: Request,
    robot_name: str | None = Query(default=None, alias="robotName"),
    filename: str | None = Query(default=None),
    settings: Settings = Depends(get_settings),
    storage: StorageBinding = Depends(get_storage),
) -> Response:
    body = await request.body()
    outcome = await process_upload(
        robot_name,
        filename,
        body,
        request.headers.get("content-type"),
        settings,
        storage,
    )
    if outcome.ok:
        return JSONResponse(content=outcome.result)
    return PlainTextResponse(outcome.error or "", status_code=outcome.status_code)
