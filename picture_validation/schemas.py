from typing import Any

from pydantic import BaseModel, Field


class MultipartSegment(BaseModel):
    filename: str | None = None
    content_type: str | None = None
    data: bytes = b""


class UploadOutcome(BaseModel):
    ok: bool = False
    result: Any = None
    error: str | None = None
    status_code: int = 200

    @classmethod
    def success(cls, result: Any) -> "UploadOutcome":
        return cls(ok=True, result=result)

    @classmethod
    def failure(cls, message: str, status_code: int) -> "UploadOutcome":
        return cls(ok=False, error=message, status_code=status_code)


class HealthResponse(BaseModel):
    status: str
    service: str
    checks: dict[str, str] = Field(default_factory=dict)
