"""
Response envelope and base request model shared by all API routers.

    {"success": true, "data": ..., "count": N}
    {"success": false, "error": "..."}
"""
from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict


class RequestModel(BaseModel):
    """Request bodies reject fields they do not declare"""
    model_config = ConfigDict(extra="forbid")

    def changes(self) -> dict[str, Any]:
        """Только явно переданные поля (для частичного обновления)"""
        return self.model_dump(exclude_unset=True)


def ok(data: Any = None, count: int | None = None, status_code: int = 200, **extra) -> Any:
    body = {"success": True, "data": data}
    if count is not None:
        body["count"] = count
    body.update(extra)
    if status_code == 200:
        return body
    return JSONResponse(body, status_code=status_code)


def created(data: Any) -> JSONResponse:
    return ok(data, status_code=201)


def error_body(message: str) -> dict:
    return {"success": False, "error": message}
