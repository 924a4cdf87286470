"""Uniform JSON response envelope."""

from __future__ import annotations

from typing import Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from clubhouse.core.constants import utcnow
from clubhouse.core.errors import ServiceError


def success_response(
    data: Any,
    status_code: int = status.HTTP_200_OK,
    meta: dict[str, Any] | None = None,
) -> JSONResponse:
    """Wrap ``data`` in the success envelope; schemas are emitted with camelCase keys."""

    body: dict[str, Any] = {
        "success": True,
        "timestamp": utcnow().isoformat(),
        "statusCode": status_code,
        "data": to_payload(data),
    }
    if meta is not None:
        body["meta"] = meta
    return JSONResponse(jsonable_encoder(body), status_code=status_code)


def error_response(error: ServiceError) -> JSONResponse:
    """Wrap a service error in the error envelope."""

    error_body: dict[str, Any] = {"code": error.code, "message": error.message}
    if error.details is not None:
        error_body["details"] = error.details
    body = {
        "success": False,
        "timestamp": utcnow().isoformat(),
        "statusCode": error.status_code,
        "error": error_body,
    }
    return JSONResponse(jsonable_encoder(body), status_code=error.status_code)


def to_payload(data: Any) -> Any:
    """Dump schemas, including schemas nested in dicts and lists, by alias."""

    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, dict):
        return {key: to_payload(value) for key, value in data.items()}
    if isinstance(data, list | tuple):
        return [to_payload(item) for item in data]
    return data
