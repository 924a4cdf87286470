"""Liveness route."""

from __future__ import annotations

import time

from fastapi import APIRouter, Response

from clubhouse.core.config import get_settings
from clubhouse.core.responses import success_response

router = APIRouter(prefix="/api/v1", tags=["Health"])

_STARTED_AT = time.monotonic()


@router.get("/health")
def health():
    settings = get_settings()
    return success_response(
        {
            "status": "ok",
            "version": settings.app_version,
            "environment": settings.app_env,
            "uptime": int(time.monotonic() - _STARTED_AT),
        }
    )


@router.head("/health")
def health_head():
    return Response(status_code=200)
