from __future__ import annotations

import datetime as dt

from fastapi import APIRouter

from tracker.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health():
    return {
        "status": "OK",
        "timestamp": dt.datetime.now(dt.timezone.utc).isoformat(),
    }
