import time
from fastapi import APIRouter

from services.session_store import sessions

router = APIRouter(tags=["health"])

_start_time = time.time()


@router.get("/health")
async def health_check():
    return {
        "status": "ok",
        "uptime_seconds": round(time.time() - _start_time),
        "active_sessions": len(sessions),
        "version": "0.1.0",
    }
