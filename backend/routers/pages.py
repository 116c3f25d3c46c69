import logging

from fastapi import APIRouter, HTTPException, Request, Response
from fastapi.responses import HTMLResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from config import settings
from services.session_store import sessions
from views.country_list import render_page

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])

limiter = Limiter(key_func=get_remote_address)


@router.get("/", response_class=HTMLResponse)
@limiter.limit(settings.page_rate_limit)
async def country_flags_page(request: Request):
    # Each page load opens a new view session with its own fetch
    session_id, view = await sessions.create()
    return HTMLResponse(
        render_page(
            view.state,
            refresh_url=request.url_for("view_session", session_id=session_id).path,
            refresh_seconds=settings.refresh_interval_seconds,
        )
    )


@router.get("/views/{session_id}", response_class=HTMLResponse, name="view_session")
async def view_session(request: Request, session_id: str):
    view = await sessions.get(session_id)
    if view is None:
        raise HTTPException(status_code=404, detail="View session not found")
    return HTMLResponse(
        render_page(
            view.state,
            refresh_url=request.url.path,
            refresh_seconds=settings.refresh_interval_seconds,
        )
    )


@router.delete("/views/{session_id}", status_code=204)
async def close_session(session_id: str):
    if not await sessions.remove(session_id):
        raise HTTPException(status_code=404, detail="View session not found")
    return Response(status_code=204)
