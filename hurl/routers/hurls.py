"""
Hurl API routes.

Runs hurls, lists the hurls made in the current session and serves stored
hurls and their rendered views. Network-bound routes are plain ``def`` so
FastAPI runs them in its threadpool.
"""

from typing import Optional

import httpx
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from ..config import Settings, get_settings
from ..database import get_db
from ..exceptions import ResourceNotFoundError
from ..schemas.hurl import (
    HurlDetail,
    HurlErrorResponse,
    HurlListResponse,
    HurlParams,
    HurlResult,
    ViewRecord,
)
from ..security import require_basic_auth
from ..services import store
from ..services.hurl_service import run_hurl
from ..services.rate_limiter import RateLimiter, get_rate_limiter
from ..services.user_context import UserContext


router = APIRouter(tags=["hurls"])


def get_transport() -> Optional[httpx.BaseTransport]:
    """Dependency returning the httpx transport for outbound hurls (None = network)."""
    return None


@router.get("/", response_model=HurlListResponse)
def list_hurls(request: Request, db: Session = Depends(get_db)):
    """
    List the hurls made in the current session, newest first.

    Ids whose hurl is no longer stored are skipped.
    """
    user = UserContext.from_session(request.session)
    items = []
    for id in reversed(user.hurls):
        hurl = store.find(db, "hurls", id)
        if hurl is not None:
            items.append(hurl)
    return HurlListResponse(items=items, total=len(items))


@router.post(
    "/",
    response_model=HurlResult,
    responses={
        400: {"model": HurlErrorResponse, "description": "Invalid URL"},
        429: {"model": HurlErrorResponse, "description": "Rate limited"},
        502: {"model": HurlErrorResponse, "description": "Execution failed"},
    },
    dependencies=[Depends(require_basic_auth)],
)
def create_hurl(
    params: HurlParams,
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    transport: Optional[httpx.BaseTransport] = Depends(get_transport),
):
    """
    Execute a hurl and return its rendered header, body and request.

    The new hurl is appended to the session history; ``prev_hurl`` links
    back to the hurl made before it.
    """
    user = UserContext.from_session(request.session)
    result, user = run_hurl(
        params=params,
        db=db,
        user=user,
        settings=settings,
        rate_limiter=rate_limiter,
        transport=transport,
    )
    user.to_session(request.session)
    return result


@router.get("/hurls/{hurl_id}", response_model=HurlDetail)
def get_hurl(hurl_id: str, db: Session = Depends(get_db)):
    """
    Get a stored hurl and, when present, its view.

    Raises:
        ResourceNotFoundError: 404 if the hurl is not stored
    """
    hurl = store.find(db, "hurls", hurl_id)
    if hurl is None:
        raise ResourceNotFoundError("Hurl", hurl_id)
    view = store.find(db, "views", hurl_id)
    return HurlDetail(hurl=hurl, view=view)


@router.delete("/hurls/{hurl_id}", dependencies=[Depends(require_basic_auth)])
def remove_hurl(hurl_id: str, request: Request, db: Session = Depends(get_db)):
    """
    Delete a hurl made in the current session, together with its view.

    Hurls outside the session history are left alone.
    """
    user = UserContext.from_session(request.session)
    if hurl_id in user.hurls:
        store.delete(db, "hurls", hurl_id)
        store.delete(db, "views", hurl_id)
        user.remove_hurl(hurl_id)
        user.to_session(request.session)
    return {"status": "ok"}


@router.get("/hurls/{hurl_id}/{view_id}", response_model=HurlDetail)
def get_hurl_with_view(hurl_id: str, view_id: str, db: Session = Depends(get_db)):
    """
    Get a stored hurl together with a specific view.

    Raises:
        ResourceNotFoundError: 404 unless both the hurl and the view exist
    """
    hurl = store.find(db, "hurls", hurl_id)
    if hurl is None:
        raise ResourceNotFoundError("Hurl", hurl_id)
    view = store.find(db, "views", view_id)
    if view is None:
        raise ResourceNotFoundError("View", view_id)
    return HurlDetail(hurl=hurl, view=view, view_id=view_id)


@router.get("/views/{view_id}", response_model=ViewRecord)
def get_view(view_id: str, db: Session = Depends(get_db)):
    """
    Get a stored view.

    Raises:
        ResourceNotFoundError: 404 if the view is not stored
    """
    view = store.find(db, "views", view_id)
    if view is None:
        raise ResourceNotFoundError("View", view_id)
    return view


@router.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
