"""
Hurl service: runs one hurl from form parameters to stored result.

Pipeline: rate limit check, URL check, spec building, execution,
rendering, id generation, persistence. Any failure ends the hurl before
anything is saved.
"""

import html
import logging
from typing import Optional

import httpx
from sqlalchemy.orm import Session

from ..config import Settings
from ..exceptions import ExecutionError, InvalidInputError, RateLimitedError
from ..schemas.hurl import HurlParams, HurlResult
from . import store
from .http_executor import execute
from .hurl_ids import make_hurl_id
from .pretty_printer import (
    encode_fields,
    pretty_print_body,
    pretty_print_headers,
    pretty_print_request,
)
from .rate_limiter import RateLimiter
from .request_builder import build_request_spec
from .url_validator import check_url
from .user_context import UserContext


logger = logging.getLogger(__name__)


def save_hurl(db: Session, params: HurlParams) -> str:
    """Store the hurl parameters under their content-derived id."""
    record = params.to_record()
    id = make_hurl_id(record)
    store.save(db, "hurls", id, {**record, "id": id})
    return id


def save_view(db: Session, id: str, header: str, body: str, request: str) -> str:
    """Store the rendered view under the id of its hurl."""
    store.save(db, "views", id, {"header": header, "body": body, "request": request})
    return id


def run_hurl(
    params: HurlParams,
    db: Session,
    user: UserContext,
    settings: Settings,
    rate_limiter: RateLimiter,
    transport: Optional[httpx.BaseTransport] = None,
) -> tuple[HurlResult, UserContext]:
    """
    Execute a hurl and store it with its rendered view.

    Args:
        params: The submitted form parameters
        db: Database session
        user: The caller's hurl history
        settings: Application settings
        rate_limiter: Throttling policy consulted before execution
        transport: Optional httpx transport, used instead of the network

    Returns:
        Tuple of (result payload, updated user context)

    Raises:
        RateLimitedError: The caller is throttled
        InvalidInputError: The URL is malformed or not allowed
        ExecutionError: The request failed; the message is HTML-escaped
    """
    if rate_limiter.is_rate_limited():
        raise RateLimitedError()

    url_check = check_url(params.url, settings.canonical_host)
    if not url_check.is_valid:
        logger.info("Rejected URL %r: %s", params.url, url_check.reason)
        raise InvalidInputError()

    spec = build_request_spec(params)

    try:
        result = execute(spec, transport=transport)
    except ExecutionError as e:
        raise ExecutionError(html.escape(e.detail)) from e

    if settings.debug:
        logger.debug("%s %s", spec.method, spec.url)
        logger.debug("\n".join(result.sent_headers))
        if result.post_data:
            logger.debug(encode_fields(result.post_data))
        logger.debug(result.status_header_block)

    header = pretty_print_headers(result.status_header_block)
    body = pretty_print_body(result.content_type, result.body)
    request = pretty_print_request(result.sent_headers, result.post_data)

    hurl_id = save_hurl(db, params)
    view_id = save_view(db, hurl_id, header, body, request)

    user = UserContext(hurls=list(user.hurls))
    user.add_hurl(hurl_id)

    payload = HurlResult(
        header=header,
        body=body,
        request=request,
        hurl_id=hurl_id,
        prev_hurl=user.second_to_last_hurl_id,
        view_id=view_id,
    )
    return payload, user
