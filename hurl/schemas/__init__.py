"""
Pydantic schemas package.

Exports all schemas for API request/response validation.
"""

from .hurl import (
    HurlParams,
    HurlResult,
    HurlErrorResponse,
    ViewRecord,
    HurlDetail,
    HurlListResponse,
)

__all__ = [
    "HurlParams",
    "HurlResult",
    "HurlErrorResponse",
    "ViewRecord",
    "HurlDetail",
    "HurlListResponse",
]
