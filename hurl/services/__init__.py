# Services package

from .url_validator import UrlCheck, check_url, invalid_url
from .request_builder import RequestSpec, build_request_spec, make_fields, zip_headers
from .http_executor import ExecutionResult, Method, execute
from .pretty_printer import pretty_print_body, pretty_print_headers, pretty_print_request
from .hurl_ids import make_hurl_id
from .hurl_service import run_hurl

__all__ = [
    "UrlCheck",
    "check_url",
    "invalid_url",
    "RequestSpec",
    "build_request_spec",
    "make_fields",
    "zip_headers",
    "ExecutionResult",
    "Method",
    "execute",
    "pretty_print_body",
    "pretty_print_headers",
    "pretty_print_request",
    "make_hurl_id",
    "run_hurl",
]
