"""
Request specification builder.

Turns the loosely structured hurl form into a normalized RequestSpec:
method defaulting, header/field zipping from parallel arrays, raw body
precedence and basic auth encoding.
"""

import base64
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from ..schemas.hurl import HurlParams


# Methods that carry a request body
BODY_METHODS = ("POST", "PUT")

Pair = tuple[str, str]


@dataclass(frozen=True)
class RequestSpec:
    """Normalized description of one outbound HTTP call."""
    url: str
    method: str = "GET"
    follow_redirects: bool = False
    auth_mode: str = "none"
    headers: tuple[Pair, ...] = ()
    post_fields: tuple[Pair, ...] = ()
    raw_body: Optional[str] = None

    @property
    def post_data(self) -> list:
        """What goes in the body: the raw body alone, or the field pairs."""
        if self.raw_body is not None:
            return [self.raw_body]
        return list(self.post_fields)


def normalize_method(method: Optional[str]) -> str:
    """Blank or missing becomes GET; anything else is upper-cased as is."""
    if method is None or str(method) == "":
        return "GET"
    return str(method).upper()


def coerce_list(value: Any) -> list[str]:
    """
    Coerce a form array to a list of strings.

    ``None`` becomes an empty list, a scalar a one-item list, and ``None``
    items inside a list become empty strings.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return ["" if item is None else str(item) for item in value]
    return [str(value)]


def zip_headers(keys: Any, values: Any) -> list[Pair]:
    """
    Pair header keys with values by position.

    A pair is dropped when its value is empty or missing. Key order is
    kept and duplicate keys are not collapsed.

    Example:
        >>> zip_headers(["a", "b", "c"], ["x", "", "z"])
        [('a', 'x'), ('c', 'z')]
    """
    keys, values = coerce_list(keys), coerce_list(values)

    headers: list[Pair] = []
    for i, key in enumerate(keys):
        value = values[i] if i < len(values) else ""
        if value == "":
            continue
        headers.append((key, value))
    return headers


def make_fields(method: str, keys: Any, values: Any) -> list[Pair]:
    """
    Build post fields from parallel arrays.

    Only POST and PUT carry fields; a pair is dropped when either its
    name or its value is empty.
    """
    if method not in BODY_METHODS:
        return []

    keys, values = coerce_list(keys), coerce_list(values)

    fields: list[Pair] = []
    for i, name in enumerate(keys):
        value = values[i] if i < len(values) else ""
        if name == "" or value == "":
            continue
        fields.append((name, value))
    return fields


def basic_auth_header(username: Optional[str], password: Optional[str]) -> str:
    """Encode credentials as an ``Authorization: Basic`` value."""
    credentials = f"{username or ''}:{password or ''}"
    token = base64.b64encode(credentials.encode("utf-8")).decode("ascii")
    return "Basic " + token.replace("\n", "")


def build_request_spec(params: "HurlParams") -> RequestSpec:
    """
    Build a RequestSpec from the inbound parameters.

    The URL is taken as given; validating it is the caller's job.
    """
    method = normalize_method(params.method)
    auth_mode = "basic" if params.auth == "basic" else "none"

    headers: list[Pair] = []
    if auth_mode == "basic":
        headers.append(("Authorization", basic_auth_header(params.username, params.password)))
    headers.extend(zip_headers(params.header_keys, params.header_vals))

    # A raw body replaces the form fields entirely
    raw_body = None
    post_fields: list[Pair] = []
    if params.post_body is not None and method in BODY_METHODS:
        raw_body = params.post_body
    else:
        post_fields = make_fields(method, params.param_keys, params.param_vals)

    return RequestSpec(
        url=params.url or "",
        method=method,
        follow_redirects=params.follow_redirects,
        auth_mode=auth_mode,
        headers=tuple(headers),
        post_fields=tuple(post_fields),
        raw_body=raw_body,
    )
