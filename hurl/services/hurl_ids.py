"""Content-derived ids for hurls and views."""

import hashlib
import json
from typing import Any


def make_hurl_id(params: dict[str, Any]) -> str:
    """
    Hash the complete parameter set into a stable id.

    Key order is part of the input: the same parameters given in the same
    order always produce the same id.
    """
    payload = json.dumps(params, ensure_ascii=False, separators=(",", ":"), default=str)
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()
