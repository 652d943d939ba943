"""
Pretty printing of raw protocol text.

All functions are pure and never raise on malformed input: a body that
cannot be reformatted is returned unchanged.
"""

import json
import re
from typing import Iterable
from urllib.parse import quote_plus

import jsbeautifier


# Content types whose bodies are reformatted
SCRIPT_TYPE_MARKERS = ("json", "javascript", "ecmascript")

# Insignificant whitespace between JSON tokens
JSON_WHITESPACE = " \t\r\n"

LINE_BREAK = re.compile(r"\r\n|\r|\n")


def is_script_type(content_type: str | None) -> bool:
    """Return True for JSON and JavaScript content types (including ``js``)."""
    if not content_type:
        return False
    content_type = content_type.lower()
    if content_type == "js":
        return True
    return any(marker in content_type for marker in SCRIPT_TYPE_MARKERS)


def pretty_print_headers(raw: str | None) -> str:
    """
    Normalize a raw header block for display.

    Lines are split on any line ending, stripped, and joined with ``\\n``;
    trailing blank lines are dropped.

    Example:
        >>> pretty_print_headers("HTTP/1.1 200 OK\\r\\nServer: x \\r\\n\\r\\n")
        'HTTP/1.1 200 OK\\nServer: x'
    """
    if not raw:
        return ""

    lines = [line.strip() for line in LINE_BREAK.split(raw)]
    while lines and not lines[-1]:
        lines.pop()
    return "\n".join(lines)


def _is_javascript(content_type: str) -> bool:
    content_type = content_type.lower()
    return content_type == "js" or "javascript" in content_type or "ecmascript" in content_type


def _skip_whitespace(text: str, i: int) -> int:
    while i < len(text) and text[i] in JSON_WHITESPACE:
        i += 1
    return i


def reindent_json(text: str, indent: str = "  ") -> str:
    """
    Re-indent well-formed JSON text token by token.

    Only whitespace between tokens changes: strings, numbers and
    repeated object keys are copied verbatim.
    """
    out = []
    depth = 0
    i, n = 0, len(text)
    while i < n:
        ch = text[i]
        if ch == '"':
            j = i + 1
            while j < n and text[j] != '"':
                j += 2 if text[j] == "\\" else 1
            out.append(text[i:j + 1])
            i = j + 1
        elif ch in JSON_WHITESPACE:
            i += 1
        elif ch in "{[":
            closer = "}" if ch == "{" else "]"
            k = _skip_whitespace(text, i + 1)
            if k < n and text[k] == closer:
                out.append(ch + closer)
                i = k + 1
            else:
                depth += 1
                out.append(ch + "\n" + indent * depth)
                i += 1
        elif ch in "}]":
            depth -= 1
            out.append("\n" + indent * depth + ch)
            i += 1
        elif ch == ",":
            out.append(",\n" + indent * depth)
            i += 1
        elif ch == ":":
            out.append(": ")
            i += 1
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def beautify_script(body: str) -> str:
    """Reformat JavaScript source with jsbeautifier."""
    options = jsbeautifier.default_options()
    options.indent_size = 2
    return jsbeautifier.beautify(body, options)


def pretty_print_body(content_type: str | None, body: str | None) -> str:
    """
    Reformat a response body for reading.

    JSON is re-indented without touching its values. Other script bodies
    go through the JavaScript beautifier. Everything else, and any body
    the formatters choke on, comes back as is.
    """
    if body is None:
        return ""
    if not is_script_type(content_type):
        return body

    try:
        json.loads(body)
    except (ValueError, RecursionError):
        pass
    else:
        return reindent_json(body)

    if not _is_javascript(content_type):
        return body

    try:
        return beautify_script(body)
    except Exception:
        # jsbeautifier raises assorted errors on input it cannot tokenize
        return body


def encode_fields(post_data: Iterable) -> str:
    """
    Flatten body data to a single string.

    Field pairs are form-encoded individually and joined with ``&`` in
    order; plain strings (a raw body) are passed through.
    """
    parts = []
    for item in post_data:
        if isinstance(item, str):
            parts.append(item)
        else:
            name, value = item
            parts.append(f"{quote_plus(name)}={quote_plus(value)}")
    return "&".join(parts)


def pretty_print_request(sent_headers: Iterable[str], post_data: Iterable) -> str:
    """Render the request as sent: header lines, then the encoded body if any."""
    text = "\n".join(line.rstrip("\r\n") for line in sent_headers)

    body = encode_fields(post_data)
    if body:
        text += "\n\n" + body
    return text
