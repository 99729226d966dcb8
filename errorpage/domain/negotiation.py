"""
Content negotiation for error responses.

Picks one representation from the client's Accept header.
Tokens are matched verbatim against the known media types:
no quality weighting, no wildcard expansion, no parameter stripping.
"""

from enum import Enum


class ContentType(str, Enum):
    """Media types the error handler can render."""

    JSON = "application/json"
    XML = "application/xml"
    TEXT_XML = "text/xml"
    HTML = "text/html"


DEFAULT_CONTENT_TYPE = ContentType.HTML

_KNOWN = {content_type.value: content_type for content_type in ContentType}


def select_content_type(accept_header: str) -> ContentType:
    """Return the first known media type listed in the Accept header.

    Args:
        accept_header: Raw Accept header value, possibly empty.

    Returns:
        The first token, in client order, that equals a known media type,
        or text/html when none does.
    """
    for token in accept_header.split(","):
        content_type = _KNOWN.get(token.strip())
        if content_type is not None:
            return content_type
    return DEFAULT_CONTENT_TYPE


def accept_header_from(request) -> str:
    """Return the request's Accept header as a single comma-joined line."""
    return ",".join(request.headers.getlist("accept"))
