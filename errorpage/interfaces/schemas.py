"""
Pydantic schemas for API responses.

These schemas define the JSON contract of the status endpoint and of
the JSON error body. No business logic belongs here.
"""

from pydantic import BaseModel, Field


class ErrorPageStatus(BaseModel):
    """Response schema for the error page status endpoint.

    Attributes:
        version: Application version.
        display_error_details: Whether error responses carry the failure chain.
        content_types: Media types the error handler can negotiate.
        default_content_type: Media type used when nothing else matches.
    """

    version: str
    display_error_details: bool
    content_types: list[str]
    default_content_type: str


class ErrorDetail(BaseModel):
    """One entry of the failure chain in a JSON error body.

    Attributes:
        type: Type name of the failure.
        code: Failure code, left out of the payload when falsy.
        message: Raw failure message.
        file: Origin file.
        line: Origin line.
        trace: Stack trace split into lines.
    """

    type: str
    code: int | str | None = None
    message: str
    file: str
    line: int
    trace: list[str] = Field(default_factory=list)


class ErrorBody(BaseModel):
    """JSON error body. ``error`` is only present when details are shown."""

    message: str
    error: list[ErrorDetail] | None = None
