"""
Error page status router.

Reports how the fallback error handler is configured for this
application: whether details reach clients and which media types can
be negotiated.
"""

from fastapi import APIRouter, Request

from errorpage.domain.negotiation import DEFAULT_CONTENT_TYPE, ContentType
from errorpage.interfaces.schemas import ErrorPageStatus

router = APIRouter(tags=["status"])


@router.get(
    "/status",
    response_model=ErrorPageStatus,
    summary="Error page status",
    description="Returns the error handler configuration and version.",
)
def error_page_status(request: Request) -> ErrorPageStatus:
    """Report the configuration the application was built with."""
    settings = request.app.state.settings
    handler = request.app.state.error_handler
    return ErrorPageStatus(
        version=settings.version,
        display_error_details=handler.display_error_details,
        content_types=[content_type.value for content_type in ContentType],
        default_content_type=DEFAULT_CONTENT_TYPE.value,
    )
