"""
Fallback error handler.

Turns any unhandled exception into a 500 response in the representation
the client asked for. Details are only shown to the client when
display_error_details is on; otherwise the full failure chain goes to
the operational log and the client gets a generic message.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from fastapi import FastAPI
from starlette.requests import Request
from starlette.responses import Response

from errorpage.domain.failure import Failure
from errorpage.domain.negotiation import (
    ContentType,
    accept_header_from,
    select_content_type,
)
from errorpage.shared.errors.renderers import render, render_text
from errorpage.shared.logging import ERROR_LOG_NAME

logger = logging.getLogger(__name__)

error_log = logging.getLogger(ERROR_LOG_NAME)

HTTP_500 = 500

LogSink = Callable[[str], None]


@dataclass(frozen=True)
class RenderedError:
    """A rendered error response, ready to be written by the transport."""

    body: str
    content_type: ContentType
    status_code: int = HTTP_500


class ErrorHandler:
    """Render unhandled failures for the client and the operational log.

    The detail-display flag is fixed at construction, so one instance can
    be shared by every request.

    Args:
        display_error_details: Include the failure chain in client output.
        log_sink: Callable receiving the plain-text log payload. Defaults
            to the ``errorpage.errors`` logger at ERROR level.
    """

    def __init__(
        self,
        display_error_details: bool = False,
        log_sink: Optional[LogSink] = None,
    ) -> None:
        self._display_error_details = bool(display_error_details)
        self._log_sink = log_sink or error_log.error

    @property
    def display_error_details(self) -> bool:
        return self._display_error_details

    def handle(
        self, accept_header: str, error: Union[Failure, BaseException]
    ) -> RenderedError:
        """Negotiate, render and, when details are hidden, log the failure.

        Args:
            accept_header: Raw Accept header value, empty if absent.
            error: The failure, or a Python exception to snapshot.

        Returns:
            The rendered body and its content type.
        """
        failure = _as_failure(error)
        content_type = select_content_type(accept_header)
        body = render(content_type, failure, self._display_error_details)
        self._write_to_error_log(failure)
        return RenderedError(body=body, content_type=content_type)

    async def __call__(self, request: Request, exc: Exception) -> Response:
        """Starlette exception handler entry point."""
        rendered = self.handle(accept_header_from(request), exc)
        return Response(
            content=rendered.body.encode("utf-8"),
            status_code=rendered.status_code,
            headers={"Content-Type": rendered.content_type.value},
        )

    def _write_to_error_log(self, failure: Failure) -> None:
        if self._display_error_details:
            return
        try:
            self._log_sink(render_text(failure))
        except Exception:
            logger.warning("Could not write failure to the error log", exc_info=True)


def _as_failure(error: Union[Failure, BaseException]) -> Failure:
    if isinstance(error, Failure):
        return error
    return Failure.from_exception(error)


def register_error_handlers(app: FastAPI, handler: ErrorHandler) -> None:
    """Register the fallback handler for every unhandled exception.

    Args:
        app: The FastAPI application instance.
        handler: The configured error handler.
    """
    app.add_exception_handler(Exception, handler)
