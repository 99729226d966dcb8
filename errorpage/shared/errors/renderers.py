"""
Error body renderers.

One renderer per supported representation. Each takes the root of a
failure chain and the detail-display flag and returns a complete body.
The plain-text renderer produces the operational log payload and always
includes the full chain.

Chains are rendered root first, oldest cause last, in every format.
"""

import re
from html import escape
from typing import Callable

from errorpage.domain.failure import Failure, iter_chain
from errorpage.domain.negotiation import ContentType
from errorpage.interfaces.schemas import ErrorBody, ErrorDetail

GENERIC_MESSAGE = "Slim Application Error"

JSON_INDENT = 4

HTML_TEMPLATE = (
    "<html><head><meta http-equiv='Content-Type' content='text/html; charset=utf-8'>"
    "<title>{title}</title><style>body{{margin:0;padding:30px;font:12px/1.5 "
    "Helvetica,Arial,Verdana,sans-serif;}}h1{{margin:0;font-size:48px;"
    "font-weight:normal;line-height:48px;}}strong{{display:inline-block;"
    "width:65px;}}</style></head><body><h1>{title}</h1>{content}</body></html>"
)

HTML_DETAILS_INTRO = (
    "<p>The application could not run because of the following error:</p>"
)
HTML_GENERIC_PARAGRAPH = (
    "<p>A website error has occurred. Sorry for the temporary inconvenience.</p>"
)

LOG_HINT = (
    'View in rendered output by enabling the "display_error_details" setting.'
)

Renderer = Callable[[Failure, bool], str]


# ------------------------------------------------------------------
# JSON
# ------------------------------------------------------------------


def render_json(root: Failure, display_error_details: bool) -> str:
    """Render the error as a pretty-printed JSON document."""
    body = ErrorBody(message=GENERIC_MESSAGE)
    if display_error_details:
        body.error = [
            ErrorDetail(
                type=failure.kind,
                code=failure.code or None,
                message=failure.message,
                file=failure.file,
                line=failure.line,
                trace=failure.trace.split("\n"),
            )
            for failure in iter_chain(root)
        ]
    return body.model_dump_json(indent=JSON_INDENT, exclude_none=True)


# ------------------------------------------------------------------
# XML
# ------------------------------------------------------------------


# Anything outside the XML 1.0 Char production.
_XML_INVALID = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def xml_chars(text: str) -> str:
    """Replace characters XML cannot carry with their Python escape."""
    return _XML_INVALID.sub(lambda match: ascii(match.group())[1:-1], text)


def _xml_escape(text: str) -> str:
    return escape(xml_chars(text), quote=False)


def cdata(content: str) -> str:
    """Wrap text in a CDATA section, splitting any embedded ``]]>``."""
    content = xml_chars(content).replace("]]>", "]]]]><![CDATA[>")
    return f"<![CDATA[{content}]]>"


def render_xml(root: Failure, display_error_details: bool) -> str:
    """Render the error as a hand-built XML document."""
    xml = f"<error>\n  <message>{GENERIC_MESSAGE}</message>\n"
    if display_error_details:
        for failure in iter_chain(root):
            xml += "  <error>\n"
            xml += f"    <type>{_xml_escape(failure.kind)}</type>\n"
            if failure.code:
                xml += f"    <code>{_xml_escape(str(failure.code))}</code>\n"
            xml += f"    <message>{cdata(failure.message)}</message>\n"
            xml += f"    <file>{_xml_escape(failure.file)}</file>\n"
            xml += f"    <line>{failure.line}</line>\n"
            xml += f"    <trace>{cdata(failure.trace)}</trace>\n"
            xml += "  </error>\n"
    xml += "</error>"
    return xml


# ------------------------------------------------------------------
# HTML
# ------------------------------------------------------------------


def _html_failure(failure: Failure) -> str:
    html = f"<div><strong>Type:</strong> {escape(failure.kind)}</div>"
    if failure.code:
        html += f"<div><strong>Code:</strong> {escape(str(failure.code))}</div>"
    if failure.message:
        html += f"<div><strong>Message:</strong> {escape(failure.message)}</div>"
    if failure.file:
        html += f"<div><strong>File:</strong> {escape(failure.file)}</div>"
    if failure.line:
        html += f"<div><strong>Line:</strong> {failure.line}</div>"
    if failure.trace:
        html += "<h2>Trace</h2>"
        html += f"<pre>{escape(failure.trace)}</pre>"
    return html


def render_html(root: Failure, display_error_details: bool) -> str:
    """Render the error as a self-contained HTML page."""
    if display_error_details:
        content = HTML_DETAILS_INTRO + "<h2>Details</h2>"
        for index, failure in enumerate(iter_chain(root)):
            if index:
                content += "<h2>Previous error</h2>"
            content += _html_failure(failure)
    else:
        content = HTML_GENERIC_PARAGRAPH
    return HTML_TEMPLATE.format(title=GENERIC_MESSAGE, content=content)


# ------------------------------------------------------------------
# Plain text (operational log)
# ------------------------------------------------------------------


def _text_failure(failure: Failure) -> str:
    text = f"Type: {failure.kind}\n"
    if failure.code:
        text += f"Code: {failure.code}\n"
    if failure.message:
        text += f"Message: {escape(failure.message)}\n"
    if failure.file:
        text += f"File: {failure.file}\n"
    if failure.line:
        text += f"Line: {failure.line}\n"
    if failure.trace:
        text += f"Trace: {failure.trace}"
    return text


def render_text(root: Failure) -> str:
    """Render the full chain as plain text for the operational log."""
    blocks = [_text_failure(failure) for failure in iter_chain(root)]
    text = f"{GENERIC_MESSAGE}:\n"
    text += "\nPrevious error:\n".join(blocks)
    text += f"\n{LOG_HINT}\n"
    return text


RENDERERS: dict[ContentType, Renderer] = {
    ContentType.JSON: render_json,
    ContentType.XML: render_xml,
    ContentType.TEXT_XML: render_xml,
    ContentType.HTML: render_html,
}


def render(
    content_type: ContentType, root: Failure, display_error_details: bool
) -> str:
    """Render the failure chain in the representation for a content type."""
    return RENDERERS[content_type](root, display_error_details)
