"""Post-processing of rendered HTML: table wrapping and color remapping."""

import logging
import xml.etree.ElementTree as etree
from collections.abc import Sequence

import fastapi
import markdown
import markdown.extensions
import markdown.treeprocessors
import starlette.middleware.base
import starlette.types

from . import errors, highlight

logger = logging.getLogger(__name__)

TABLE_WRAPPER_CLASS = 'table-wrapper'

# ---------------------------------------------------------------------------
# Table wrapping
# ---------------------------------------------------------------------------


def wrap_tables(root: etree.Element) -> etree.Element:
    """Wrap each top-level <table> in a <div class="table-wrapper">.

    Only direct children of the root are examined; nested tables are left alone.
    """
    positions = [i for i, child in enumerate(root) if child.tag == 'table']
    for position in positions:
        table = root[position]
        wrapper = etree.Element('div', {'class': TABLE_WRAPPER_CLASS})
        wrapper.tail = table.tail
        table.tail = None
        wrapper.append(table)
        root[position] = wrapper
    return root


class TableWrapperTreeprocessor(markdown.treeprocessors.Treeprocessor):
    """Runs wrap_tables over the document tree before serialization."""

    def run(self, root: etree.Element) -> None:
        wrap_tables(root)


class TableWrapperExtension(markdown.extensions.Extension):
    """Markdown extension registering TableWrapperTreeprocessor."""

    def extendMarkdown(self, md: markdown.Markdown) -> None:
        # After prettify (10), so the wrapper sees the final block layout.
        md.treeprocessors.register(TableWrapperTreeprocessor(md), 'table_wrapper', 5)


# ---------------------------------------------------------------------------
# Response color remapping
# ---------------------------------------------------------------------------


def _charset(content_type: str) -> str:
    for param in content_type.split(';')[1:]:
        key, _, value = param.strip().partition('=')
        if key.lower() == 'charset' and value:
            return value.strip('"')
    return 'utf-8'


def read_body_text(body: bytes, content_type: str = 'text/html') -> str:
    """Decode a buffered response body, raising BodyReadError if it is not text."""
    charset = _charset(content_type)
    try:
        return body.decode(charset)
    except (UnicodeDecodeError, LookupError) as e:
        raise errors.BodyReadError(
            f'Response body is not readable as {charset} text: {e}'
        ) from e


class ResponsePostProcessor(starlette.middleware.base.BaseHTTPMiddleware):
    """Rewrites highlight colors in every HTML response body.

    The body is buffered in full; status and headers are passed through, with
    Content-Length recomputed for the rewritten body.
    """

    def __init__(
        self,
        app: starlette.types.ASGIApp,
        rules: Sequence[tuple[str, str]] = highlight.COLOR_RULES,
    ) -> None:
        super().__init__(app)
        self.rules = rules

    async def dispatch(
        self,
        request: fastapi.Request,
        call_next: starlette.middleware.base.RequestResponseEndpoint,
    ) -> fastapi.Response:
        response = await call_next(request)
        content_type = response.headers.get('content-type', '')
        if not content_type.startswith('text/html'):
            return response

        body = b''.join([chunk async for chunk in response.body_iterator])  # type: ignore[attr-defined]
        html = read_body_text(body, content_type)
        modified = highlight.remap_colors(html, self.rules)

        headers = response.headers.mutablecopy()
        del headers['content-length']
        logger.debug(
            'Post-processed %s (%d -> %d chars)',
            request.url.path,
            len(html),
            len(modified),
        )
        return fastapi.Response(
            content=modified.encode(_charset(content_type)),
            status_code=response.status_code,
            headers=headers,
        )
