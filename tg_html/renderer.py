"""Custom Mistune renderer for Telegram HTML parse mode."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
import logging
import re
from typing import Any

from mistune import BaseRenderer
from mistune.core import BlockState
from mistune.util import striptags, unescape

from tg_html.config import DEFAULT_CONFIG, MarkdownConfig
from tg_html.utils import escape_html

LOGGER = logging.getLogger(__name__)

_EXCESS_NEWLINES_RE = re.compile(r'\n{3,}')
_NEWLINES_RE = re.compile(r'\n+')
_BREAK_TOKENS = frozenset({'softbreak', 'linebreak'})


def _plain_text(tokens: Iterable[Any]) -> str:
    """Collect unformatted text from inline tokens (used for image alt text)."""
    parts = []
    for tok in tokens:
        if isinstance(tok, str):
            parts.append(tok)
        elif isinstance(tok, dict):
            if tok.get('type') in _BREAK_TOKENS:
                parts.append(' ')
            elif isinstance(tok.get('raw'), str):
                parts.append(tok['raw'])
            elif isinstance(tok.get('children'), list):
                parts.append(_plain_text(tok['children']))
    return ''.join(parts)


def _table_line(cells: Sequence[str]) -> str:
    return '| ' + ' | '.join(cells) + ' |'


class TelegramHtmlRenderer(BaseRenderer):
    """Renderer that converts Markdown AST to Telegram HTML.

    Every render method is a pure function of its token subtree: it returns
    a string and closes every tag it opens. Only the tag subset accepted by
    Telegram is emitted: b, i, s, code, pre, a href, blockquote.
    All user-visible text is routed through ``escape_html``.

    Attributes:
        config: Configuration with glyphs and separators
    """

    NAME = 'telegram_html'

    def __init__(self, config: MarkdownConfig | None = None) -> None:
        """Initialize renderer.

        Args:
            config: Configuration for rendering (uses default if None)
        """
        super().__init__()
        self.config = config or DEFAULT_CONFIG

    def _get_method(self, name: str) -> Callable[..., str]:
        """Get renderer method by name with fallback.

        Args:
            name: Method name (token type)

        Returns:
            Renderer method or fallback handler
        """
        try:
            method = super()._get_method(name)
        except AttributeError:
            method = None
        if not callable(method):
            LOGGER.debug('No renderer for %r token, using fallback', name)
            return self._fallback_renderer
        return method

    def render_token(self, token: dict[str, Any], state: BlockState) -> str:
        func = self._get_method(str(token.get('type', '')))
        return func(token, state)

    def _fallback_renderer(self, token: dict[str, Any], state: BlockState) -> str:
        """Fallback renderer for unknown token types.

        Args:
            token: Token dict
            state: Rendering state

        Returns:
            Rendered children, escaped raw text, or empty string
        """
        if token.get('children'):
            return self._render_children(token, state)
        raw = token.get('raw')
        if isinstance(raw, str):
            return escape_html(raw)
        return ''

    @staticmethod
    def _attrs(token: dict[str, Any]) -> dict[str, Any]:
        attrs = token.get('attrs')
        return attrs if isinstance(attrs, dict) else {}

    @staticmethod
    def _raw(token: dict[str, Any]) -> str:
        raw = token.get('raw', '')
        return raw if isinstance(raw, str) else str(raw)

    @staticmethod
    def _child_tokens(token: dict[str, Any]) -> list[dict[str, Any]]:
        children = token.get('children') or []
        if isinstance(children, dict):
            children = [children]
        return [child for child in children if isinstance(child, dict)]

    def _render_children(self, token: dict[str, Any], state: BlockState) -> str:
        """Render children tokens or text strings.

        Args:
            token: Token dict with 'children'
            state: Rendering state

        Returns:
            Concatenated rendered children
        """
        children = token.get('children') or []

        # Normalize to list for consistent handling
        if not isinstance(children, list):
            children = [children]

        parts = []
        for child in children:
            if isinstance(child, str):
                parts.append(escape_html(child))
            elif isinstance(child, dict):
                parts.append(self.render_token(child, state))
        return ''.join(parts)

    def _wrap_children(self, token: dict[str, Any], state: BlockState, tag: str) -> str:
        """Generic renderer for inline tags (bold, italic, strikethrough)."""
        return f'<{tag}>{self._render_children(token, state)}</{tag}>'

    def _checkbox_glyph(self, checked: Any) -> str:
        return self.config.task_completed if checked else self.config.task_uncompleted

    # Inline elements

    def text(self, token: dict[str, Any], state: BlockState) -> str:
        """Render plain text, escaping ``& < > "``."""
        return escape_html(self._raw(token))

    def emphasis(self, token: dict[str, Any], state: BlockState) -> str:
        """Render italic text (*text* or _text_)."""
        return self._wrap_children(token, state, 'i')

    def strong(self, token: dict[str, Any], state: BlockState) -> str:
        """Render bold text (**text** or __text__)."""
        return self._wrap_children(token, state, 'b')

    def strikethrough(self, token: dict[str, Any], state: BlockState) -> str:
        """Render strikethrough text (~~text~~)."""
        return self._wrap_children(token, state, 's')

    def codespan(self, token: dict[str, Any], state: BlockState) -> str:
        """Render inline code (`code`).

        Code content is escaped literally, no markdown is interpreted inside.
        """
        return f'<code>{escape_html(self._raw(token))}</code>'

    def inline_html(self, token: dict[str, Any], state: BlockState) -> str:
        """Render inline HTML as escaped literal text.

        Telegram rejects unknown tags, so raw HTML is never passed through.
        """
        return escape_html(self._raw(token))

    def linebreak(self, token: dict[str, Any], state: BlockState) -> str:
        return '\n'

    def softbreak(self, token: dict[str, Any], state: BlockState) -> str:
        """Render soft line break.

        In standard Markdown, soft breaks (single newlines within a paragraph)
        are rendered as spaces for text wrapping. However, for Telegram messages,
        users expect single newlines to be preserved, so we render them as '\n'.
        """
        return '\n'

    def link(self, token: dict[str, Any], state: BlockState) -> str:
        """Render link [text](url), reference-style links and autolinks.

        Args:
            token: Token dict with 'attrs' (link URL) and 'children' (link text)
            state: Rendering state

        Returns:
            Anchor tag, or plain rendered text when the link has no URL
        """
        url = self._attrs(token).get('url', '')
        body = self._render_children(token, state)

        if not url:
            # No URL, just render children as plain text
            return body

        href = escape_html(str(url))
        # If no link text, use URL as text
        return f'<a href="{href}">{body or href}</a>'

    def image(self, token: dict[str, Any], state: BlockState) -> str:
        """Render image ![alt](src) as a link to the image.

        Telegram HTML cannot embed images inline, so the alt text (or the
        configured fallback word) becomes the link text.

        Args:
            token: Token dict with 'attrs' containing 'url' and alt text in 'children'
            state: Rendering state

        Returns:
            Anchor tag pointing to the image source
        """
        src = str(self._attrs(token).get('url', ''))
        alt_text = _plain_text(token.get('children') or []).strip()
        label = alt_text or self.config.image_fallback_text
        return f'<a href="{escape_html(src)}">{escape_html(label)}</a>'

    # Block elements

    def paragraph(self, token: dict[str, Any], state: BlockState) -> str:
        return f'{self._render_children(token, state)}\n\n'

    def heading(self, token: dict[str, Any], state: BlockState) -> str:
        """Render heading as plain text followed by a blank line.

        Neither the ``#`` markers nor any bold wrapper are emitted, matching
        how headings look in chat clients.
        """
        return f'{self._render_children(token, state)}\n\n'

    def block_text(self, token: dict[str, Any], state: BlockState) -> str:
        """Render block text (tight list item content)."""
        return f'{self._render_children(token, state)}\n'

    def blank_line(self, token: dict[str, Any], state: BlockState) -> str:
        return ''

    def thematic_break(self, token: dict[str, Any], state: BlockState) -> str:
        """Render thematic break (horizontal rule) as a fixed-width line."""
        line = self.config.thematic_break_char * self.config.thematic_break_length
        return f'\n{line}\n\n'

    def block_code(self, token: dict[str, Any], state: BlockState) -> str:
        """Render code block (```code```).

        Language info is dropped: the block only gets a ``pre`` wrapper.

        Args:
            token: Token dict with 'raw' (code) and optional 'attrs' (language info)
            state: Rendering state

        Returns:
            Preformatted block, or empty string for empty code
        """
        code_text = self._raw(token).rstrip()
        if not code_text:
            return ''
        return f'<pre>{escape_html(code_text)}</pre>\n\n'

    def block_quote(self, token: dict[str, Any], state: BlockState) -> str:
        body = self._render_children(token, state).strip()
        if not body:
            return ''
        return f'<blockquote>{body}</blockquote>\n\n'

    def block_html(self, token: dict[str, Any], state: BlockState) -> str:
        """Render block HTML as escaped literal text."""
        html_text = self._raw(token).strip()
        if not html_text:
            return ''
        return f'{escape_html(html_text)}\n\n'

    def list(self, token: dict[str, Any], state: BlockState) -> str:
        """Render list (ordered, unordered or task list).

        Markers are computed here rather than in list items:
        - task items get a checked or unchecked glyph
        - ordered lists count up from the declared start value
        - unordered lists get a bullet

        Args:
            token: Token dict with 'children' (list items) and 'attrs'
                (ordered flag, optional start)
            state: Rendering state

        Returns:
            One line per item followed by a blank line
        """
        attrs = self._attrs(token)
        ordered = bool(attrs.get('ordered', False))
        start = attrs.get('start', 1)
        if not isinstance(start, int):
            start = 1

        lines = []
        for index, item in enumerate(self._child_tokens(token)):
            if item.get('type') == 'task_list_item':
                marker = self._checkbox_glyph(self._attrs(item).get('checked', False))
            elif ordered:
                marker = f'{start + index}.'
            else:
                marker = self.config.bullet
            body = self._render_children(item, state).strip()
            lines.append(f'{marker} {body}')

        if not lines:
            return ''
        return '\n'.join(lines) + '\n\n'

    def list_item(self, token: dict[str, Any], state: BlockState) -> str:
        """Render list item body (markers are added by ``list``)."""
        return self._render_children(token, state).strip()

    def task_list_item(self, token: dict[str, Any], state: BlockState) -> str:
        """Render task list item (- [ ] or - [x]) outside of a list."""
        checked = self._attrs(token).get('checked', False)
        body = self._render_children(token, state).strip()
        return f'{self._checkbox_glyph(checked)} {body}'

    def checkbox(self, token: dict[str, Any], state: BlockState) -> str:
        return f'{self._checkbox_glyph(self._attrs(token).get("checked", False))} '

    # Table rendering methods

    def table(self, token: dict[str, Any], state: BlockState) -> str:
        """Render table as escaped preformatted text.

        Telegram has no table tags, so cells are flattened to plain text,
        joined with ``" | "`` and the whole table goes into one ``pre``
        block. A separator line follows the header row when there is one.

        Args:
            token: Token dict with 'children' (table_head and table_body)
            state: Rendering state

        Returns:
            Preformatted table, or empty string for a table without rows
        """
        headers: list[str] = []
        rows: list[list[str]] = []

        for section in self._child_tokens(token):
            section_type = section.get('type')
            if section_type == 'table_head':
                # In Mistune, table_head contains cells directly (no table_row wrapper)
                headers = [self._plain_cell(c, state) for c in self._child_tokens(section)]
            elif section_type == 'table_body':
                rows.extend(
                    [self._plain_cell(c, state) for c in self._child_tokens(row)]
                    for row in self._child_tokens(section)
                )
            elif section_type == 'table_row':
                rows.append([self._plain_cell(c, state) for c in self._child_tokens(section)])

        lines = []
        if headers:
            lines.append(_table_line(headers))
            lines.append(_table_line(['---'] * len(headers)))
        lines.extend(_table_line(row) for row in rows)

        if not lines:
            return ''

        return f'<pre>{escape_html(chr(10).join(lines))}</pre>\n\n'

    def _plain_cell(self, token: dict[str, Any], state: BlockState) -> str:
        """Render cell content and reduce it to single-line plain text.

        Tags are stripped and entities decoded so the table block is
        escaped exactly once.
        """
        text = unescape(striptags(self.table_cell(token, state)))
        return _NEWLINES_RE.sub(' ', text).strip()

    def table_head(self, token: dict[str, Any], state: BlockState) -> str:
        return self._render_children(token, state)

    def table_body(self, token: dict[str, Any], state: BlockState) -> str:
        return self._render_children(token, state)

    def table_row(self, token: dict[str, Any], state: BlockState) -> str:
        return self._render_children(token, state)

    def table_cell(self, token: dict[str, Any], state: BlockState) -> str:
        return self._render_children(token, state)

    def finalize(self, output: str) -> str:
        """Collapse runs of blank lines and trim the rendered document.

        Args:
            output: Concatenated output of the block renderers

        Returns:
            Final Telegram HTML string
        """
        return _EXCESS_NEWLINES_RE.sub('\n\n', output).strip()
