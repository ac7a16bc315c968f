"""Main conversion logic for Markdown to Telegram HTML.

Each call parses the markdown with a fresh Mistune instance and renders the
token tree with ``TelegramHtmlRenderer``. Nothing is shared between calls,
so conversion is safe to run concurrently.
"""

from __future__ import annotations

from collections.abc import Callable
import logging

import mistune

from tg_html.config import DEFAULT_CONFIG, MarkdownConfig
from tg_html.renderer import TelegramHtmlRenderer
from tg_html.utils import escape_html

LOGGER = logging.getLogger(__name__)

PLUGINS = ('strikethrough', 'task_lists', 'url', 'table')

ParserFactory = Callable[[TelegramHtmlRenderer], mistune.Markdown]


def create_parser(renderer: TelegramHtmlRenderer) -> mistune.Markdown:
    """Create Markdown instance WITH plugins bound to the given renderer.

    Plugins are critical for strikethrough, task lists, autolinks and tables.
    The task_lists plugin rewrites list_item tokens into task_list_item
    through a before-render hook, which ``Markdown.parse`` applies.

    Args:
        renderer: Renderer that receives the parsed token tree

    Returns:
        Configured Markdown instance
    """
    return mistune.create_markdown(renderer=renderer, plugins=list(PLUGINS))


def markdown_to_telegram(
    markdown_text: str,
    config: MarkdownConfig | None = None,
    parser_factory: ParserFactory = create_parser,
) -> str:
    """Convert Markdown text to Telegram HTML.

    Never raises for string input: if parsing or rendering fails, the whole
    input is returned HTML-escaped instead.

    Args:
        markdown_text: Input Markdown text
        config: Optional configuration for rendering (uses default if None)
        parser_factory: Builds the Markdown parser around the renderer

    Returns:
        Telegram HTML string, empty for blank input

    Examples:
        >>> markdown_to_telegram('**Bold** and *italic*')
        '<b>Bold</b> and <i>italic</i>'

        >>> markdown_to_telegram('# Title')
        'Title'
    """
    if not markdown_text or not markdown_text.strip():
        return ''

    renderer = TelegramHtmlRenderer(config or DEFAULT_CONFIG)

    try:
        md = parser_factory(renderer)
        result = md(markdown_text)
    except Exception:
        LOGGER.exception('Error converting markdown, falling back to escaped text')
        return escape_html(markdown_text)

    if not isinstance(result, str):
        LOGGER.error('Parser returned %s instead of rendered text', type(result).__name__)
        return escape_html(markdown_text)

    return renderer.finalize(result)


# Kept for backward compatibility
markdown_to_html = markdown_to_telegram
