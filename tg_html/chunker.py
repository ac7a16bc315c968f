"""Split rendered Telegram HTML into message-sized chunks.

Splitting priority: paragraph boundary > line boundary > hard character cut.
The same greedy packer runs at each granularity; a piece that does not fit
even on its own descends to the next finer separator.

Hard cuts only happen inside a single line longer than the limit. Such a cut
may separate an opening tag from its closing tag.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging

from tg_html.config import DEFAULT_CONFIG, MarkdownConfig
from tg_html.converter import markdown_to_telegram
from tg_html.utils import split_by_utf16, utf16_len

LOGGER = logging.getLogger(__name__)

# Paragraphs first, then lines
SEPARATORS = ('\n\n', '\n')


def _pack(text: str, max_length: int, separators: Sequence[str]) -> tuple[list[str], str]:
    """Greedily pack pieces of text into chunks.

    Args:
        text: Text to pack
        max_length: Maximum UTF-16 length per chunk
        separators: Remaining separators, coarsest first. When empty, the
            text is cut into fixed-width segments.

    Returns:
        (flushed chunks, trailing partial chunk). The partial chunk is left
        for the caller to keep accumulating into.
    """
    if not separators:
        LOGGER.debug('Hard-slicing line of %d units', utf16_len(text))
        segments = split_by_utf16(text, max_length)
        # Whitespace-only segments would be empty messages
        return [s for s in segments[:-1] if s.strip()], segments[-1]

    separator, finer = separators[0], separators[1:]
    # Reserve room for the separator joining current and the next piece
    threshold = max_length - utf16_len(separator)

    chunks: list[str] = []
    current = ''

    for piece in text.split(separator):
        if utf16_len(current) + utf16_len(piece) > threshold:
            if current.strip():
                chunks.append(current.strip())
            current = piece

            # Single piece exceeds limit: descend one level
            if utf16_len(current) > max_length:
                flushed, current = _pack(current, max_length, finer)
                chunks.extend(flushed)
        else:
            current = f'{current}{separator}{piece}' if current else piece

    return chunks, current


def split_html(html: str, max_length: int = 4096) -> list[str]:
    """Split rendered Telegram HTML into chunks of at most max_length.

    Args:
        html: Rendered Telegram HTML
        max_length: Maximum UTF-16 length per chunk (default 4096)

    Returns:
        Ordered list of chunks; empty list for blank input

    Raises:
        ValueError: If max_length is not positive
    """
    if max_length < 1:
        raise ValueError(f'max_length must be positive, got {max_length}')

    text = html.strip()
    if not text:
        return []

    if utf16_len(text) <= max_length:
        return [text]

    chunks, rest = _pack(text, max_length, SEPARATORS)
    if rest.strip():
        chunks.append(rest.strip())

    LOGGER.debug('Split %d units into %d chunks', utf16_len(text), len(chunks))
    return chunks


def markdown_to_chunks(
    markdown_text: str,
    max_length: int | None = None,
    config: MarkdownConfig | None = None,
) -> list[str]:
    """Render Markdown to Telegram HTML and split it into message chunks.

    Args:
        markdown_text: Input Markdown text
        max_length: Maximum UTF-16 length per chunk
            (uses config.max_chunk_length if None)
        config: Optional configuration for rendering (uses default if None)

    Returns:
        Ordered list of chunks, each sendable as one message. Empty list
        for blank input.

    Examples:
        >>> markdown_to_chunks('**Bold** text')
        ['<b>Bold</b> text']

        >>> # Send all chunks in order
        >>> for chunk in markdown_to_chunks(long_markdown):
        ...     await bot.send_message(chat_id, chunk, parse_mode='HTML')
    """
    if config is None:
        config = DEFAULT_CONFIG
    if max_length is None:
        max_length = config.max_chunk_length

    if not markdown_text or not markdown_text.strip():
        return []

    return split_html(markdown_to_telegram(markdown_text, config), max_length)
