"""Utility functions for Markdown to Telegram HTML conversion."""

from mistune.util import escape


def utf16_len(text: str) -> int:
    """Calculate length in UTF-16 code units (for Telegram API).

    Telegram counts message length in UTF-16 code units, so chunk limits
    are measured the same way.

    Args:
        text: Input text string

    Returns:
        Length in UTF-16 code units

    Examples:
        >>> utf16_len("Hello")
        5
        >>> utf16_len("🌍")
        2
        >>> utf16_len("Привет")
        6
    """
    return len(text.encode('utf-16-le')) // 2


def escape_html(text: str) -> str:
    """Escape ``& < > "`` for Telegram HTML parse mode.

    Single quotes are left alone: Telegram only requires the four
    characters above to be entity-encoded.
    """
    return escape(text, quote=True)


def split_by_utf16(text: str, max_length: int) -> list[str]:
    """Slice text into segments of at most max_length UTF-16 units.

    Surrogate pairs are never cut, so a segment may end one unit short
    of the limit when the next character is an astral-plane symbol.

    Args:
        text: Text to split
        max_length: Maximum UTF-16 length per segment

    Returns:
        List of segments in order; joining them gives back ``text``
    """
    if utf16_len(text) <= max_length:
        return [text]

    segments = []
    pos = 0

    while pos < len(text):
        segment_start = pos
        segment_len = 0

        while pos < len(text):
            char_len = utf16_len(text[pos])
            if segment_len + char_len > max_length:
                break
            segment_len += char_len
            pos += 1

        if pos == segment_start:
            # max_length of 1 cannot hold a surrogate pair; emit it whole
            pos += 1
        segments.append(text[segment_start:pos])

    return segments
