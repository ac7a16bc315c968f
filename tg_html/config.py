"""Configuration for Markdown to Telegram HTML conversion."""

from dataclasses import dataclass

from tg_html.settings import SETTINGS


@dataclass(frozen=True)
class MarkdownConfig:
    """Configuration for Markdown rendering and chunking.

    This is an immutable dataclass with sensible defaults.
    Glyphs can be customized per instance.

    Attributes:
        task_completed: Glyph for a checked task item (default: ☑️)
        task_uncompleted: Glyph for an unchecked task item (default: ⬜)
        bullet: Marker for unordered list items (default: •)
        image_fallback_text: Link text for images without alt text
        thematic_break_char: Character of the horizontal rule line
        thematic_break_length: Width of the horizontal rule line
        max_chunk_length: Maximum length of a single chunk in UTF-16 code units
                         (default: 4096, Telegram's message length limit)
    """

    # Task list glyphs (Telegram HTML has no <input> checkboxes)
    task_completed: str = '\N{BALLOT BOX WITH CHECK}\N{VARIATION SELECTOR-16}'  # ☑️
    task_uncompleted: str = '\N{WHITE LARGE SQUARE}'  # ⬜

    bullet: str = '\N{BULLET}'  # •

    # Images are not embeddable, they degrade to links with this text
    image_fallback_text: str = 'Image'

    thematic_break_char: str = '\N{BOX DRAWINGS LIGHT HORIZONTAL}'  # ─
    thematic_break_length: int = 10

    max_chunk_length: int = 4096

    def __post_init__(self) -> None:
        if self.max_chunk_length < 1:
            raise ValueError(
                f'max_chunk_length must be positive, got {self.max_chunk_length}'
            )


# Default configuration instance (chunk limit overridable via TG_HTML_MAX_CHUNK_LENGTH)
DEFAULT_CONFIG = MarkdownConfig(max_chunk_length=SETTINGS.max_chunk_length)
