"""Markdown to Telegram HTML converter.

This module converts Markdown text into Telegram HTML parse-mode markup and
splits the result into messages that fit Telegram's length limit.

Example:
    >>> from tg_html import markdown_to_chunks, markdown_to_telegram
    >>> markdown_to_telegram("**Bold** and *italic* text")
    '<b>Bold</b> and <i>italic</i> text'
    >>> markdown_to_chunks("a" * 5000)[0] == "a" * 4096
    True
"""

from tg_html.chunker import markdown_to_chunks, split_html
from tg_html.config import DEFAULT_CONFIG, MarkdownConfig
from tg_html.converter import markdown_to_html, markdown_to_telegram
from tg_html.renderer import TelegramHtmlRenderer

__version__ = '0.1.0'

__all__ = [
    'markdown_to_telegram',
    'markdown_to_html',
    'markdown_to_chunks',
    'split_html',
    'TelegramHtmlRenderer',
    'MarkdownConfig',
    'DEFAULT_CONFIG',
]
