"""Send Markdown to Telegram as HTML parse-mode messages.

Thin aiogram adapter around ``markdown_to_chunks``: every chunk becomes one
message, sent in order.
"""

from __future__ import annotations

import logging

from aiogram import Bot
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramBadRequest
from aiogram.types import Message
from mistune.util import striptags, unescape

from tg_html.chunker import markdown_to_chunks
from tg_html.config import MarkdownConfig

LOGGER = logging.getLogger(__name__)


def _as_plain_text(chunk: str) -> str:
    """Strip tags and decode entities for sending without parse mode."""
    return unescape(striptags(chunk))


def _is_parse_error(error: TelegramBadRequest) -> bool:
    """Whether Telegram rejected the chunk for its markup rather than anything else."""
    return "can't parse entities" in error.message.lower()


async def answer_markdown(
    message: Message,
    markdown_text: str,
    config: MarkdownConfig | None = None,
) -> list[Message]:
    """Reply to a message with Markdown content, splitting if needed.

    A chunk that Telegram refuses to parse (e.g. a hard-sliced line that
    separated an opening tag from its closing tag) is resent as plain text. Any other Telegram error propagates.

    Args:
        message: Telegram message to reply to
        markdown_text: Raw markdown content
        config: Optional configuration for rendering (uses default if None)

    Returns:
        Sent messages, one per chunk

    Example:
        >>> await answer_markdown(message, '**Agent response:**\\n\\n' + response)
    """
    sent: list[Message] = []
    chunks = markdown_to_chunks(markdown_text, config=config)

    for chunk in chunks:
        try:
            sent.append(await message.answer(chunk, parse_mode=ParseMode.HTML))
        except TelegramBadRequest as e:
            if not _is_parse_error(e):
                raise
            LOGGER.warning('Telegram rejected HTML chunk, resending as plain text: %s', e)
            sent.append(await message.answer(_as_plain_text(chunk), parse_mode=None))

    LOGGER.info('Sent %d chunk(s) in reply to message %s', len(sent), message.message_id)
    return sent


async def send_markdown(
    bot: Bot,
    chat_id: int | str,
    markdown_text: str,
    config: MarkdownConfig | None = None,
) -> list[Message]:
    """Send Markdown content to a chat, splitting if needed.

    Args:
        bot: Bot instance used for sending
        chat_id: Target chat
        markdown_text: Raw markdown content
        config: Optional configuration for rendering (uses default if None)

    Returns:
        Sent messages, one per chunk
    """
    sent: list[Message] = []
    chunks = markdown_to_chunks(markdown_text, config=config)

    for chunk in chunks:
        try:
            sent.append(await bot.send_message(chat_id, chunk, parse_mode=ParseMode.HTML))
        except TelegramBadRequest as e:
            if not _is_parse_error(e):
                raise
            LOGGER.warning('Telegram rejected HTML chunk, resending as plain text: %s', e)
            sent.append(
                await bot.send_message(chat_id, _as_plain_text(chunk), parse_mode=None)
            )

    LOGGER.info('Sent %d chunk(s) to chat %s', len(sent), chat_id)
    return sent
