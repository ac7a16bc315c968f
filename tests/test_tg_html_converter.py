"""Tests for tg_html converter - entry point, fallback and parser injection."""

import logging

import mistune
import pytest

from tg_html import markdown_to_html, markdown_to_telegram
from tg_html.converter import create_parser
from tg_html.renderer import TelegramHtmlRenderer


@pytest.mark.parametrize('markdown', ['', '   ', '\n\n\t\n'])
def test_blank_input_renders_empty(markdown: str) -> None:
    assert markdown_to_telegram(markdown) == ''


def test_alias_matches_main_function() -> None:
    assert markdown_to_html is markdown_to_telegram


def test_crlf_line_endings() -> None:
    assert markdown_to_telegram('one\r\ntwo\r\n\r\nthree') == 'one\ntwo\n\nthree'


def test_parser_failure_falls_back_to_escaped_input(caplog: pytest.LogCaptureFixture) -> None:
    """Conversion never raises: failures return the escaped raw input."""

    def broken_parser(renderer: TelegramHtmlRenderer) -> mistune.Markdown:
        raise RuntimeError('tokenizer exploded')

    source = '**bold** <tag> & "quotes"\n'

    with caplog.at_level(logging.ERROR, logger='tg_html.converter'):
        html = markdown_to_telegram(source, parser_factory=broken_parser)

    assert html == '**bold** &lt;tag&gt; &amp; &quot;quotes&quot;\n'
    assert 'Error converting markdown' in caplog.text


def test_render_failure_falls_back_to_escaped_input() -> None:
    """Errors raised inside render methods are caught too."""

    class ExplodingRenderer(TelegramHtmlRenderer):
        def strong(self, token, state):  # type: ignore[no-untyped-def]
            raise ValueError('boom')

    def parser_factory(renderer: TelegramHtmlRenderer) -> mistune.Markdown:
        return create_parser(ExplodingRenderer(renderer.config))

    assert markdown_to_telegram('a **b** <c>', parser_factory=parser_factory) == 'a **b** &lt;c&gt;'


def test_parser_factory_receives_fresh_renderer_per_call() -> None:
    """No renderer state is shared between calls."""
    seen: list[TelegramHtmlRenderer] = []

    def recording_factory(renderer: TelegramHtmlRenderer) -> mistune.Markdown:
        seen.append(renderer)
        return create_parser(renderer)

    markdown_to_telegram('one', parser_factory=recording_factory)
    markdown_to_telegram('two', parser_factory=recording_factory)

    assert len(seen) == 2
    assert seen[0] is not seen[1]


def test_ast_only_parser_falls_back_to_escaped_input() -> None:
    """A parser that returns tokens instead of text is treated as a failure."""

    def ast_factory(renderer: TelegramHtmlRenderer) -> mistune.Markdown:
        return mistune.create_markdown(renderer=None)

    assert markdown_to_telegram('**x** & y', parser_factory=ast_factory) == '**x** &amp; y'


def test_excess_blank_lines_are_collapsed() -> None:
    html = markdown_to_telegram('> quote\n\n```\ncode\n```\n\n---\n\n- item')

    assert '\n\n\n' not in html
    assert html == (
        '<blockquote>quote</blockquote>\n\n<pre>code</pre>\n\n'
        + '\N{BOX DRAWINGS LIGHT HORIZONTAL}' * 10
        + '\n\n• item'
    )
