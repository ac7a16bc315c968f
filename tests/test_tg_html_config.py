"""Tests for tg_html configuration (dataclass config and env settings)."""

from dataclasses import FrozenInstanceError

from pydantic import ValidationError
import pytest

from tg_html.config import DEFAULT_CONFIG, MarkdownConfig
from tg_html.settings import SETTINGS, Settings


def test_default_config_uses_settings_limit() -> None:
    assert DEFAULT_CONFIG.max_chunk_length == SETTINGS.max_chunk_length


def test_default_glyphs() -> None:
    config = MarkdownConfig()

    assert config.task_completed == '\N{BALLOT BOX WITH CHECK}\N{VARIATION SELECTOR-16}'
    assert config.task_uncompleted == '\N{WHITE LARGE SQUARE}'
    assert config.bullet == '\N{BULLET}'
    assert config.max_chunk_length == 4096


def test_config_is_immutable() -> None:
    with pytest.raises(FrozenInstanceError):
        DEFAULT_CONFIG.max_chunk_length = 10  # type: ignore[misc]


@pytest.mark.parametrize('max_chunk_length', [0, -5])
def test_config_rejects_non_positive_limit(max_chunk_length: int) -> None:
    with pytest.raises(ValueError, match='max_chunk_length must be positive'):
        MarkdownConfig(max_chunk_length=max_chunk_length)


def test_settings_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('TG_HTML_MAX_CHUNK_LENGTH', '1024')

    assert Settings().max_chunk_length == 1024


def test_settings_default_without_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv('TG_HTML_MAX_CHUNK_LENGTH', raising=False)

    assert Settings().max_chunk_length == 4096


@pytest.mark.parametrize('value', ['0', '-1', 'many'])
def test_settings_reject_invalid_limit(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    monkeypatch.setenv('TG_HTML_MAX_CHUNK_LENGTH', value)

    with pytest.raises(ValidationError):
        Settings()
