from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    if Path('.env').exists():
        model_config = SettingsConfigDict(
            env_prefix='TG_HTML_',
            env_file='.env',
            env_file_encoding='utf-8',
            extra='ignore',
        )
    else:
        model_config = SettingsConfigDict(env_prefix='TG_HTML_')

    # Telegram allows max 4096 characters per message
    max_chunk_length: int = 4096

    @field_validator('max_chunk_length')
    def validate_max_chunk_length(cls, value: int) -> int:
        if value < 1:
            raise ValueError(f'max_chunk_length must be positive, got {value}')
        return value


SETTINGS = Settings()
