"""Service settings, read from ``GREENPROMPT_*`` environment variables and ``.env``."""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="GREENPROMPT_", env_file=".env", extra="ignore",
                                      populate_by_name=True)

    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GREENPROMPT_GEMINI_API_KEY", "GEMINI_API_KEY"),
    )
    gemini_model: str = "gemini-2.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    remote_timeout: float = Field(default=30.0, gt=0)

    temperature: float = 0.1
    top_p: float = 0.7
    min_output_tokens: int = 2000
    output_length_factor: float = 1.2

    min_word_ratio: float = Field(default=0.9, ge=0, le=1)
    min_sentence_ratio: float = Field(default=0.8, ge=0, le=1)

    aggressive_typos: bool = True
    tokenizer: Literal["heuristic", "tiktoken"] = "heuristic"
    default_model: str = "gpt4"
    log_level: str = "INFO"

    @property
    def remote_configured(self) -> bool:
        return bool(self.gemini_api_key and self.gemini_api_key.strip())


@lru_cache
def get_settings() -> Settings:
    return Settings()
