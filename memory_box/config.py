"""Application settings loaded from environment variables."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from memory_box.system_prompt import DEFAULT_SYSTEM_PROMPT

DEFAULT_API_URL = "https://memorybox.amotivv.ai"


def _env_file() -> str | None:
    if os.getenv("PYTEST_CURRENT_TEST"):
        return None
    return ".env"


class Settings(BaseSettings):
    """Memory Box MCP configuration. All values come from environment variables."""

    # Memory Box API
    memory_box_api_url: str = Field(default=DEFAULT_API_URL)
    memory_box_token: str = Field(default="")
    default_bucket: str = Field(default="General")

    # Formatting guidelines advertised to the host
    system_prompt: str = Field(default="")

    # Logging
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(env_file=_env_file(), env_file_encoding="utf-8")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        if os.getenv("PYTEST_CURRENT_TEST"):
            return (init_settings,)
        return (init_settings, env_settings, dotenv_settings, file_secret_settings)

    @property
    def token_configured(self) -> bool:
        return bool(self.memory_box_token.strip())

    @property
    def custom_prompt_configured(self) -> bool:
        return bool(self.system_prompt.strip())

    def get_system_prompt(self) -> str:
        """Return SYSTEM_PROMPT when set, otherwise the built-in template."""
        if self.custom_prompt_configured:
            return self.system_prompt
        return DEFAULT_SYSTEM_PROMPT


settings = Settings()
