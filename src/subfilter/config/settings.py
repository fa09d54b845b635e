"""Configuration management using pydantic-settings.

Supports environment variables and .env file loading.
"""

import re
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration.

    Every field can be overridden through the environment, e.g.
    ``STORE_TYPE=sqlite`` or ``LONG_PRESS_SECONDS=0.8``.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),  # .env.local overrides .env
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "subfilter"
    log_level: str = "INFO"
    log_json: bool = False  # Set True when logs are shipped somewhere

    # Rule store
    store_type: str = Field(
        default="memory",
        description="Rule store backend: memory or sqlite",
    )
    db_path: Path = Field(
        default=Path("data/subfilter.db"),
        description="SQLite database path (used when store_type=sqlite)",
    )
    rules_key: str = Field(default="ytsff", description="Store key holding the rule list")
    enabled_key: str = Field(
        default="ytsff.enabled",
        description="Store key holding the engine on/off flag",
    )

    # Matching
    regex_ignore_case: bool = Field(
        default=True,
        description="Compile every rule pattern case-insensitively",
    )

    # Config editor
    editor_title: str = "YouTube Sub Feed Filter"
    editor_z_index: int = 10000

    # Opener button gesture
    long_press_seconds: float = Field(
        default=0.4,
        gt=0,
        description="Hold time after which a press counts as long",
    )

    @property
    def regex_flags(self) -> int:
        """Flags passed to ``re.compile`` for rule patterns."""
        return re.IGNORECASE if self.regex_ignore_case else 0


# Global singleton instance
settings = Settings()
