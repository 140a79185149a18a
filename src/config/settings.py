"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use WHISKER_ prefix (e.g., WHISKER_REGEX_CACHE_SIZE=8).

Settings can also be loaded from a .env file in the project root.
"""

from typing import Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use WHISKER_ prefix.

    Examples:
        WHISKER_REGEX_CACHE_SIZE=8
        WHISKER_OPEN_TAG="<%"
        WHISKER_CLOSE_TAG="%>"
        WHISKER_DEBUG_MODE=true
    """

    model_config = SettingsConfigDict(
        env_prefix="WHISKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Delimiter regex cache
    regex_cache_size: int = Field(
        default=4,
        ge=1,
        description="Initial number of delimiter pairs kept in the compiled regex cache",
    )

    # Parser configuration
    open_tag: str = Field(
        default="{{",
        min_length=1,
        description="Opening delimiter used when parse() is called without tags",
    )

    close_tag: str = Field(
        default="}}",
        min_length=1,
        description="Closing delimiter used when parse() is called without tags",
    )

    debug_mode: bool = Field(
        default=False,
        description="Log every tag token as it is emitted",
    )

    def tagPair_get(self) -> Tuple[str, str]:
        """
        Default delimiter pair as an (open, close) tuple.

        Example:
            >>> AppSettings().tagPair_get()
            ('{{', '}}')
        """
        return (self.open_tag, self.close_tag)


# Singleton instance - import this in your code
appsettings = AppSettings()
