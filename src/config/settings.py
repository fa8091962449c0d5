"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use DIALECTIC_ prefix (e.g., DIALECTIC_VERBOSITY=2).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use DIALECTIC_ prefix.

    Examples:
        DIALECTIC_TRADITIONAL_MARKDOWN_LINEBREAKS=true
        DIALECTIC_CODE_STYLE=monokai
        DIALECTIC_VERBOSITY=3
    """

    model_config = SettingsConfigDict(
        env_prefix="DIALECTIC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Hoisting configuration
    hoist_prefix: str = Field(
        default="⟦HOIST:",
        description="Prefix of hoisted-content placeholders (must survive rendering and sanitizing)",
    )

    hoist_suffix: str = Field(
        default="⟧",
        description="Suffix of hoisted-content placeholders",
    )

    # Dialect configuration
    traditional_markdown_linebreaks: bool = Field(
        default=False,
        description="Site-wide traditional line-break mode (OR-ed with the per-cook option)",
    )

    code_style: str = Field(
        default="default",
        description="Pygments style used by the [code] block rule",
    )

    mention_href: str = Field(
        default="/u/{username}",
        description="Link template for @mentions",
    )

    # Logging
    verbosity: int = Field(
        default=0,
        description="Verbosity used by LOG() when no program state is connected",
    )

    def hoistKey_make(self, digest: str) -> str:
        """
        Wrap a content digest into a hoist placeholder.

        Args:
            digest: Hex digest of the hoisted content

        Returns:
            Placeholder string (e.g., "⟦HOIST:5d41402abc4b2a76b9719d911017c592⟧")
        """
        return f"{self.hoist_prefix}{digest}{self.hoist_suffix}"


# Singleton instance - import this in your code
appsettings = AppSettings()
