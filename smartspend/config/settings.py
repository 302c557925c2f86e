"""
Configuration Management for SmartSpend

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: The only secret is the AI service key, and it is read
lazily. The app must start (and render the upload screen) without it;
the first gateway call is where a missing key becomes fatal.
"""

from functools import lru_cache

from pydantic import AliasChoices, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Required configuration is missing or invalid."""
    pass


class GeminiSettings(BaseSettings):
    """Gemini LLM configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_key: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("GEN_API_KEY", "GEMINI_API_KEY"),
        description="Gemini API key"
    )
    model_name: str = Field(
        default="gemini-2.5-flash",
        description="Gemini model used for extraction, insights and chat"
    )
    temperature: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        description="Model temperature for advisory text"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )

    # Upload limits
    max_upload_size_mb: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum upload file size in MB"
    )
    supported_image_formats: str = Field(
        default="jpg,jpeg,png,webp",
        description="Comma-separated list of supported image formats"
    )

    # Dashboard
    merchant_top_n: int = Field(
        default=5,
        ge=1,
        description="How many merchants the top-merchants chart keeps"
    )
    export_filename_prefix: str = Field(
        default="smartspend_export",
        description="Prefix of the CSV export file name"
    )

    @property
    def supported_formats_list(self) -> list[str]:
        """Get supported formats as a list."""
        return [fmt.strip().lower() for fmt in self.supported_image_formats.split(",")]

    @property
    def max_upload_size_bytes(self) -> int:
        """Get max upload size in bytes."""
        return self.max_upload_size_mb * 1024 * 1024


class Settings:
    """
    Root settings container.

    Sub-settings are loaded on access so that a missing API key only
    fails the code path that needs it.
    """

    @property
    def gemini(self) -> GeminiSettings:
        try:
            return GeminiSettings()
        except ValidationError as e:
            raise ConfigurationError(
                "Missing API key. Create .env with GEN_API_KEY "
                "or set the GEN_API_KEY environment variable."
            ) from e

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    `<name>_error` entry for each failure. Used by the settings page.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.gemini
        results["gemini"] = True
    except ConfigurationError as e:
        results["gemini"] = False
        results["gemini_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except ValidationError as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
