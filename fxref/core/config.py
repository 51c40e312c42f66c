from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fxref.core.exceptions import UnknownCurrencyError
from fxref.models.constants import ECB_ANCHOR, Currency

BUNDLED_BACKUP = Path(__file__).resolve().parent.parent / "data" / "eurofxref-daily.xml"


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., DEBUG, SOURCE_URL,
    BACKUP_SOURCE_PATH, BASE_CURRENCY, HTTP_TIMEOUT_SECONDS).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "ECB Reference Rates"
    debug: bool = False
    version: str = "0.1.0"

    # Rate document sources
    source_url: str = "https://www.ecb.europa.eu/stats/eurofxref/eurofxref-daily.xml"
    backup_source_path: str = str(BUNDLED_BACKUP)  # plain path or file:// URL
    http_timeout_seconds: float = 5.0
    http_retries: int = 2
    # A malformed primary document is fatal unless this is set
    fallback_on_format_error: bool = False

    # Table
    anchor_currency: Currency = ECB_ANCHOR
    base_currency: Currency = ECB_ANCHOR

    # Display
    rate_display_places: int = 4

    @field_validator("anchor_currency", "base_currency", mode="before")
    @classmethod
    def lenient_currency(cls, v):
        try:
            return Currency.parse(v)
        except UnknownCurrencyError as e:
            raise ValueError(str(e)) from e

    def init_post_load(self) -> None:
        """Validate ranges that pydantic field types do not cover."""
        if self.http_timeout_seconds <= 0:
            raise ValueError("http_timeout_seconds must be positive")
        if self.http_retries < 0:
            raise ValueError("http_retries must be >= 0")
        if not (0 <= self.rate_display_places <= 12):
            raise ValueError(
                f"Unsupported rate_display_places {self.rate_display_places}. Allowed: 0..12"
            )


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
