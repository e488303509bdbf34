from functools import lru_cache
from pathlib import Path
from typing import Optional

from babel import Locale, UnknownLocaleError
from pydantic_settings import BaseSettings, SettingsConfigDict

from . import __version__


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variables use the COSTPRINT_ prefix (e.g. COSTPRINT_API_BASE_URL,
    COSTPRINT_DEBUG, COSTPRINT_DATA_DIR, COSTPRINT_DISPLAY_LOCALE).
    """

    model_config = SettingsConfigDict(
        env_prefix="COSTPRINT_", env_file=".env", case_sensitive=False
    )

    # Basic app metadata
    app_name: str = "CostPrint Pro"
    debug: bool = False
    version: str = __version__

    # Backend API
    api_base_url: str = "http://localhost:8080"
    api_token: Optional[str] = None  # used by the CLI only
    http_timeout_seconds: float = 10.0
    http_retries: int = 2  # connection-level retries

    # Local persistence (display preferences)
    data_dir: Path = Path("data")
    db_filename: str = "costprint.db"
    db_path: Optional[Path] = None  # derived if not provided
    persist_preferences: bool = True

    # Display
    display_locale: str = "en_US"

    def init_post_load(self) -> None:
        """Finalize derived fields and ensure directories exist."""
        if self.db_path is None:
            self.db_path = self.data_dir / self.db_filename
        self.data_dir.mkdir(parents=True, exist_ok=True)
        try:
            Locale.parse(self.display_locale)
        except (UnknownLocaleError, ValueError) as exc:
            raise ValueError(
                f"Unsupported display_locale '{self.display_locale}'"
            ) from exc


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
