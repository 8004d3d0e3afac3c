"""Configuration management for the FCPXML toolkit."""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


BUNDLED_DTD_DIRECTORY = Path(__file__).parent / "dtd"


class Settings(BaseSettings):
    """Toolkit settings loaded from environment variables."""

    # Schema resources
    dtd_directory: Optional[str] = None  # None = bundled grammars
    default_version: str = "1.14"

    # Parsing
    strict_time_parsing: bool = False  # True = malformed times are errors

    # Timeline editing
    max_lane_search: int = 64
    ripple_default_scope: str = "all"  # all | primary

    # Development
    debug: bool = False
    log_level: str = "INFO"

    # Model configuration
    model_config = SettingsConfigDict(
        env_prefix="FCPXML_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra fields in .env file
    )

    def get_dtd_directory(self) -> Path:
        """Directory holding the per-version DTD grammars."""
        if self.dtd_directory:
            return Path(self.dtd_directory)
        return BUNDLED_DTD_DIRECTORY


# Global settings instance
settings = Settings()
