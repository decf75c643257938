from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parent.parent
ENV_PATH = PROJECT_ROOT / ".env.local"


class Settings(BaseSettings):
    # Environment settings
    environment: str = "development"
    debug: bool = False
    LOG_LEVEL: str = "INFO"

    # Server settings (used by `python -m app.main`)
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # =================================================================
    # TRACKING STORE SETTINGS
    # =================================================================
    TRACKING_FILE: Path = PROJECT_ROOT / "email-opens.json"
    RECENT_OPENS_LIMIT: int = 50

    # IANA timezone used for month bucketing and dashboard display
    REPORT_TIMEZONE: str = "UTC"

    # Client IP resolution
    TRUST_X_FORWARDED_FOR: bool = True
    TRUSTED_PROXY_IPS: list[str] = []

    CORS_ALLOWED_ORIGINS: list[str] = ["*"]

    # Jobs
    SAMPLE_DATA_MONTHS: int = 6
    SMOKE_CHECK_BASE_URL: str = "http://localhost:3000"

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def report_timezone(self) -> ZoneInfo:
        """
        Resolve REPORT_TIMEZONE to a ZoneInfo.

        Raises:
            ValueError: If the configured name is not a known IANA timezone
        """
        try:
            return ZoneInfo(self.REPORT_TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(
                f"Invalid REPORT_TIMEZONE '{self.REPORT_TIMEZONE}'. "
                "Use an IANA timezone name like 'UTC' or 'Europe/London'."
            ) from e

    def cors_config(self) -> dict:
        """Get CORS middleware configuration."""
        return {
            "allowed_origins": self.CORS_ALLOWED_ORIGINS,
            "allow_credentials": False,
            "allow_methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["Origin", "X-Requested-With", "Content-Type", "Accept"],
        }


settings = Settings()
