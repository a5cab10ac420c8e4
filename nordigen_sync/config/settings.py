from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Nordigen / GoCardless Bank Account Data API Configuration
    nordigen_secret_id: Optional[str] = Field(default=None)
    nordigen_secret_key: Optional[str] = Field(default=None)
    nordigen_base_url: str = Field(
        default="https://bankaccountdata.gocardless.com/api/v2/"
    )
    nordigen_timeout: float = Field(default=30.0)

    # Requisition defaults
    nordigen_redirect_path: str = Field(default="/nordigen/link")
    nordigen_default_access_valid_for_days: int = Field(default=90)
    nordigen_max_historical_days: int = Field(default=90)

    log_level: str = Field(default="INFO")

    @field_validator("nordigen_base_url")
    @classmethod
    def validate_base_url(cls, v):
        """Ensure relative endpoints resolve under the API version path."""
        return v if v.endswith("/") else f"{v}/"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


# Global settings instance
settings = Settings()
