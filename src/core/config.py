"""Configuration management for skillswap."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # SQLite Configuration
    sqlite_db_path: str = Field(default="data/skillswap.db", description="Path to the SQLite database file")

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")

    # Access Token Configuration
    secret_key: str | None = Field(default=None, description="Secret used to sign access tokens")
    access_token_max_age_seconds: int = Field(
        default=86400, description="Lifetime of a signed access token (in seconds)"
    )

    environment: str = Field(default="development", description="Deployment environment name")

    @property
    def is_production(self) -> bool:
        """Return True when running in the production environment."""
        return self.environment.lower() == "production"

    def require_credential(self, field_name: str, service_name: str) -> str:
        """Validate that a required credential is set, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            service_name: Human-readable service name for error message

        Returns:
            The credential value

        Raises:
            ValueError: If the credential is None or empty
        """
        value = getattr(self, field_name)
        if not value:
            raise ValueError(
                f"{service_name} credential not configured. "
                f"Set {field_name.upper()} environment variable or add to .env file."
            )
        return value


# Application Constants
class Constants:
    """Application-wide constants."""

    # Text limits
    MAX_MESSAGE_LENGTH: int = 500
    MAX_RESPONSE_MESSAGE_LENGTH: int = 500
    MAX_COMMENT_LENGTH: int = 500
    MAX_REASON_LENGTH: int = 500
    MAX_SKILL_LABEL_LENGTH: int = 100
    MAX_SKILL_NAME_LENGTH: int = 50
    MAX_SKILL_DESCRIPTION_LENGTH: int = 200
    MAX_USER_SKILL_NOTES_LENGTH: int = 300
    MAX_USER_NAME_LENGTH: int = 50

    # Ratings
    MIN_RATING: int = 1
    MAX_RATING: int = 5
    RATING_DECIMAL_PLACES: int = 1

    # Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent.parent


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
