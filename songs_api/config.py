"""
Songs API — Application Configuration
=======================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the app factory, the store connector and the middleware.
When:  Loaded once at module import time; checked again in the lifespan.

AWS settings are optional: without them the store client is still built
(or replaced by an unavailable stub) and every store call fails at request
time (GET → 404, POST → 500).
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes are grouped by concern for readability.
    """

    # ── Record Store (DynamoDB) ───────────────────────────────────────────
    # What: Region of the table holding song records
    # Env:  AWS_TABLE_REGION (not AWS_REGION, the table may live elsewhere)
    aws_table_region: Optional[str] = Field(default=None)

    aws_access_key_id: Optional[str] = Field(default=None)
    aws_secret_access_key: Optional[str] = Field(default=None)

    # What: Table name; partition key is the string attribute `title`
    songs_table_name: str = Field(default="songs", min_length=3, max_length=255)

    # What: Override for DynamoDB Local / localstack during development
    dynamodb_endpoint_url: Optional[str] = Field(default=None)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # AWS_TABLE_REGION and aws_table_region both work
        "extra": "ignore",
    }

    def report_missing_store_settings(self) -> None:
        """
        What:  Reports store settings that are missing.
        When:  Called during app startup (lifespan).
        How:   Collects every problem and raises one ValueError listing them.
        """
        errors = []
        if not self.aws_table_region:
            errors.append("AWS_TABLE_REGION is not set; the store client cannot pick a region")
        if not self.aws_access_key_id or not self.aws_secret_access_key:
            errors.append(
                "AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY are not set; "
                "store calls will rely on the default credential chain"
            )
        if errors:
            raise ValueError(
                "Store configuration incomplete:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance, imported throughout the application
settings = Settings()
