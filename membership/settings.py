"""Application settings and configuration (Pydantic v2)."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings."""

    # Database
    database_url: str = Field(
        default="postgresql://membership_user:membership_pass@db:5432/membership",
        description="SQLAlchemy database URL",
    )
    create_tables_on_startup: bool = Field(default=True)

    # JWT
    jwt_secret_key: str = Field(default="change-this-jwt-secret-in-production")
    jwt_algorithm: str = Field(default="HS256")
    jwt_access_token_expire_minutes: int = Field(default=60)

    # Built-in accounts
    admin_user: str = Field(default="admin")
    admin_pass: str = Field(default="admin123")
    staff_user: str = Field(default="staff")
    staff_pass: str = Field(default="staff123")

    # Membership rules
    expiring_soon_days: int = Field(
        default=30, ge=1, description="Lookahead window for expiring memberships"
    )

    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="",
    )


# Global settings instance
settings = Settings()
