"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (DB URI, collection names, SMTP, push gateway)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, validator
from pydantic_settings import BaseSettings
from typing import Optional, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="gymvisa",
        description="MongoDB database name"
    )

    # Collections (names match the mobile app's collections)
    USERS_COLLECTION: str = Field(default="User")
    GYMS_COLLECTION: str = Field(default="Gyms")
    SCANS_COLLECTION: str = Field(
        default="QR",
        description="QR check-in events written by the mobile app"
    )
    TRANSACTIONS_COLLECTION: str = Field(default="Transactions")
    SUBSCRIPTIONS_COLLECTION: str = Field(default="Subscriptions")
    PAYOUTS_COLLECTION: str = Field(default="GymsPayoutRequests")
    AUTH_COLLECTION: str = Field(
        default="auth_accounts",
        description="Authentication identities (email + password hash)"
    )
    IMAGES_BUCKET: str = Field(
        default="gym_images",
        description="GridFS bucket for gym images"
    )

    # Admin
    ADMIN_EMAIL: Optional[str] = Field(
        default=None,
        description="The single administrator allowed to use the dashboard API"
    )

    # Accounts
    MIN_PASSWORD_LENGTH: int = Field(
        default=6,
        description="Minimum password length accepted by the auth store"
    )
    ORG_PASSWORD_SCHEME: Literal["random", "organization"] = Field(
        default="random",
        description="How passwords for bulk-created organization users are built"
    )
    BCRYPT_ROUNDS: int = Field(
        default=12,
        description="bcrypt cost factor for stored password hashes"
    )

    # Email (SMTP)
    SMTP_HOST: Optional[str] = Field(default=None, description="SMTP server host")
    SMTP_PORT: int = Field(default=587, description="SMTP server port")
    SMTP_USERNAME: Optional[str] = Field(default=None)
    SMTP_PASSWORD: Optional[str] = Field(default=None)
    SMTP_SENDER: Optional[str] = Field(
        default=None,
        description="From address for credential emails (defaults to SMTP_USERNAME)"
    )
    SMTP_USE_TLS: bool = Field(default=True)

    # Push messaging (FCM HTTP v1)
    FCM_PROJECT_ID: Optional[str] = Field(default=None)
    FCM_ACCESS_TOKEN: Optional[str] = Field(
        default=None,
        description="OAuth2 bearer token for the FCM HTTP v1 API"
    )
    FCM_BASE_URL: str = Field(default="https://fcm.googleapis.com")
    PUSH_TIMEOUT: float = Field(
        default=10.0,
        description="Push gateway request timeout in seconds"
    )

    # Live payout stream
    PAYOUT_STREAM_INTERVAL: float = Field(
        default=2.0,
        description="Seconds between payout snapshot checks on the live stream"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    API_PREFIX: str = Field(
        default="/api",
        description="API route prefix"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    # Security
    SECRET_KEY: str = Field(
        default="change-me-in-production",
        description="Application secret key"
    )

    @validator("SECRET_KEY")
    def validate_secret_key(cls, v, values):
        """Ensure secret key is changed in production."""
        if values.get("ENVIRONMENT") == "production" and v == "change-me-in-production":
            raise ValueError("SECRET_KEY must be changed in production environment")
        return v

    @validator("ADMIN_EMAIL")
    def normalize_admin_email(cls, v):
        return v.strip().lower() if v else v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def email_configured(self) -> bool:
        return bool(self.SMTP_HOST and self.SMTP_USERNAME and self.SMTP_PASSWORD)

    @property
    def push_configured(self) -> bool:
        return bool(self.FCM_PROJECT_ID and self.FCM_ACCESS_TOKEN)

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []

    if not settings.MONGODB_URL:
        errors.append("MONGODB_URL is required")

    if not settings.MONGODB_DB_NAME:
        errors.append("MONGODB_DB_NAME is required")

    if settings.MIN_PASSWORD_LENGTH < 6:
        errors.append("MIN_PASSWORD_LENGTH must be at least 6")

    # Production-specific validations
    if settings.is_production:
        if not settings.ADMIN_EMAIL:
            errors.append("ADMIN_EMAIL is required in production")
        if not settings.push_configured:
            errors.append("FCM_PROJECT_ID and FCM_ACCESS_TOKEN are required in production")
        if not settings.email_configured:
            errors.append("SMTP_HOST, SMTP_USERNAME and SMTP_PASSWORD are required in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
