"""
Settings Module
===============

Pydantic-based configuration with environment variable loading.

Version: 0.1.0
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ProofBackend(str, Enum):
    """Where newly uploaded proofs are stored."""

    OBJECT = "object"
    INLINE = "inline"
    LOCAL = "local"


class PostgresSettings(BaseSettings):
    """PostgreSQL database configuration."""

    model_config = SettingsConfigDict(env_prefix="POSTGRES_")

    host: str = "localhost"
    port: int = 5432
    user: str = "vendorshield"
    password: SecretStr = SecretStr("vendorshield_dev_password")
    db: str = "vendorshield"

    # Connection pool
    pool_size: int = 5
    max_overflow: int = 10
    pool_recycle_seconds: int = 3600
    echo_sql: bool = False

    @property
    def async_url(self) -> str:
        """Generate async SQLAlchemy connection URL."""
        pwd = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.db}"

    @property
    def sync_url(self) -> str:
        """Generate sync SQLAlchemy connection URL."""
        pwd = self.password.get_secret_value()
        return f"postgresql://{self.user}:{pwd}@{self.host}:{self.port}/{self.db}"


class JWTSettings(BaseSettings):
    """JWT authentication configuration."""

    model_config = SettingsConfigDict(env_prefix="JWT_")

    secret_key: SecretStr = SecretStr("your-jwt-secret-key-min-32-chars-long")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    refresh_token_expire_days: int = 7


class AdminSettings(BaseSettings):
    """Reviewer account configuration."""

    model_config = SettingsConfigDict(env_prefix="ADMIN_")

    username: str = "admin"
    password: SecretStr = SecretStr("admin123")

    # Bcrypt hash; takes precedence over the plain password when set
    password_hash: SecretStr = SecretStr("")


class SMTPSettings(BaseSettings):
    """Outgoing email configuration."""

    model_config = SettingsConfigDict(env_prefix="SMTP_")

    host: str = ""
    port: int = 587
    user: str = ""
    password: SecretStr = SecretStr("")
    secure: bool = False
    timeout_seconds: int = 30

    from_email: str = Field(default="", alias="EMAIL_FROM")
    from_name: str = Field(default="VendorShield - Security Team", alias="EMAIL_FROM_NAME")

    @property
    def is_configured(self) -> bool:
        """Check if enough settings are present to send mail."""
        return bool(self.host and self.user and self.password.get_secret_value())

    @property
    def sender(self) -> str:
        """Envelope sender address."""
        return self.from_email or self.user or "noreply@vendorshield.com"


class StorageSettings(BaseSettings):
    """Proof attachment storage configuration."""

    model_config = SettingsConfigDict(env_prefix="PROOF_STORAGE_")

    backend: ProofBackend = ProofBackend.LOCAL
    max_size_bytes: int = 10 * 1024 * 1024

    # Local disk
    upload_dir: Path = Path("uploads")

    # S3-compatible object storage
    bucket: str = ""
    region: str = "us-east-1"
    prefix: str = "vendorshield/proofs"
    access_key_id: SecretStr = SecretStr("")
    secret_access_key: SecretStr = SecretStr("")
    presigned_url_expiry_seconds: int = 300


class CORSSettings(BaseSettings):
    """CORS configuration."""

    model_config = SettingsConfigDict(env_prefix="CORS_")

    origins: str = "http://localhost:3000,http://localhost:5173"
    allow_credentials: bool = True

    @property
    def origins_list(self) -> list[str]:
        """Parse origins string into list."""
        return [o.strip() for o in self.origins.split(",") if o.strip()]


class ServicePorts(BaseSettings):
    """Service port configuration."""

    vendor_assessment: int = Field(default=3000, alias="VENDOR_ASSESSMENT_PORT")


class Settings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables with sensible defaults.
    Use the global `settings` singleton or call `get_settings()`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # General
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = True
    log_level: LogLevel = LogLevel.INFO
    base_url: str = "http://localhost:3000"
    default_locale: str = "fr"

    # Project paths
    project_root: Path = Field(default_factory=lambda: Path(__file__).parent.parent.parent)

    # Service ports
    ports: ServicePorts = Field(default_factory=ServicePorts)

    # Database
    postgres: PostgresSettings = Field(default_factory=PostgresSettings)

    # Authentication
    jwt: JWTSettings = Field(default_factory=JWTSettings)
    admin: AdminSettings = Field(default_factory=AdminSettings)

    # Collaborators
    smtp: SMTPSettings = Field(default_factory=SMTPSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    # Security
    cors: CORSSettings = Field(default_factory=CORSSettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Ensure log level is uppercase."""
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v

    @field_validator("default_locale", mode="before")
    @classmethod
    def lowercase_locale(cls, v: str) -> str:
        """Locales are stored lowercase ("fr", "en")."""
        return v.lower()

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        """Check if running in test mode."""
        return self.environment == Environment.TESTING


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings singleton.
    """
    return Settings()
