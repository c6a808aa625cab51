import logging
from typing import List, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    # Application Information
    app_name: str = Field(default="Course Marketplace")
    app_description: str = Field(default="Online course storefront and educator console")
    app_version: str = Field(default="1.0.0")
    frontend_url: str = Field(default="http://localhost:5173")
    debug: bool = Field(default=True)
    production: bool = Field(default=False)

    # Database Configuration
    database_url: Optional[str] = Field(default=None)
    db_host: str = Field(default="127.0.0.1")
    db_port: int = Field(default=5432)
    db_database: str = Field(default="course-marketplace")
    db_username: str = Field(default="postgres")
    db_password: str = Field(default="postgres")

    # Security Settings
    cors_allowed_origins: List[str] = Field(default=["http://localhost:5173"])

    # Rate limiting
    rate_limit_enabled: bool = Field(default=True)
    rate_limit_storage_uri: str = Field(default="redis://localhost:6379")
    rate_limit_purchase: str = Field(default="10/minute")

    # Identity provider (Clerk)
    identity_api_url: str = Field(default="https://api.clerk.com/v1")
    identity_secret_key: str = Field(default="")
    identity_jwt_key: str = Field(default="")
    identity_jwt_algorithm: str = Field(default="RS256")
    identity_webhook_secret: str = Field(default="")
    identity_timeout: float = Field(default=10.0)
    educator_role_check: bool = Field(default=True)

    # Payment (Stripe)
    stripe_secret_key: str = Field(default="")
    stripe_webhook_secret: str = Field(default="")
    currency: str = Field(default="usd")
    optimistic_enrollment: bool = Field(default=False)

    # ============================
    # Generic comma-separated parser
    # ============================
    @staticmethod
    def _parse_csv(value, default):
        if isinstance(value, str):
            items = [x.strip() for x in value.split(",") if x.strip()]
            return items if items else default
        if isinstance(value, list):
            return value
        return default

    @field_validator("cors_allowed_origins", mode="before")
    def validate_cors(cls, v):
        return cls._parse_csv(v, ["http://localhost:5173"])

    @field_validator("currency", mode="after")
    def normalize_currency(cls, v):
        return v.lower()

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return "postgresql+psycopg2://{user}:{password}@{host}:{port}/{database}".format(
            user=self.db_username,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_database,
        )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


def load_settings():
    try:
        return Settings()
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        raise


settings = load_settings()
