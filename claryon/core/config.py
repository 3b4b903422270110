from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
import json


class Settings(BaseSettings):
    # Application Settings
    app_name: str = Field(default="Claryon Consulting Site API", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    ENVIRONMENT: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")

    # Server Configuration
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")

    # Database Configuration
    database_url: Optional[str] = Field(default=None, alias="DATABASE_URL")

    # JWT Authentication
    JWT_SECRET: str = Field(default="change-this-jwt-secret-in-production", alias="JWT_SECRET")
    JWT_ALGORITHM: str = Field(default="HS256", alias="JWT_ALGORITHM")
    JWT_EXPIRATION_HOURS: int = Field(default=12, alias="JWT_EXPIRATION_HOURS")

    # Password Hashing
    bcrypt_rounds: int = Field(default=12, alias="BCRYPT_ROUNDS")

    # Seed admin (created by init_db when the admins table is empty)
    admin_username: str = Field(default="admin", alias="ADMIN_USERNAME")
    admin_email: str = Field(default="admin@example.com", alias="ADMIN_EMAIL")
    admin_password: Optional[str] = Field(default=None, alias="ADMIN_PASSWORD")

    # Google Calendar Configuration
    GOOGLE_CLIENT_ID: Optional[str] = Field(default=None, alias="GOOGLE_CLIENT_ID")
    GOOGLE_CLIENT_SECRET: Optional[str] = Field(default=None, alias="GOOGLE_CLIENT_SECRET")
    GOOGLE_REFRESH_TOKEN: Optional[str] = Field(default=None, alias="GOOGLE_REFRESH_TOKEN")
    GOOGLE_CALENDAR_ID: Optional[str] = Field(default=None, alias="GOOGLE_CALENDAR_ID")
    GOOGLE_CALENDAR_TIMEZONE: str = Field(default="UTC", alias="GOOGLE_CALENDAR_TIMEZONE")
    GOOGLE_TOKEN_URL: str = Field(default="https://oauth2.googleapis.com/token", alias="GOOGLE_TOKEN_URL")
    GOOGLE_CALENDAR_API_BASE: str = Field(default="https://www.googleapis.com/calendar/v3", alias="GOOGLE_CALENDAR_API_BASE")
    GOOGLE_HTTP_TIMEOUT_SECONDS: int = Field(default=15, alias="GOOGLE_HTTP_TIMEOUT_SECONDS")
    GOOGLE_CALENDAR_IDEMPOTENT_EVENTS: bool = Field(default=False, alias="GOOGLE_CALENDAR_IDEMPOTENT_EVENTS")

    # CORS Configuration
    API_CORS_ORIGINS: Optional[str] = Field(default=None, alias="API_CORS_ORIGINS")
    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:5173"])

    # Logging Configuration
    LOG_LEVEL: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s", alias="LOG_FORMAT")

    # Pagination
    default_page_size: int = Field(default=20, alias="DEFAULT_PAGE_SIZE")
    max_page_size: int = Field(default=100, alias="MAX_PAGE_SIZE")

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            if v.strip() == "*":
                return ["*"]
            try:
                return json.loads(v)
            except ValueError:
                return [origin.strip() for origin in v.split(',') if origin.strip()]
        return v

    @field_validator('LOG_LEVEL', mode='before')
    @classmethod
    def normalize_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @property
    def DATABASE_URL(self) -> Optional[str]:
        # Hosted Postgres providers hand out postgres:// URLs, SQLAlchemy wants the dialect name
        if self.database_url and self.database_url.startswith("postgres://"):
            return "postgresql+psycopg2://" + self.database_url[len("postgres://"):]
        return self.database_url

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def database_echo(self) -> bool:
        return self.debug and self.is_development

    def missing_calendar_settings(self, include_database: bool = True) -> List[str]:
        """Names of the settings the calendar pipeline needs but are not set."""
        required = {
            "GOOGLE_CLIENT_ID": self.GOOGLE_CLIENT_ID,
            "GOOGLE_CLIENT_SECRET": self.GOOGLE_CLIENT_SECRET,
            "GOOGLE_REFRESH_TOKEN": self.GOOGLE_REFRESH_TOKEN,
            "GOOGLE_CALENDAR_ID": self.GOOGLE_CALENDAR_ID,
        }
        if include_database:
            required["DATABASE_URL"] = self.database_url
        return [name for name, value in required.items() if not value]

    @property
    def calendar_configured(self) -> bool:
        return not self.missing_calendar_settings()

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()
