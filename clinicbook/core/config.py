from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, model_validator
import os
from urllib.parse import quote_plus
from pathlib import Path
from enum import Enum

class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"

DEFAULT_SECRET_KEY = "change-me-in-production"

class Settings(BaseSettings):
    # Environment Configuration
    ENVIRONMENT: Environment = Environment.DEVELOPMENT

    # Project Information
    PROJECT_NAME: str = "ClinicBook"
    VERSION: str = "0.1.0"
    API_V1_STR: str = "/api/v1"

    # Server settings
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000

    # Database
    POSTGRES_SERVER: Optional[str] = None
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_DB: Optional[str] = None
    SQLALCHEMY_DATABASE_URI: Optional[str] = None

    # Security
    SECRET_KEY: str = DEFAULT_SECRET_KEY
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # JWT Settings
    ALGORITHM: str = "HS256"

    # Admin dashboard credentials
    ADMIN_EMAIL: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    # AWS Configuration for report and image storage
    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None
    AWS_REGION: Optional[str] = None
    AWS_S3_BUCKET: str = ""

    # File Uploads
    USE_S3_UPLOADS: bool = False  # Toggle: False for local dev, True for cloud/S3
    UPLOADS_S3_PREFIX: str = "uploads"
    UPLOADS_LOCAL_DIR: Optional[str] = None  # Local durable storage when S3 disabled (derived if not set)

    # Payments
    CURRENCY: str = "INR"
    RAZORPAY_KEY_ID: Optional[str] = None
    RAZORPAY_KEY_SECRET: Optional[str] = None
    STRIPE_SECRET_KEY: Optional[str] = None

    # CORS
    FRONTEND_URL: str = "http://localhost:5173"
    ADMIN_URL: str = "http://localhost:5174"

    # --- Validators & Derived Settings ---
    @field_validator("AWS_S3_BUCKET", mode="before")
    @classmethod
    def blank_bucket(cls, v: Optional[str]) -> str:
        if v is None:
            return ""
        return str(v).strip()

    @model_validator(mode="after")
    def _finalize_and_validate(self) -> "Settings":
        # Derive SQLALCHEMY_DATABASE_URI if not provided
        if not self.SQLALCHEMY_DATABASE_URI:
            user = self.POSTGRES_USER
            password = self.POSTGRES_PASSWORD
            server = self.POSTGRES_SERVER
            port = self.POSTGRES_PORT
            db = self.POSTGRES_DB
            if user and server and port and db:
                safe_user = quote_plus(user)
                if password:
                    safe_password = quote_plus(password)
                    self.SQLALCHEMY_DATABASE_URI = (
                        f"postgresql://{safe_user}:{safe_password}@{server}:{port}/{db}"
                    )
                else:
                    self.SQLALCHEMY_DATABASE_URI = (
                        f"postgresql://{safe_user}@{server}:{port}/{db}"
                    )
            else:
                self.SQLALCHEMY_DATABASE_URI = "sqlite:///./clinicbook.db"

        # If S3 is enabled but bucket is missing/blank, auto-disable to avoid runtime 500s
        if self.USE_S3_UPLOADS and not self.AWS_S3_BUCKET:
            self.USE_S3_UPLOADS = False

        # UPLOADS_LOCAL_DIR: used when S3 is disabled
        if not self.UPLOADS_LOCAL_DIR:
            try:
                project_root = Path(__file__).resolve().parents[2]
            except IndexError:
                project_root = Path(os.getcwd())
            self.UPLOADS_LOCAL_DIR = str(project_root / "data" / "uploads")

        if self.is_production and self.SECRET_KEY == DEFAULT_SECRET_KEY:
            raise ValueError("SECRET_KEY must be set in production")

        return self

    # Environment-specific properties
    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == Environment.DEVELOPMENT

    @property
    def is_staging(self) -> bool:
        return self.ENVIRONMENT == Environment.STAGING

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == Environment.PRODUCTION

    @property
    def cors_origins_development(self) -> List[str]:
        return [
            "http://localhost:5173",
            "http://localhost:5174",
            "http://127.0.0.1:5173",
            "http://127.0.0.1:5174",
        ]

    @property
    def allowed_cors_origins(self) -> List[str]:
        deployed = [self.FRONTEND_URL, self.ADMIN_URL]
        if self.is_development:
            return self.cors_origins_development + deployed
        elif self.is_staging:
            return self.cors_origins_development + deployed
        else:  # production
            return deployed

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env", extra='ignore')

settings = Settings()
