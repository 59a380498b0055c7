"""
Application Configuration
Handles all environment variables and settings
"""

from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).parent.parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "FlexiSpace"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    SECRET_KEY: str = "dev-secret-key-change-me"

    # Database
    DATABASE_URL: str = ""

    # JWT & Authentication
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    ACCESS_TOKEN_COOKIE: str = "access_token"

    # Twilio (SMS Notifications - Optional)
    TWILIO_ACCOUNT_SID: str = ""
    TWILIO_AUTH_TOKEN: str = ""
    TWILIO_PHONE_NUMBER: str = ""

    # Billing
    TAX_RATE: float = 0.10
    INVOICE_DUE_DAYS: int = 7
    DEFAULT_CURRENCY: str = "USD"

    # Invoice header
    COMPANY_NAME: str = "FlexiSpace Inc."
    COMPANY_ADDRESS: str = "123 Business Ave, Suite 100, New York, NY 10001"
    COMPANY_PHONE: str = "(555) 123-4567"
    COMPANY_EMAIL: str = "billing@flexispace.com"
    COMPANY_TAX_ID: str = "TAX-123456789"

    # CORS
    ALLOWED_ORIGINS: str = "http://localhost:3000"

    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    @property
    def sms_enabled(self) -> bool:
        return bool(self.TWILIO_ACCOUNT_SID and self.TWILIO_AUTH_TOKEN and self.TWILIO_PHONE_NUMBER)

    class Config:
        env_file = BASE_DIR / "src" / ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


# Global settings instance
settings = Settings()
