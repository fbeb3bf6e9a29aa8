from typing import Optional, List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Project information
    PROJECT_NAME: str = "EggPro Backend"
    VERSION: str = "0.1.0"
    DESCRIPTION: str = "Signup OTP and payment verification services for EggPro"

    # Server configuration
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000
    DEBUG: bool = False

    # Database configuration (checked on first use, not at startup)
    DATABASE_URL: Optional[str] = None
    DATABASE_POOL_SIZE: int = 20
    DATABASE_POOL_OVERFLOW: int = 10
    DATABASE_POOL_TIMEOUT: int = 10  # Connection acquisition timeout
    DATABASE_ECHO: bool = False

    # Email/OTP settings
    RESEND_API_KEY: Optional[str] = None
    RESEND_API_URL: str = "https://api.resend.com"
    EMAIL_FROM: str = "EggPro <onboarding@resend.dev>"
    OTP_EXPIRE_MINUTES: int = 10
    MIN_PASSWORD_LENGTH: int = 6

    # Identity provider (Supabase auth). Local users table is used when unset.
    SUPABASE_URL: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None

    # Razorpay
    RAZORPAY_KEY_ID: Optional[str] = None
    RAZORPAY_KEY_SECRET: Optional[str] = None
    RAZORPAY_API_URL: str = "https://api.razorpay.com/v1"
    DEFAULT_CURRENCY: str = "INR"

    # Operator notifications
    ADMIN_PHONE: Optional[str] = None
    ADMIN_EMAIL: Optional[str] = None

    # API settings
    API_V1_STR: str = "/api/v1"
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    # Timeouts
    REQUEST_TIMEOUT_SECONDS: float = 30.0
    EXTERNAL_REQUEST_TIMEOUT_SECONDS: float = 15.0

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
