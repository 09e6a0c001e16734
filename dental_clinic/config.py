"""
Application configuration settings loaded from environment variables.
Uses pydantic_settings for validation and type conversion.
"""
from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    """
    Application settings class with environment variable validation.

    Attributes:
        database_url: SQLAlchemy connection string
        access_token_key: Secret used to sign access tokens
        refresh_token_key: Secret used to sign refresh tokens (must differ from the access key)
        algorithm: Algorithm used for JWT encoding (typically HS256)
        access_token_expire_minutes: Access token lifetime in minutes
        refresh_token_expire_days: Refresh token lifetime in days
        refresh_cookie_name: Name of the HTTP-only cookie carrying the refresh token
        password_reset_token_expire_minutes: Lifetime of the token that authorises a password change

        # Login behaviour
        patient_login_enabled: Probe the patients table during login
        email_verification_ttl_minutes: Age after which a verification code stops matching (None = never)

        # Email settings
        mail_username: SMTP server username
        mail_password: SMTP server password
        mail_from: Sender email address
        mail_port: SMTP server port
        mail_server: SMTP server hostname

        # Frontend settings
        frontend_url: URL of the frontend application
        cors_origins: Origins allowed to send credentialed requests
    """
    # Database settings
    database_url: str

    # JWT settings
    access_token_key: str
    refresh_token_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 15
    refresh_token_expire_days: int = 14
    refresh_cookie_name: str = "refreshToken"
    password_reset_token_expire_minutes: int = 10

    # Login behaviour
    patient_login_enabled: bool = False
    email_verification_ttl_minutes: Optional[int] = None

    # Email settings
    mail_username: Optional[str] = None
    mail_password: Optional[str] = None
    mail_from: Optional[str] = None
    mail_port: int = 465
    mail_server: str = "smtp.gmail.com"

    # Frontend settings
    frontend_url: str = "http://localhost:3000"
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
        "http://localhost:4000",
    ]

    class Config:
        """Configuration for environment variables loading"""
        env_file = ".env"
        case_sensitive = False

# Create settings instance
settings = Settings()
