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
        database_url: SQLAlchemy connection string for the profile store
        secret_key: Secret key for JWT session token encoding
        algorithm: Algorithm used for JWT encoding (typically HS256)
        access_token_expire_minutes: Session token expiration time in minutes
        session_cookie_name: Cookie carrying the session token for HTML views

        # Public viewer / QR settings
        public_base_url: Origin used in QR links; the request origin when unset
        public_profiles_enabled: Whether profiles may be read by bare id
        qr_size: Rendered QR code size in pixels
        qr_border: Quiet zone around the QR code, in modules
        default_locale: Locale for date formatting when none is negotiated

        log_level: Root logging level
    """
    # Database settings
    database_url: str = "sqlite:///./healthqr.db"

    # JWT settings
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    session_cookie_name: str = "access_token"

    # Frontend settings
    cors_origins: List[str] = ["http://localhost:3000"]

    # Public viewer / QR settings
    public_base_url: Optional[str] = None
    public_profiles_enabled: bool = True
    qr_size: int = 256
    qr_border: int = 4
    default_locale: str = "en_US"

    log_level: str = "INFO"

    class Config:
        """Configuration for environment variables loading"""
        env_file = ".env"
        case_sensitive = False

# Create settings instance
settings = Settings()
