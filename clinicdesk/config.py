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
        secret_key: Secret key for session token encoding
        algorithm: Algorithm used for JWT encoding (typically HS256)
        access_token_expire_minutes: Session token lifetime in minutes

        # Clinic settings
        clinic_name: Display name used in exports
        clinic_timezone: IANA timezone used for every "today" computation
        low_stock_threshold: Quantity below which stock is reported as low

        # File locations
        export_dir: Directory analytics exports are written to
        legacy_dir: Directory holding legacy spreadsheet snapshots and settings.json

        # Bootstrap admin settings (optional)
        bootstrap_admin_username: Username for first admin creation
        bootstrap_admin_password: Password for first admin creation
        bootstrap_admin_name: Full name for first admin creation
    """
    # Database settings
    database_url: str = "sqlite:///./clinicdesk.db"

    # JWT settings
    secret_key: str = "change-me-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 720

    # Clinic settings
    clinic_name: str = "Clinic Desk"
    clinic_timezone: str = "Asia/Kolkata"
    low_stock_threshold: int = 10

    # File locations
    export_dir: str = "~/Documents/ClinicExports"
    legacy_dir: str = "./legacy"

    # Frontend settings
    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Bootstrap admin settings (optional - only used for first admin creation)
    bootstrap_admin_username: Optional[str] = "admin"
    bootstrap_admin_password: Optional[str] = None
    bootstrap_admin_name: str = "System Administrator"

    class Config:
        """Configuration for environment variables loading"""
        env_file = ".env"
        case_sensitive = False

# Create settings instance
settings = Settings()
