"""
Application configuration settings loaded from environment variables.
Uses pydantic_settings for validation and type conversion.
"""
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    """
    Application settings class with environment variable validation.
    
    Attributes:
        database_url: SQLAlchemy connection string
        app_name: Title shown in the OpenAPI docs
        log_level: Root logging level
        cors_origins: Frontend origins allowed by CORS
        default_doctor_id: Doctor used when a booking does not name one
        seed_demo_data: Whether to load the demo branches, staff and patients on startup
    """
    # Database settings
    database_url: str = "sqlite:///./clinic.db"
    
    # Application settings
    app_name: str = "Clinic Operations API"
    log_level: str = "INFO"
    cors_origins: List[str] = ["http://localhost:3000"]
    
    # Scheduling settings
    default_doctor_id: int = 1
    
    # Bootstrap settings
    seed_demo_data: bool = True

    class Config:
        """Configuration for environment variables loading"""
        env_file = ".env"
        case_sensitive = False

# Create settings instance
settings = Settings()
