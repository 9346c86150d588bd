from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List
from functools import lru_cache
import os

from sow_diff.comparison.field_comparator import DEFAULT_EXCLUDED_FIELDS


class Settings(BaseSettings):
    """
    Application settings and configuration
    """
    
    # Application
    app_name: str = "SOW Revision Diff API"
    app_version: str = "1.0.0"
    debug: bool = False
    
    # Server
    host: str = "0.0.0.0"
    port: int = int(os.getenv("PORT", "8000"))
    
    # Environment detection
    environment: str = os.getenv("ENVIRONMENT", "production")
    
    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_format: str = (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
    )
    log_rotation: str = "10 MB"
    log_retention: str = "14 days"
    
    # CORS
    allowed_origins: List[str] = ["*"]
    allow_credentials: bool = True
    
    # Diff engine
    diff_lookahead_window: int = 50  # tokens
    html_atomic_threshold: int = 100  # characters
    excluded_fields: List[str] = sorted(DEFAULT_EXCLUDED_FIELDS)
    status_field: str = "status"
    include_status_changes: bool = True
    
    # Production optimization flags
    enable_docs: bool = os.getenv("ENABLE_DOCS", "false").lower() == "true"
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


# Create settings instance with caching
@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings
    """
    return Settings()
