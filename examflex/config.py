"""
Configuration settings for the ExamFlex result service
"""
from pydantic_settings import BaseSettings
from pathlib import Path
from typing import Dict, List


class Settings(BaseSettings):
    """Application settings using pydantic-settings"""

    # Server settings
    HOST: str = "127.0.0.1"
    PORT: int = 8000
    DEBUG: bool = True

    # CORS settings
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Project paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    EXPORTS_DIR: Path = PROJECT_ROOT / "exports"
    LOG_TO_FILE: bool = True

    # Mark entry config store
    CONFIG_TTL_SECONDS: int = 2 * 60 * 60

    # Admission control for a single compute request
    MAX_BATCH_STUDENTS: int = 1000

    # Basic auth client registry: username -> argon2 password hash
    API_CLIENTS: Dict[str, str] = {}

    class Config:
        env_file = ".env"
        extra = "allow"


settings = Settings()

# Ensure directories exist
settings.LOGS_DIR.mkdir(parents=True, exist_ok=True)
settings.EXPORTS_DIR.mkdir(parents=True, exist_ok=True)
