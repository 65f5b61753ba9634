from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

BASE_DIR = Path(__file__).resolve().parent.parent
ENV_FILE = BASE_DIR / ".env"


class Settings(BaseSettings):
    """Runtime configuration, read from the environment and ``.env``."""

    PROJECT_NAME: str = "FamilyHub"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Tokens. Access and refresh tokens are signed with different secrets.
    JWT_ACCESS_SECRET: str = ""
    JWT_REFRESH_SECRET: str = ""
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    BCRYPT_ROUNDS: int = 10

    DATABASE_URL: str = "sqlite:///./familyhub.db"

    # The mobile client talks to the API from any origin
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    UPLOAD_DIR: str = str(BASE_DIR / "uploads")
    UPLOAD_URL_PATH: str = "/uploads"
    MAX_UPLOAD_SIZE: int = 5 * 1024 * 1024

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE), case_sensitive=True, extra="ignore"
    )


settings = Settings()
