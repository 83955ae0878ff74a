"""
Learnify Configuration
Environment settings for the database, token signing and the AI provider
"""

import os
from typing import List

from dotenv import load_dotenv
from fastapi import Request
from pydantic import BaseModel, Field

from learnify.errors import ConfigError

load_dotenv()

DEFAULT_DATABASE_NAME = "LearnOnline"
DEFAULT_GEMINI_MODEL = "gemini-1.5-flash-latest"
DEFAULT_TOKEN_TTL_HOURS = 24


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    mongodb_uri: str = ""
    database_name: str = DEFAULT_DATABASE_NAME
    jwt_secret: str = ""
    token_ttl_hours: int = DEFAULT_TOKEN_TTL_HOURS
    gemini_api_key: str = ""
    gemini_model: str = DEFAULT_GEMINI_MODEL
    seed_sample_data: bool = True
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    port: int = 8080

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from the process environment

        Raises:
            ConfigError: MONGODB_URI or JWT_SECRET is not set
        """
        origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
        settings = cls(
            mongodb_uri=os.getenv("MONGODB_URI", "").strip(),
            database_name=os.getenv("DATABASE_NAME", DEFAULT_DATABASE_NAME).strip() or DEFAULT_DATABASE_NAME,
            jwt_secret=os.getenv("JWT_SECRET", "").strip(),
            token_ttl_hours=int(os.getenv("TOKEN_TTL_HOURS", DEFAULT_TOKEN_TTL_HOURS)),
            gemini_api_key=os.getenv("GEMINI_API_KEY", "").strip(),
            gemini_model=os.getenv("GEMINI_MODEL", "").strip() or DEFAULT_GEMINI_MODEL,
            seed_sample_data=_env_flag("SEED_SAMPLE_DATA", True),
            cors_origins=origins or ["*"],
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            port=int(os.getenv("PORT", 8080)),
        )
        settings.require()
        return settings

    def require(self) -> None:
        if not self.mongodb_uri:
            raise ConfigError("MONGODB_URI environment variable is required")
        if not self.jwt_secret:
            raise ConfigError("JWT_SECRET environment variable is required")


def get_settings(request: Request) -> Settings:
    """Settings dependency"""
    return request.app.state.settings
