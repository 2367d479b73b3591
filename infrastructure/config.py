"""Runtime configuration read from the environment"""
import os
from functools import lru_cache

from pydantic import BaseModel


class Settings(BaseModel):
    app_title: str = "Multi-Property Reservation API"
    secret_key: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 30
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = cls()
        return cls(
            app_title=os.getenv("APP_TITLE", defaults.app_title),
            secret_key=os.getenv("SECRET_KEY", defaults.secret_key),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", defaults.jwt_algorithm),
            access_token_expire_minutes=int(
                os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", defaults.access_token_expire_minutes)
            ),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
