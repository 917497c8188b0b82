# chatrooms/core/config.py
import os
from typing import Literal, Optional
from dotenv import load_dotenv

StoreBackend = Literal["memory", "file", "redis"]


class Settings:
    """
    Setup environment variables.
        - STORE_BACKEND where rooms and messages live: "memory", "file" or "redis"
        - DATA_DIR / ROOMS_FILE / MESSAGES_FILE the JSON files used by the "file" backend
        - REDIS_* connection details used by the "redis" backend
        - PRINCIPAL_HEADER the trusted header carrying the caller identity
        - TRUST_PRINCIPAL_HEADER whether that header is honoured at all
        - JWT_SECRET / JWT_ALGORITHM used to verify bearer tokens
        - LOG_LEVEL root logger level (DEBUG, INFO, WARNING, ...)

    Any attribute can be overridden by keyword for tests:
        Settings(STORE_BACKEND="file", DATA_DIR="/tmp/x")
    """

    # Load environment variables from the .env file
    load_dotenv()

    STORE_BACKEND: StoreBackend = os.getenv("STORE_BACKEND", "memory")  # type: ignore[assignment]

    DATA_DIR: str = os.getenv("DATA_DIR", ".")
    ROOMS_FILE: str = os.getenv("ROOMS_FILE", "rooms.json")
    MESSAGES_FILE: str = os.getenv("MESSAGES_FILE", "messages.json")

    REDIS_HOST: str = os.getenv("REDIS_HOST", "localhost")
    REDIS_PORT: int = int(os.getenv("REDIS_PORT", "6379"))
    REDIS_ACCESS_KEY: str = os.getenv("REDIS_ACCESS_KEY", "")
    REDIS_SSL: bool = os.getenv("REDIS_SSL", "false").lower() == "true"
    REDIS_KEY_PREFIX: str = os.getenv("REDIS_KEY_PREFIX", "chatrooms")

    PRINCIPAL_HEADER: str = os.getenv("PRINCIPAL_HEADER", "X-Principal")
    TRUST_PRINCIPAL_HEADER: bool = os.getenv("TRUST_PRINCIPAL_HEADER", "true").lower() == "true"
    JWT_SECRET: Optional[str] = os.getenv("JWT_SECRET") or None
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")

    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    def __init__(self, **overrides):
        for name, value in overrides.items():
            if not hasattr(type(self), name):
                raise AttributeError(f"Unknown setting: {name}")
            setattr(self, name, value)

        if self.STORE_BACKEND not in ("memory", "file", "redis"):
            raise ValueError(f"Unsupported STORE_BACKEND: {self.STORE_BACKEND!r}")

    @property
    def rooms_path(self) -> str:
        return os.path.join(self.DATA_DIR, self.ROOMS_FILE)

    @property
    def messages_path(self) -> str:
        return os.path.join(self.DATA_DIR, self.MESSAGES_FILE)

    @property
    def redis_url(self) -> str:
        scheme = "rediss" if self.REDIS_SSL else "redis"
        return f"{scheme}://:{self.REDIS_ACCESS_KEY}@{self.REDIS_HOST}:{self.REDIS_PORT}"

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
