"""Runtime settings read from the environment (and an optional .env file)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://localhost:5174"


def _split(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 3000
    session_count: int = 25
    session_codes: list[str] = field(default_factory=list)
    cors_origins: list[str] = field(default_factory=lambda: _split(DEFAULT_CORS_ORIGINS))
    static_dir: str = "public"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        load_dotenv()
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            session_count=int(os.getenv("SESSION_COUNT", "25")),
            session_codes=_split(os.getenv("SESSION_CODES", "")),
            cors_origins=_split(os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)),
            static_dir=os.getenv("STATIC_DIR", "public"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
