"""
Centralized application configuration.

Uses pydantic BaseSettings for automatic env-var loading and validation.
Import the singleton ``settings`` instance throughout the app.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import List, Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings, validated from environment variables."""

    # ── Environment ────────────────────────────────────────
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False

    # ── CORS ──────────────────────────────────────────────
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors(cls, v):
        if isinstance(v, str):
            return [o.strip() for o in v.split(",") if o.strip()]
        return v

    # ── LLM ───────────────────────────────────────────────
    GOOGLE_MODEL: str = "gemini-3-flash-preview"
    GOOGLE_API_KEY: str = ""
    LLM_TIMEOUT: int = 120

    # ── LLM Generation Control ───────────────────────────
    LLM_TEMPERATURE_STRUCTURED: float = 0.1
    LLM_TOP_P_STRUCTURED: float = 0.9
    LLM_TOP_K: int = 50

    # ── Token budget: min(BASE + count * PER_QUESTION, CAP) ─
    LLM_TOKEN_BASE: int = 8000
    LLM_TOKENS_PER_QUESTION: int = 300
    LLM_TOKEN_CAP: int = 32000

    # ── Request limits (HTTP / CLI surfaces) ─────────────
    MAX_QUESTION_COUNT: int = 100

    @field_validator("GOOGLE_MODEL", mode="after")
    @classmethod
    def _validate_model(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("GOOGLE_MODEL must not be empty")
        return v

    @field_validator(
        "LLM_TIMEOUT", "LLM_TOKEN_BASE", "LLM_TOKENS_PER_QUESTION",
        "LLM_TOKEN_CAP", "MAX_QUESTION_COUNT",
        mode="after",
    )
    @classmethod
    def _positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"must be positive, got {v}")
        return v

    @model_validator(mode="after")
    def _cross_validate(self):
        """Check token budget bounds and warn on a missing API key."""
        if self.LLM_TOKEN_CAP < self.LLM_TOKEN_BASE:
            raise ValueError(
                f"LLM_TOKEN_CAP ({self.LLM_TOKEN_CAP}) must be >= LLM_TOKEN_BASE ({self.LLM_TOKEN_BASE})"
            )

        if not self.GOOGLE_API_KEY:
            logging.getLogger("config").warning(
                "GOOGLE_API_KEY is empty; requests must supply an API key explicitly"
            )

        return self

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()


settings = get_settings()
