"""
Runtime configuration — read once from the environment at startup.

A single Settings object is built by the application factory and handed to
each pipeline, so tests can construct their own with fake credentials.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .services.errors import ConfigurationError

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

# Tried in this order; aliases rotate in and out of availability.
DEFAULT_GEMINI_MODELS = (
    "gemini-2.5-flash",
    "gemini-2.5-pro",
    "gemini-2.5-pro-preview-06-05",
)

FAL_QUEUE_URL = "https://queue.fal.run"
FAL_STORAGE_URL = "https://rest.alpha.fal.ai/storage/upload/initiate"
FAL_LLM_MODEL = "meta-llama/llama-3.2-90b-vision-instruct"

DEFAULT_ORIGINS = (
    "http://localhost:5173",
    "http://localhost:3000",
    "http://127.0.0.1:5173",
)


def _split_list(raw: Optional[str], default: tuple[str, ...]) -> tuple[str, ...]:
    if not raw:
        return default
    items = tuple(part.strip() for part in raw.split(",") if part.strip())
    return items or default


def _optional(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number of seconds, got {raw!r}") from e


@dataclass(frozen=True)
class Settings:
    gemini_api_key: Optional[str] = None
    gemini_base_url: str = GEMINI_BASE_URL
    gemini_models: tuple[str, ...] = DEFAULT_GEMINI_MODELS
    gemini_timeout: float = 60.0

    fal_key: Optional[str] = None
    fal_queue_url: str = FAL_QUEUE_URL
    fal_storage_url: str = FAL_STORAGE_URL
    fal_llm_model: str = FAL_LLM_MODEL
    fal_poll_interval: float = 1.0
    fal_timeout: float = 300.0

    allowed_origins: tuple[str, ...] = field(default=DEFAULT_ORIGINS)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            gemini_api_key=_optional(env.get("GEMINI_API_KEY")),
            gemini_base_url=env.get("GEMINI_BASE_URL", GEMINI_BASE_URL).rstrip("/"),
            gemini_models=_split_list(env.get("GEMINI_MODELS"), DEFAULT_GEMINI_MODELS),
            gemini_timeout=_float(env, "GEMINI_TIMEOUT", 60.0),
            fal_key=_optional(env.get("FAL_KEY")),
            fal_queue_url=env.get("FAL_QUEUE_URL", FAL_QUEUE_URL).rstrip("/"),
            fal_storage_url=env.get("FAL_STORAGE_URL", FAL_STORAGE_URL),
            fal_llm_model=env.get("FAL_LLM_MODEL", FAL_LLM_MODEL),
            fal_poll_interval=_float(env, "FAL_POLL_INTERVAL", 1.0),
            fal_timeout=_float(env, "FAL_TIMEOUT", 300.0),
            allowed_origins=_split_list(env.get("ALLOWED_ORIGINS"), DEFAULT_ORIGINS),
        )

    def status(self) -> dict:
        """Which providers are configured, without exposing the keys."""
        return {
            "gemini_configured": bool(self.gemini_api_key),
            "gemini_models": list(self.gemini_models),
            "fal_configured": bool(self.fal_key),
        }
