"""Configuration helpers for the UniBridge AI layer."""
from __future__ import annotations

import os
from dataclasses import dataclass

_DEFAULT_BASE_URL = "https://api-inference.huggingface.co/models"
_DEFAULT_TIMEOUT_MS = 35_000
_DEFAULT_MODERATION_THRESHOLD = 0.65
_DEFAULT_SEMANTIC_WEIGHT = 0.65
_DEFAULT_LEXICAL_WEIGHT = 0.25
_DEFAULT_LOCATION_BOOST = 0.10
_DEFAULT_MAX_CHARS = 8000
_DEFAULT_RATE_LIMIT = 60
_DEFAULT_RATE_WINDOW_S = 60

_TOKEN_ENV_NAMES = ("HUGGINGFACE_API_KEY", "HF_TOKEN")


@dataclass(frozen=True)
class AIConfig:
    """Settings injected into :class:`unibridge_ai.services.AIServices`."""

    hf_token: str = ""
    base_url: str = _DEFAULT_BASE_URL
    timeout_ms: int = _DEFAULT_TIMEOUT_MS
    moderation_threshold: float = _DEFAULT_MODERATION_THRESHOLD
    semantic_weight: float = _DEFAULT_SEMANTIC_WEIGHT
    lexical_weight: float = _DEFAULT_LEXICAL_WEIGHT
    location_boost: float = _DEFAULT_LOCATION_BOOST

    @property
    def has_access(self) -> bool:
        return bool(self.hf_token)

    @property
    def timeout_s(self) -> float:
        return self.timeout_ms / 1000.0


def _read_int(name: str, default: int) -> int:
    """Return a positive integer configuration value from the environment."""

    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        value = int(raw_value)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def _read_float(name: str, default: float) -> float:
    """Return a non-negative float configuration value from the environment."""

    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        value = float(raw_value)
    except (TypeError, ValueError):
        return default
    return value if value >= 0 else default


def get_hf_token() -> str:
    """Return the inference access token, checking both supported names."""

    for name in _TOKEN_ENV_NAMES:
        token = os.getenv(name, "").strip()
        if token:
            return token
    return ""


def get_base_url() -> str:
    base_url = os.getenv("UNIBRIDGE_HF_BASE_URL", "").strip().rstrip("/")
    return base_url or _DEFAULT_BASE_URL


def get_timeout_ms() -> int:
    """Return the remote inference timeout in milliseconds."""

    return _read_int("UNIBRIDGE_TIMEOUT_MS", _DEFAULT_TIMEOUT_MS)


def get_max_chars() -> int:
    """Return the maximum accepted request text length in characters."""

    return _read_int("UNIBRIDGE_MAX_CHARS", _DEFAULT_MAX_CHARS)


def get_rate_limit() -> int:
    """Return the maximum number of requests allowed per rate window."""

    return _read_int("UNIBRIDGE_RATE_LIMIT", _DEFAULT_RATE_LIMIT)


def get_rate_window_s() -> int:
    """Return the rate limiting window duration in seconds."""

    return _read_int("UNIBRIDGE_RATE_WINDOW_S", _DEFAULT_RATE_WINDOW_S)


def load_config() -> AIConfig:
    """Build an :class:`AIConfig` from the current environment."""

    return AIConfig(
        hf_token=get_hf_token(),
        base_url=get_base_url(),
        timeout_ms=get_timeout_ms(),
        moderation_threshold=_read_float(
            "UNIBRIDGE_MODERATION_THRESHOLD", _DEFAULT_MODERATION_THRESHOLD
        ),
        semantic_weight=_read_float("UNIBRIDGE_SEMANTIC_WEIGHT", _DEFAULT_SEMANTIC_WEIGHT),
        lexical_weight=_read_float("UNIBRIDGE_LEXICAL_WEIGHT", _DEFAULT_LEXICAL_WEIGHT),
        location_boost=_read_float("UNIBRIDGE_LOCATION_BOOST", _DEFAULT_LOCATION_BOOST),
    )
