"""Registry of remote model identifiers per AI capability."""
from __future__ import annotations

from typing import Dict, Tuple

AI_MODELS: Dict[str, Dict[str, str]] = {
    "summarization": {
        "primary": "facebook/bart-large-cnn",
        "fallback": "sshleifer/distilbart-cnn-12-6",
    },
    "moderation": {
        "primary": "unitary/unbiased-toxic-roberta",
    },
    "embeddings": {
        "primary": "sentence-transformers/all-MiniLM-L6-v2",
    },
    "translation": {
        "primary": "facebook/nllb-200-distilled-600M",
    },
    "checkin": {
        "primary": "google/flan-t5-base",
    },
}

SOURCE_LANGUAGE = "en"
SOURCE_LOCALE = "eng_Latn"
SUPPORTED_LANGUAGES = ("en", "yo", "pcm")

_LOCALES = {
    "yo": "yor_Latn",
    "pcm": "pcm_Latn",
}


def primary(capability: str) -> str:
    """Return the primary model identifier for ``capability``."""

    return AI_MODELS[capability]["primary"]


def candidates(capability: str) -> Tuple[str, ...]:
    """Return model identifiers for ``capability`` in attempt order."""

    slots = AI_MODELS[capability]
    return tuple(slots[slot] for slot in ("primary", "fallback") if slot in slots)


def locale_for(language: str) -> str:
    """Return the NLLB locale code used as the translation target."""

    # Anything that is not Yoruba is served by the Pidgin model slot.
    return _LOCALES.get(language, _LOCALES["pcm"])
