"""Local, deterministic stand-ins for every remote AI capability.

Nothing in this module performs I/O. The functions are used when the
inference endpoint is unconfigured, unreachable, slow, or answers with a
shape we cannot interpret, and are safe to call directly.
"""
from __future__ import annotations

import re
from typing import Dict, List, Optional, Sequence

from .schema import MatchResult, Opportunity, StudentProfile

TOXIC_KEYWORDS = [
    "idiot",
    "stupid",
    "kill",
    "hate",
    "useless",
    "trash",
    "nonsense",
    "fool",
    "bastard",
]

MODERATION_THRESHOLD = 0.65
LEXICAL_FALLBACK_WEIGHT = 0.85
LOCATION_BOOST = 0.10
STRONG_LEXICAL_MATCH = 0.65

_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])\s+")

_TRANSLATION_PREFIXES = {
    "yo": "Akopọ (Yoruba fallback): ",
    "pcm": "Pidgin fallback: ",
}


def normalize_text(text: str) -> str:
    """Collapse runs of whitespace and trim the ends."""

    return " ".join((text or "").split())


def clamp_score(value: float) -> float:
    """Clamp ``value`` into ``[0, 1]`` and round to three decimals."""

    return round(min(1.0, max(0.0, value)), 3)


def split_sentences(text: str) -> List[str]:
    return [part.strip() for part in _SENTENCE_SPLIT_RE.split(text) if part.strip()]


def summarize(text: str) -> str:
    """Return an extractive summary: first, middle and last sentence."""

    cleaned = normalize_text(text)
    if not cleaned:
        return "No content provided."

    sentences = split_sentences(cleaned)
    if len(sentences) <= 3:
        return " ".join(sentences)

    first = sentences[0]
    middle = sentences[len(sentences) // 2]
    last = sentences[-1]
    return " ".join([first, middle, last])


def moderate(text: str, threshold: float = MODERATION_THRESHOLD) -> Dict[str, object]:
    """Score ``text`` by counting toxic keyword hits."""

    lowered = (text or "").lower()
    hits = [word for word in TOXIC_KEYWORDS if word in lowered]
    raw_score = min(1.0, len(hits) * 0.2 + (0.25 if hits else 0.05))
    flagged = raw_score >= threshold
    return {
        "flagged": flagged,
        "score": clamp_score(raw_score),
        "categories": hits or ["clean"],
        "recommendation": (
            "Send to admin review before publishing."
            if flagged
            else "Looks safe for public listing."
        ),
    }


def translate(text: str, target_language: str) -> str:
    """Return a tagged placeholder; this is not a real translation."""

    if target_language == "en":
        return text
    prefix = _TRANSLATION_PREFIXES.get(target_language, _TRANSLATION_PREFIXES["pcm"])
    return f"{prefix}{text}"


def overlap_ratio(left: Sequence[str], right: Sequence[str]) -> float:
    """Return case-insensitive matches of ``right`` in ``left`` over the larger size."""

    if not left or not right:
        return 0.0
    known = {item.lower() for item in left}
    hits = sum(1 for item in right if item.lower() in known)
    return hits / max(len(left), len(right))


def location_boost(
    profile: StudentProfile, opportunity: Opportunity, boost: float = LOCATION_BOOST
) -> float:
    if opportunity.is_remote:
        return boost
    if profile.location and profile.location.lower() in opportunity.location.lower():
        return boost
    return 0.0


def profile_tags(profile: StudentProfile) -> List[str]:
    return [*profile.skills, *profile.interests]


def match_opportunities(
    profile: StudentProfile,
    opportunities: Sequence[Opportunity],
    boost: float = LOCATION_BOOST,
) -> List[MatchResult]:
    """Rank ``opportunities`` by tag overlap and location only."""

    tags = [tag.lower() for tag in profile_tags(profile)]
    results: List[MatchResult] = []
    for opportunity in opportunities:
        opportunity_tags = [
            tag.lower()
            for tag in (*opportunity.skills, *opportunity.tags, *opportunity.requirements)
        ]
        overlap = overlap_ratio(tags, opportunity_tags)
        raw_score = min(
            1.0, overlap * LEXICAL_FALLBACK_WEIGHT + location_boost(profile, opportunity, boost)
        )
        score = clamp_score(raw_score)
        reason = (
            "Strong match on skills and profile context."
            if raw_score > STRONG_LEXICAL_MATCH
            else "Moderate match. Improve profile skills for better fit."
        )
        results.append(MatchResult(opportunity=opportunity, score=score, reason=reason))

    results.sort(key=lambda item: item.score, reverse=True)
    return results


def checkin_reply(mood: Optional[str] = None) -> Dict[str, object]:
    """Return a supportive templated reply that echoes ``mood``."""

    normalized_mood = mood or "neutral"
    return {
        "urgent": False,
        "response": (
            f"Thanks for checking in. I hear that you feel {normalized_mood}. "
            "Start with one small step today: review one topic for 20 minutes, "
            "then take a 5-minute reset."
        ),
        "follow_ups": [
            "What is the one course task causing the most stress today?",
            "Do you want a short study plan for tonight?",
        ],
    }
