"""Opportunity ranking: embedding similarity blended with lexical overlap."""
from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Sequence

from . import fallbacks
from .schema import MatchResult, Opportunity, StudentProfile

logger = logging.getLogger(__name__)

Embedder = Callable[[str], Awaitable[List[float]]]

STRONG_SEMANTIC_MATCH = 0.7


@dataclass(frozen=True)
class BlendWeights:
    semantic: float = 0.65
    lexical: float = 0.25
    location: float = 0.10


def cosine_similarity(left: Sequence[float], right: Sequence[float]) -> float:
    """Return the cosine of two equal-length vectors, 0 when undefined."""

    if len(left) != len(right) or not left:
        return 0.0
    dot = sum(a * b for a, b in zip(left, right))
    mag_left = math.sqrt(sum(a * a for a in left))
    mag_right = math.sqrt(sum(b * b for b in right))
    if mag_left == 0 or mag_right == 0:
        return 0.0
    return dot / (mag_left * mag_right)


def profile_to_text(profile: StudentProfile) -> str:
    parts = [
        profile.university,
        profile.department,
        profile.level,
        profile.location,
        f"skills: {', '.join(profile.skills)}",
        f"interests: {', '.join(profile.interests)}",
        f"gpa: {format_number(profile.gpa)}" if profile.gpa is not None else "",
    ]
    return ". ".join(part for part in parts if part)


def format_number(value: float) -> str:
    """Shortest exact text for ``value``; whole numbers drop the ``.0``."""

    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def opportunity_to_text(opportunity: Opportunity) -> str:
    return ". ".join(
        [
            opportunity.title,
            opportunity.type,
            opportunity.organization,
            opportunity.description,
            opportunity.location,
            ", ".join(opportunity.skills),
            ", ".join(opportunity.requirements),
            ", ".join(opportunity.tags),
        ]
    )


def blend(
    profile: StudentProfile,
    opportunity: Opportunity,
    profile_vector: Sequence[float],
    opportunity_vector: Sequence[float],
    weights: BlendWeights,
) -> MatchResult:
    semantic = max(0.0, cosine_similarity(profile_vector, opportunity_vector))
    lexical = fallbacks.overlap_ratio(
        fallbacks.profile_tags(profile), [*opportunity.skills, *opportunity.tags]
    )
    boost = fallbacks.location_boost(profile, opportunity, weights.location)
    blended = min(1.0, semantic * weights.semantic + lexical * weights.lexical + boost)
    score = fallbacks.clamp_score(blended)
    reason = (
        "Strong semantic fit based on skills, interests, and profile context."
        if blended >= STRONG_SEMANTIC_MATCH
        else "Moderate fit. Add more relevant skills for higher ranking."
    )
    return MatchResult(opportunity=opportunity, score=score, reason=reason)


async def semantic_rank(
    profile: StudentProfile,
    opportunities: Sequence[Opportunity],
    embed: Embedder,
    weights: BlendWeights = BlendWeights(),
) -> List[MatchResult]:
    """Rank with embeddings; any embedding failure propagates to the caller."""

    texts = [profile_to_text(profile), *(opportunity_to_text(item) for item in opportunities)]
    tasks = [asyncio.ensure_future(embed(text)) for text in texts]
    try:
        profile_vector, *opportunity_vectors = await asyncio.gather(*tasks)
    except Exception:
        for task in tasks:
            task.cancel()
        raise
    results = [
        blend(profile, opportunity, profile_vector, vector, weights)
        for opportunity, vector in zip(opportunities, opportunity_vectors)
    ]
    results.sort(key=lambda item: item.score, reverse=True)
    return results


async def rank_opportunities(
    profile: StudentProfile,
    opportunities: Sequence[Opportunity],
    embed: Embedder,
    weights: BlendWeights = BlendWeights(),
) -> tuple[List[MatchResult], bool]:
    """Return ranked matches and whether the lexical fallback was used."""

    if not opportunities:
        return [], False
    try:
        return await semantic_rank(profile, opportunities, embed, weights), False
    except Exception as exc:
        logger.warning("Embedding ranking failed; using lexical fallback: %s", exc)
        return fallbacks.match_opportunities(profile, opportunities, weights.location), True
