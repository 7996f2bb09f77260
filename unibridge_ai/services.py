"""AI capability orchestrator for UniBridge.

Every public coroutine here returns a well-formed result envelope and
never raises for well-formed input: remote failures of any kind fall
through to the deterministic implementations in :mod:`fallbacks`.
"""
from __future__ import annotations

import logging
import re
import textwrap
from typing import List, Optional, Sequence, Tuple

import httpx

from . import config as config_module
from . import fallbacks, matching, metrics, models, safety, shapes
from .config import AIConfig
from .inference import EmbeddingShapeError, InferenceClient
from .ladder import Attempt, Ladder
from .schema import (
    CheckinResult,
    MatchResult,
    ModerationResult,
    Opportunity,
    StudentProfile,
    SummaryResult,
    TranslationResult,
)

logger = logging.getLogger(__name__)

_TOXIC_LABEL_RE = re.compile(r"(toxic|obscene|insult|threat|identity|hate|severe)", re.IGNORECASE)
_CATEGORY_FLOOR = 0.2
_MAX_CATEGORIES = 3
LEXICAL_MATCH_LABEL = "fallback:lexical-match"

_CHECKIN_PROMPT = textwrap.dedent(
    """\
    You are a supportive Nigerian university mental wellness assistant.
    Respond in 2 short paragraphs with practical, non-clinical support.
    Do not diagnose or prescribe medication.
    Student mood: {mood}
    Student message: {message}"""
)
_CHECKIN_FOLLOW_UPS = [
    "Would you like a focused study plan for the next 60 minutes?",
    "Should I suggest a short breathing reset before you continue?",
]


class AIServices:
    """Capability entry points bound to one configuration."""

    def __init__(
        self,
        config: AIConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config
        self.client = InferenceClient(config, transport=transport)

    def has_hf_access(self) -> bool:
        """Report whether an access token is configured."""

        return self.config.has_access

    async def summarize_text(self, text: str) -> SummaryResult:
        cleaned = fallbacks.normalize_text(text)
        if not cleaned:
            metrics.record_capability("summarize", "short_circuit")
            return SummaryResult(
                summary="No text supplied for summarization.",
                model="fallback:empty-input",
                used_fallback=True,
            )

        payload = {
            "inputs": cleaned,
            "parameters": {"min_length": 40, "max_length": 180, "do_sample": False},
        }

        def attempt(model: str) -> Attempt[str]:
            async def run() -> Optional[str]:
                return shapes.parse_summary(await self.client.query(model, payload))

            return Attempt(model, run)

        outcome = await Ladder(
            "summarize",
            [attempt(model) for model in models.candidates("summarization")],
            lambda: fallbacks.summarize(cleaned),
            "fallback:extractive-summary",
        ).climb()
        self._record("summarize", outcome.used_fallback)
        return SummaryResult(
            summary=outcome.value, model=outcome.label, used_fallback=outcome.used_fallback
        )

    async def translate_text(self, text: str, target_language: str) -> TranslationResult:
        if target_language == models.SOURCE_LANGUAGE:
            metrics.record_capability("translate", "short_circuit")
            return TranslationResult(translation=text, model="identity", used_fallback=False)

        model = models.primary("translation")
        payload = {
            "inputs": text,
            "parameters": {
                "src_lang": models.SOURCE_LOCALE,
                "tgt_lang": models.locale_for(target_language),
            },
        }

        async def run() -> Optional[str]:
            return shapes.parse_translation(await self.client.query(model, payload))

        outcome = await Ladder(
            "translate",
            [Attempt(model, run)],
            lambda: fallbacks.translate(text, target_language),
            "fallback:local-translation",
        ).climb()
        self._record("translate", outcome.used_fallback)
        return TranslationResult(
            translation=outcome.value, model=outcome.label, used_fallback=outcome.used_fallback
        )

    async def moderate_text(self, text: str) -> ModerationResult:
        cleaned = fallbacks.normalize_text(text)
        threshold = self.config.moderation_threshold
        if not cleaned:
            metrics.record_capability("moderate", "short_circuit")
            return ModerationResult(
                flagged=False,
                score=0,
                categories=["clean"],
                recommendation="No text to moderate.",
                model="empty-input",
                used_fallback=False,
            )

        model = models.primary("moderation")
        payload = {"inputs": cleaned, "parameters": {"return_all_scores": True}}

        async def run() -> Optional[dict]:
            classes = shapes.normalize_classification(await self.client.query(model, payload))
            if not classes:
                return None
            return _classification_verdict(classes, threshold)

        outcome = await Ladder(
            "moderate",
            [Attempt(model, run)],
            lambda: fallbacks.moderate(cleaned, threshold),
            "fallback:keyword-guardrail",
        ).climb()
        self._record("moderate", outcome.used_fallback)
        return ModerationResult(
            **outcome.value, model=outcome.label, used_fallback=outcome.used_fallback
        )

    async def embed(self, text: str) -> List[float]:
        """Return one embedding vector for ``text``; raises on any failure."""

        raw = await self.client.query(models.primary("embeddings"), {"inputs": text})
        vector = shapes.mean_vector(raw)
        if vector is None:
            raise EmbeddingShapeError("Invalid embedding shape.")
        return vector

    async def rank_opportunities(
        self, profile: StudentProfile, opportunities: Sequence[Opportunity]
    ) -> List[MatchResult]:
        results, _, _ = await self.rank_with_provenance(profile, opportunities)
        return results

    async def rank_with_provenance(
        self, profile: StudentProfile, opportunities: Sequence[Opportunity]
    ) -> Tuple[List[MatchResult], str, bool]:
        """Rank ``opportunities`` and report which path produced the order.

        Returns ``(results, model, used_fallback)``. ``model`` is the
        embeddings model id, ``fallback:lexical-match`` or ``empty-input``.
        """

        if not opportunities:
            metrics.record_capability("match", "short_circuit")
            return [], "empty-input", False

        weights = matching.BlendWeights(
            semantic=self.config.semantic_weight,
            lexical=self.config.lexical_weight,
            location=self.config.location_boost,
        )
        results, used_fallback = await matching.rank_opportunities(
            profile, opportunities, self.embed, weights
        )
        self._record("match", used_fallback)
        model = LEXICAL_MATCH_LABEL if used_fallback else models.primary("embeddings")
        return results, model, used_fallback

    async def generate_checkin_reply(
        self, message: str, mood: Optional[str] = None
    ) -> CheckinResult:
        cleaned = fallbacks.normalize_text(message)

        if safety.detect_risk(cleaned):
            logger.warning("Risk keywords detected; returning crisis escalation")
            metrics.record_capability("checkin", "safety_escalation")
            return CheckinResult(
                **safety.crisis_reply(), model="safety-escalation", used_fallback=True
            )

        if not cleaned:
            metrics.record_capability("checkin", "short_circuit")
            return CheckinResult(
                urgent=False,
                response=(
                    "Tell me how you are feeling right now and I will help you "
                    "structure your next step."
                ),
                follow_ups=["What has been hardest today?"],
                model="empty-input",
                used_fallback=False,
            )

        model = models.primary("checkin")
        payload = {
            "inputs": _CHECKIN_PROMPT.format(mood=mood or "unknown", message=cleaned),
            "parameters": {
                "max_new_tokens": 120,
                "temperature": 0.5,
                "return_full_text": False,
            },
        }

        async def run() -> Optional[dict]:
            reply = shapes.parse_generated_text(await self.client.query(model, payload))
            if reply is None:
                return None
            return {"urgent": False, "response": reply, "follow_ups": list(_CHECKIN_FOLLOW_UPS)}

        outcome = await Ladder(
            "checkin",
            [Attempt(model, run)],
            lambda: fallbacks.checkin_reply(mood),
            "fallback:wellness-template",
        ).climb()
        self._record("checkin", outcome.used_fallback)
        return CheckinResult(
            **outcome.value, model=outcome.label, used_fallback=outcome.used_fallback
        )

    @staticmethod
    def _record(capability: str, used_fallback: bool) -> None:
        metrics.record_capability(capability, "fallback" if used_fallback else "remote")


def _classification_verdict(classes: List[dict], threshold: float) -> dict:
    top = classes[0]
    toxic = next((item for item in classes if _TOXIC_LABEL_RE.search(item["label"])), None)
    raw_score = (toxic or top)["score"]
    score = fallbacks.clamp_score(raw_score)
    flagged = raw_score >= threshold
    categories = [
        item["label"].lower() for item in classes if item["score"] >= _CATEGORY_FLOOR
    ][:_MAX_CATEGORIES]
    return {
        "flagged": flagged,
        "score": score,
        "categories": categories or [top["label"].lower()],
        "recommendation": (
            "Hold this resource for manual review."
            if flagged
            else "Safe to auto-approve with audit logging."
        ),
    }


def build_services(transport: Optional[httpx.AsyncBaseTransport] = None) -> AIServices:
    """Return services configured from the current environment."""

    return AIServices(config_module.load_config(), transport=transport)


def has_hf_access() -> bool:
    return build_services().has_hf_access()


async def summarize_text(text: str) -> SummaryResult:
    return await build_services().summarize_text(text)


async def translate_text(text: str, target_language: str) -> TranslationResult:
    return await build_services().translate_text(text, target_language)


async def moderate_text(text: str) -> ModerationResult:
    return await build_services().moderate_text(text)


async def rank_opportunities(
    profile: StudentProfile, opportunities: Sequence[Opportunity]
) -> List[MatchResult]:
    return await build_services().rank_opportunities(profile, opportunities)


async def generate_checkin_reply(message: str, mood: Optional[str] = None) -> CheckinResult:
    return await build_services().generate_checkin_reply(message, mood)
