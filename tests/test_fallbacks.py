"""Unit tests for the deterministic local fallbacks."""
from __future__ import annotations

import pytest

from unibridge_ai import fallbacks
from unibridge_ai.schema import Opportunity, StudentProfile


def _opportunity(**overrides) -> Opportunity:
    data = {
        "id": "opp-x",
        "title": "Frontend Internship",
        "type": "internship",
        "organization": "Acme",
        "description": "Build UI.",
        "deadline": "2026-03-01",
        "requirements": [],
        "skills": [],
        "location": "Lagos",
        "isRemote": False,
        "applicationUrl": "https://example.org/x",
        "tags": [],
        "createdAt": "2026-01-01",
    }
    data.update(overrides)
    return Opportunity.model_validate(data)


def test_summarize_keeps_short_text() -> None:
    text = "First point.  Second point!\nThird point?"

    assert fallbacks.summarize(text) == "First point. Second point! Third point?"


def test_summarize_picks_first_middle_last() -> None:
    text = "One. Two. Three. Four. Five."

    assert fallbacks.summarize(text) == "One. Three. Five."


def test_summarize_middle_uses_floor_index() -> None:
    text = "A one. B two. C three. D four."

    assert fallbacks.summarize(text) == "A one. C three. D four."


def test_summarize_empty_text() -> None:
    assert fallbacks.summarize("   ") == "No content provided."


def test_moderate_clean_text() -> None:
    verdict = fallbacks.moderate("Lovely lecture notes for week two.")

    assert verdict == {
        "flagged": False,
        "score": 0.05,
        "categories": ["clean"],
        "recommendation": "Looks safe for public listing.",
    }


@pytest.mark.parametrize(
    "text, score, flagged",
    [
        ("you idiot", 0.45, False),
        ("stupid idiot", 0.65, True),
        ("stupid idiot fool trash useless", 1.0, True),
    ],
)
def test_moderate_scales_with_hits(text: str, score: float, flagged: bool) -> None:
    verdict = fallbacks.moderate(text)

    assert verdict["score"] == score
    assert verdict["flagged"] is flagged
    assert 0 <= verdict["score"] <= 1


def test_moderate_reports_hit_words() -> None:
    verdict = fallbacks.moderate("I HATE this trash")

    assert verdict["categories"] == ["hate", "trash"]
    assert verdict["recommendation"] == "Send to admin review before publishing."


def test_translate_placeholders() -> None:
    assert fallbacks.translate("Hello", "en") == "Hello"
    assert fallbacks.translate("Hello", "yo") == "Akopọ (Yoruba fallback): Hello"
    assert fallbacks.translate("Hello", "pcm") == "Pidgin fallback: Hello"


def test_overlap_ratio_uses_larger_list() -> None:
    assert fallbacks.overlap_ratio(["React", "python"], ["react"]) == 0.5
    assert fallbacks.overlap_ratio([], ["react"]) == 0.0
    assert fallbacks.overlap_ratio(["react"], []) == 0.0


def test_lexical_match_full_overlap_remote() -> None:
    profile = StudentProfile(skills=["react", "typescript"])
    opportunity = _opportunity(skills=["react", "typescript"], isRemote=True)

    (result,) = fallbacks.match_opportunities(profile, [opportunity])

    assert result.score == 0.95
    assert result.reason == "Strong match on skills and profile context."


def test_lexical_match_location_substring_boost() -> None:
    profile = StudentProfile(location="lagos")
    opportunity = _opportunity(location="Ikeja, Lagos")

    (result,) = fallbacks.match_opportunities(profile, [opportunity])

    assert result.score == 0.1
    assert result.reason == "Moderate match. Improve profile skills for better fit."


def test_lexical_match_sorted_descending_and_stable() -> None:
    profile = StudentProfile(skills=["python"])
    weak_a = _opportunity(id="a")
    strong = _opportunity(id="b", skills=["python"])
    weak_b = _opportunity(id="c")

    results = fallbacks.match_opportunities(profile, [weak_a, strong, weak_b])

    assert [item.opportunity.id for item in results] == ["b", "a", "c"]


def test_checkin_reply_echoes_mood() -> None:
    reply = fallbacks.checkin_reply("stressed")

    assert reply["urgent"] is False
    assert "I hear that you feel stressed." in reply["response"]
    assert len(reply["follow_ups"]) == 2
    assert "feel neutral" in fallbacks.checkin_reply()["response"]


def test_moderate_flags_on_unrounded_score() -> None:
    # two hits score 0.65; the cutoff sits within rounding distance on both sides
    assert fallbacks.moderate("stupid idiot", threshold=0.6504)["flagged"] is False
    assert fallbacks.moderate("stupid idiot", threshold=0.6496)["flagged"] is True


def test_lexical_reason_uses_unrounded_score() -> None:
    profile = StudentProfile()
    opportunity = _opportunity(isRemote=True)

    (result,) = fallbacks.match_opportunities(profile, [opportunity], boost=0.6504)

    assert result.score == 0.65
    assert result.reason == "Strong match on skills and profile context."
