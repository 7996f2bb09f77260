"""Tests for embedding-based opportunity ranking and its fallback."""
from __future__ import annotations

import asyncio
import json
import math

import httpx
import pytest

from unibridge_ai import catalog, matching
from unibridge_ai.schema import Opportunity, StudentProfile


def _opportunity(opp_id: str, **overrides) -> Opportunity:
    data = {
        "id": opp_id,
        "title": f"Opportunity {opp_id}",
        "type": "gig",
        "organization": "Campus Hub",
        "description": "Help out.",
        "deadline": "2026-03-01",
        "location": "Abuja",
        "isRemote": False,
        "applicationUrl": f"https://example.org/{opp_id}",
        "createdAt": "2026-01-01",
    }
    data.update(overrides)
    return Opportunity.model_validate(data)


def test_cosine_similarity_edge_cases() -> None:
    assert matching.cosine_similarity([1.0, 0.0], [1.0, 0.0]) == pytest.approx(1.0)
    assert matching.cosine_similarity([1.0, 0.0], [0.0, 1.0]) == 0.0
    assert matching.cosine_similarity([1.0, 2.0], [1.0]) == 0.0
    assert matching.cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0
    assert matching.cosine_similarity([], []) == 0.0


def test_profile_text_skips_missing_fields() -> None:
    profile = StudentProfile(department="Computer Science", gpa=4.5, skills=["python"])

    assert matching.profile_to_text(profile) == (
        "Computer Science. skills: python. interests: . gpa: 4.5"
    )


def test_opportunity_text_concatenates_fields() -> None:
    opportunity = _opportunity("a", skills=["figma"], requirements=["portfolio"], tags=["design"])

    assert matching.opportunity_to_text(opportunity) == (
        "Opportunity a. gig. Campus Hub. Help out.. Abuja. figma. portfolio. design"
    )


def _vector_embedder(vectors):
    async def embed(text: str):
        return vectors[text.split(".", 1)[0]]

    return embed


def test_semantic_rank_blends_signals() -> None:
    profile = StudentProfile(university="Uni", location="abuja", skills=["figma"])
    near = _opportunity("near", skills=["figma"])
    far = _opportunity("far", location="Kano")
    vectors = {
        "Uni": [1.0, 0.0],
        "Opportunity near": [1.0, 0.0],
        "Opportunity far": [-1.0, 0.0],
    }

    results, used_fallback = asyncio.run(
        matching.rank_opportunities(profile, [far, near], _vector_embedder(vectors))
    )

    assert used_fallback is False
    assert [item.opportunity.id for item in results] == ["near", "far"]
    # 1.0 * 0.65 + 1.0 * 0.25 + 0.10
    assert results[0].score == 1.0
    assert results[0].reason.startswith("Strong semantic fit")
    # negative cosine floors at zero; no overlap, no location match
    assert results[1].score == 0.0
    assert results[1].reason == "Moderate fit. Add more relevant skills for higher ranking."


def test_any_embedding_failure_uses_lexical_fallback() -> None:
    profile = StudentProfile(skills=["react", "typescript"])
    opportunity = _opportunity("remote", skills=["react", "typescript"], isRemote=True)

    async def embed(text: str):
        if text.startswith("Opportunity"):
            raise RuntimeError("bad shape")
        return [1.0]

    results, used_fallback = asyncio.run(matching.rank_opportunities(profile, [opportunity], embed))

    assert used_fallback is True
    assert results[0].score == 0.95
    assert results[0].reason == "Strong match on skills and profile context."


def test_empty_opportunities_skip_embedding() -> None:
    async def embed(text: str):  # pragma: no cover - never reached
        raise AssertionError("no embedding expected")

    assert asyncio.run(matching.rank_opportunities(StudentProfile(), [], embed)) == ([], False)


def test_services_rank_with_token_level_embeddings(make_services) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        text = json.loads(request.content)["inputs"]
        if "Frontend" in text or text.startswith("skills"):
            return httpx.Response(200, json=[[1.0, 0.0], [1.0, 0.0]])
        return httpx.Response(200, json=[0.0, 1.0])

    profile = StudentProfile(skills=["react", "typescript"], interests=["ui design"])
    results = asyncio.run(
        make_services(handler).rank_opportunities(profile, catalog.default_opportunities())
    )

    assert results[0].opportunity.id == "opp-3"
    assert all(0 <= item.score <= 1 for item in results)
    scores = [item.score for item in results]
    assert scores == sorted(scores, reverse=True)


def test_services_rank_offline_matches_lexical(offline_services) -> None:
    profile = StudentProfile(location="Lagos", skills=["python", "teaching"])
    opportunities = catalog.default_opportunities()

    results = asyncio.run(offline_services.rank_opportunities(profile, opportunities))

    assert [item.opportunity.id for item in results][:2] == ["opp-2", "opp-1"]
    for item in results:
        assert item.score == round(item.score, 3)
        assert not math.isnan(item.score)


def test_profile_text_keeps_full_gpa_precision() -> None:
    precise = StudentProfile(gpa=3.14159265)
    whole = StudentProfile(gpa=4.0)

    assert matching.profile_to_text(precise).endswith("gpa: 3.14159265")
    assert matching.profile_to_text(whole).endswith("gpa: 4")
    assert matching.format_number(3.25) == "3.25"


def test_blend_reason_uses_unrounded_score() -> None:
    profile = StudentProfile()
    opportunity = _opportunity("edge")
    profile_vector = [0.6996, math.sqrt(1 - 0.6996**2)]

    result = matching.blend(
        profile,
        opportunity,
        profile_vector,
        [1.0, 0.0],
        matching.BlendWeights(semantic=1.0, lexical=0.0, location=0.0),
    )

    assert result.score == 0.7
    assert result.reason == "Moderate fit. Add more relevant skills for higher ranking."


def test_services_rank_reports_lexical_provenance(offline_services) -> None:
    profile = StudentProfile(skills=["python"])

    results, model, used_fallback = asyncio.run(
        offline_services.rank_with_provenance(profile, catalog.default_opportunities())
    )

    assert len(results) == 5
    assert model == "fallback:lexical-match"
    assert used_fallback is True


def test_services_rank_reports_embedding_provenance(make_services) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[1.0, 0.0])

    _, model, used_fallback = asyncio.run(
        make_services(handler).rank_with_provenance(
            StudentProfile(), catalog.default_opportunities()
        )
    )

    assert model == "sentence-transformers/all-MiniLM-L6-v2"
    assert used_fallback is False
