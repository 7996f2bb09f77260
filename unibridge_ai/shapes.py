"""Response shape matchers for the hosted inference endpoint.

Each capability knows a short, ordered list of JSON shapes the endpoint
may return. A matcher takes the decoded body and returns the payload or
``None``; the first match wins and exhaustion counts as a parse failure.
"""
from __future__ import annotations

import numbers
from typing import Any, Callable, Dict, List, Optional, Sequence

Matcher = Callable[[Any], Optional[Any]]


def first_match(raw: Any, matchers: Sequence[Matcher]) -> Optional[Any]:
    """Return the payload of the first matcher accepting ``raw``."""

    for matcher in matchers:
        payload = matcher(raw)
        if payload is not None:
            return payload
    return None


def _first_element(raw: Any) -> Optional[Dict[str, Any]]:
    if isinstance(raw, list) and raw and isinstance(raw[0], dict):
        return raw[0]
    return None


def _text_field(container: Optional[Dict[str, Any]], field: str) -> Optional[str]:
    if container is None:
        return None
    value = container.get(field)
    if isinstance(value, str) and value.strip():
        return value
    return None


def _listed(field: str) -> Matcher:
    def matcher(raw: Any) -> Optional[str]:
        return _text_field(_first_element(raw), field)

    matcher.__name__ = f"listed_{field}"
    return matcher


def _bare(field: str) -> Matcher:
    def matcher(raw: Any) -> Optional[str]:
        return _text_field(raw if isinstance(raw, dict) else None, field)

    matcher.__name__ = f"bare_{field}"
    return matcher


SUMMARY_SHAPES: Sequence[Matcher] = (
    _listed("summary_text"),
    _listed("generated_text"),
    _bare("summary_text"),
)
TRANSLATION_SHAPES: Sequence[Matcher] = (
    _listed("translation_text"),
    _listed("generated_text"),
)
GENERATION_SHAPES: Sequence[Matcher] = (_listed("generated_text"),)


def parse_summary(raw: Any) -> Optional[str]:
    return first_match(raw, SUMMARY_SHAPES)


def parse_translation(raw: Any) -> Optional[str]:
    return first_match(raw, TRANSLATION_SHAPES)


def parse_generated_text(raw: Any) -> Optional[str]:
    text = first_match(raw, GENERATION_SHAPES)
    return text.strip() if text else None


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _is_label(item: Any) -> bool:
    return (
        isinstance(item, dict)
        and isinstance(item.get("label"), str)
        and _is_number(item.get("score"))
    )


def normalize_classification(raw: Any) -> List[Dict[str, Any]]:
    """Return ``{label, score}`` items sorted by descending score.

    Accepts both a flat list of labels and the nested list-of-lists form
    the pipeline returns when ``return_all_scores`` is set.
    """

    if not isinstance(raw, list) or not raw:
        return []
    rows = raw[0] if isinstance(raw[0], list) else raw
    items = [
        {"label": item["label"], "score": float(item["score"])}
        for item in rows
        if _is_label(item)
    ]
    return sorted(items, key=lambda item: item["score"], reverse=True)


def _is_vector(value: Any) -> bool:
    return isinstance(value, list) and bool(value) and all(_is_number(x) for x in value)


def mean_vector(raw: Any) -> Optional[List[float]]:
    """Reduce an embedding response to a single vector.

    A flat numeric list is returned unchanged; a list of per-token vectors
    is averaged. Rows whose width differs from the first row are skipped.
    """

    if not isinstance(raw, list) or not raw:
        return None
    if _is_vector(raw):
        return [float(x) for x in raw]

    first = raw[0]
    if not _is_vector(first):
        return None

    dims = len(first)
    sums = [0.0] * dims
    valid_rows = 0
    for row in raw:
        if not _is_vector(row) or len(row) != dims:
            continue
        valid_rows += 1
        for index, value in enumerate(row):
            sums[index] += value

    if valid_rows == 0:
        return None
    return [value / valid_rows for value in sums]
