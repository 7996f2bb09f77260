"""Tests for the risk gate and request safety helpers."""
from __future__ import annotations

import pytest

from unibridge_ai import safety


@pytest.mark.parametrize(
    "message",
    ["I want to END MY LIFE", "thinking about suicide", "I might harm myself", "self-harm again"],
)
def test_detect_risk_matches_case_insensitively(message: str) -> None:
    assert safety.detect_risk(message) is True


def test_detect_risk_ignores_ordinary_stress() -> None:
    assert safety.detect_risk("Exams are stressing me out") is False
    assert safety.detect_risk("") is False


def test_crisis_reply_contains_hotlines() -> None:
    reply = safety.crisis_reply()

    assert reply["urgent"] is True
    assert "+234 806 210 6493" in reply["response"]
    assert reply["follow_ups"] == safety.CRISIS_FOLLOW_UPS
    assert reply["follow_ups"] is not safety.CRISIS_FOLLOW_UPS


def test_sanitize_for_log_flattens_and_limits() -> None:
    value = "line one\r\nline\ttwo " + "x" * 300

    sanitized = safety.sanitize_for_log(value, limit=20)

    assert sanitized == "line one line two xx"


def test_rate_limiter_sliding_window() -> None:
    limiter = safety.RateLimiter(max_requests=2, window_seconds=10.0)

    assert limiter.allow("1.2.3.4", now=0.0)
    assert limiter.allow("1.2.3.4", now=1.0)
    assert not limiter.allow("1.2.3.4", now=2.0)
    assert limiter.allow("5.6.7.8", now=2.0)
    assert limiter.allow("1.2.3.4", now=10.5)


def test_rate_limiter_rejects_bad_settings() -> None:
    with pytest.raises(ValueError):
        safety.RateLimiter(max_requests=-1, window_seconds=1.0)
    with pytest.raises(ValueError):
        safety.RateLimiter(max_requests=1, window_seconds=0)
