"""Test configuration ensuring project modules are importable."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))


from unibridge_ai import app as app_module
from unibridge_ai import metrics
from unibridge_ai.config import AIConfig
from unibridge_ai.services import AIServices

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("HUGGINGFACE_API_KEY", raising=False)
    monkeypatch.delenv("HF_TOKEN", raising=False)
    metrics.reset()
    app_module.app.config.pop("AI_SERVICES", None)
    app_module._get_rate_limiter().reset()
    yield
    app_module.app.config.pop("AI_SERVICES", None)


@pytest.fixture
def make_services() -> Callable[..., AIServices]:
    """Return a factory for services backed by an in-process fake endpoint."""

    def factory(handler: Handler, *, token: str = "hf_test", **overrides) -> AIServices:
        config = AIConfig(hf_token=token, base_url="https://hf.test/models", **overrides)
        return AIServices(config, transport=httpx.MockTransport(handler))

    return factory


@pytest.fixture
def offline_services() -> AIServices:
    """Services with no token; every remote attempt fails immediately."""

    def refuse(request: httpx.Request) -> httpx.Response:  # pragma: no cover - never reached
        raise AssertionError(f"unexpected network call to {request.url}")

    return AIServices(AIConfig(), transport=httpx.MockTransport(refuse))
