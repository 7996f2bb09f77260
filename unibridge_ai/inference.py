"""Hosted inference endpoint client for UniBridge AI."""
from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any, Dict, Optional

import httpx

from . import metrics
from .config import AIConfig

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS = {"wait_for_model": True, "use_cache": True}


class InferenceError(RuntimeError):
    """Base class for every remote inference failure."""


class MissingCredentialsError(InferenceError):
    pass


class InferenceTimeoutError(InferenceError):
    pass


class InferenceHTTPError(InferenceError):
    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(f"Hugging Face {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class ResponseShapeError(InferenceError):
    """The endpoint answered with JSON we do not know how to read."""


class EmbeddingShapeError(ResponseShapeError):
    pass


class InferenceClient:
    """POST JSON payloads to ``{base_url}/{model}`` with a bearer token.

    A fresh ``httpx.AsyncClient`` is opened per call. The whole call,
    including connection setup and body download, is bounded by the
    configured timeout.
    """

    def __init__(self, config: AIConfig, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.config = config
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        if not self.config.hf_token:
            raise MissingCredentialsError("Missing Hugging Face token.")
        return {
            "Authorization": f"Bearer {self.config.hf_token}",
            "Content-Type": "application/json",
        }

    async def query(self, model: str, payload: Dict[str, Any]) -> Any:
        """Return the decoded JSON body for ``payload`` sent to ``model``."""

        headers = self._headers()
        body = dict(payload)
        body.setdefault("options", dict(DEFAULT_OPTIONS))

        metrics.inc("remote_calls_total")
        start_time = time.perf_counter()
        try:
            return await asyncio.wait_for(
                self._post(model, headers, body), timeout=self.config.timeout_s
            )
        except asyncio.TimeoutError as exc:
            metrics.inc("remote_failures_total")
            raise InferenceTimeoutError(
                f"{model} did not answer within {self.config.timeout_ms} ms"
            ) from exc
        except InferenceError:
            metrics.inc("remote_failures_total")
            raise
        except httpx.HTTPError as exc:
            metrics.inc("remote_failures_total")
            raise InferenceError(f"{model} request failed: {exc}") from exc
        finally:
            metrics.inc(
                "remote_latency_ms_sum", value=(time.perf_counter() - start_time) * 1000.0
            )

    async def _post(self, model: str, headers: Dict[str, str], body: Dict[str, Any]) -> Any:
        url = f"{self.config.base_url}/{model}"
        async with httpx.AsyncClient(
            transport=self._transport, timeout=self.config.timeout_s
        ) as client:
            response = await client.post(url, headers=headers, json=body)
        if not response.is_success:
            raise InferenceHTTPError(response.status_code, _error_detail(response))
        try:
            return response.json()
        except ValueError as exc:
            raise ResponseShapeError(f"{model} returned a non-JSON body") from exc


def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.reason_phrase
    if isinstance(payload, dict) and isinstance(payload.get("error"), str):
        return payload["error"]
    return json.dumps(payload)
