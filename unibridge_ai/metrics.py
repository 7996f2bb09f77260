"""Minimal in-memory counters and Prometheus exposition helpers."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Mapping, Tuple

_SCALARS = (
    "requests_total",
    "rate_limit_hits_total",
    "remote_calls_total",
    "remote_failures_total",
    "remote_latency_ms_sum",
)

_counters: Dict[str, float] = {name: 0.0 for name in _SCALARS}
_labelled_counters: Dict[str, Dict[Tuple[Tuple[str, str], ...], float]] = defaultdict(
    lambda: defaultdict(float)
)


def inc(name: str, labels: Mapping[str, str] | None = None, value: float = 1.0) -> None:
    """Increment the named counter in-memory."""

    if labels:
        label_key = tuple(sorted((str(k), str(v)) for k, v in labels.items()))
        _labelled_counters[name][label_key] += value
        return
    _counters[name] = _counters.get(name, 0.0) + value


def get(name: str, labels: Mapping[str, str] | None = None) -> float:
    """Return the current value of a counter, zero when never incremented."""

    if labels:
        label_key = tuple(sorted((str(k), str(v)) for k, v in labels.items()))
        return _labelled_counters.get(name, {}).get(label_key, 0.0)
    return _counters.get(name, 0.0)


def record_capability(capability: str, path: str) -> None:
    """Count one capability call by the path that produced its result."""

    inc("capability_calls_total", {"capability": capability, "path": path})


def reset() -> None:
    _counters.clear()
    _counters.update({name: 0.0 for name in _SCALARS})
    _labelled_counters.clear()


def to_prometheus() -> str:
    """Return a Prometheus text exposition payload for the recorded metrics."""

    lines = []

    def add_metric(name: str, metric_value: float, labels: Mapping[str, str] | None = None) -> None:
        formatted_value = _format_value(metric_value)
        if labels:
            label_parts = ",".join(
                f"{key}=\"{_escape_label_value(value)}\"" for key, value in sorted(labels.items())
            )
            lines.append(f"{name}{{{label_parts}}} {formatted_value}")
        else:
            lines.append(f"{name} {formatted_value}")

    for name in _SCALARS:
        add_metric(name, _counters.get(name, 0.0))

    for name, value in sorted(_counters.items()):
        if name not in _SCALARS:
            add_metric(name, value)

    for name, entries in sorted(_labelled_counters.items()):
        for label_key, value in sorted(entries.items()):
            labels = {key: str(val) for key, val in label_key}
            add_metric(name, value, labels)

    return "\n".join(lines) + "\n"


def _format_value(value: float) -> str:
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(value)


def _escape_label_value(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("\n", "\\n")
    return escaped.replace('"', '\\"')
