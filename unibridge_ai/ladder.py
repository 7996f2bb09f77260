"""Ordered degradation ladder: remote attempts first, local fallback last."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Attempt(Generic[T]):
    """One rung: a label for logs and a coroutine factory.

    ``run`` returns ``None`` when the response had no usable shape and
    raises on transport or configuration failure; both move on to the
    next rung.
    """

    label: str
    run: Callable[[], Awaitable[Optional[T]]]


@dataclass(frozen=True)
class Outcome(Generic[T]):
    value: T
    label: str
    used_fallback: bool


class Ladder(Generic[T]):
    """Try each attempt in order and settle on the infallible fallback."""

    def __init__(
        self,
        capability: str,
        attempts: List[Attempt[T]],
        fallback: Callable[[], T],
        fallback_label: str,
    ) -> None:
        self.capability = capability
        self.attempts = attempts
        self.fallback = fallback
        self.fallback_label = fallback_label

    async def climb(self) -> Outcome[T]:
        for attempt in self.attempts:
            try:
                value = await attempt.run()
            except Exception as exc:
                logger.warning(
                    "%s attempt '%s' failed: %s", self.capability, attempt.label, exc
                )
                continue
            if value is None:
                logger.warning(
                    "%s attempt '%s' returned an unrecognised shape",
                    self.capability,
                    attempt.label,
                )
                continue
            return Outcome(value=value, label=attempt.label, used_fallback=False)

        logger.info("%s using local fallback '%s'", self.capability, self.fallback_label)
        return Outcome(value=self.fallback(), label=self.fallback_label, used_fallback=True)
