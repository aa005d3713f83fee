"""
Results of best-effort steps.

Hard failures are exceptions (`ApiError`) and end the request. Steps whose
failure must not change the response (schema bootstrap per table, proof audit
rows, linking a proof to a purchase) report an `Outcome` instead, so callers
can see what happened without a try/except at every call site.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Outcome:
    step: str
    ok: bool
    value: Any = None
    error: str | None = None

    @classmethod
    def success(cls, step: str, value: Any = None) -> "Outcome":
        return cls(step=step, ok=True, value=value)

    @classmethod
    def soft_failure(cls, step: str, error: str) -> "Outcome":
        return cls(step=step, ok=False, error=error)

    @property
    def soft_failed(self) -> bool:
        return not self.ok


async def best_effort(step: str, awaitable: Awaitable[Any]) -> Outcome:
    """
    Await `awaitable`; log and wrap any exception as a soft failure.
    """
    try:
        value = await awaitable
    except Exception as e:
        logger.exception("best_effort_failed step=%s", step)
        return Outcome.soft_failure(step, f"{type(e).__name__}: {e}")
    return Outcome.success(step, value)
