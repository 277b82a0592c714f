from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Protocol

DEFAULT_TIMEOUT_S = 10.0


def configured_timeout() -> float:
    """Read ``INSIGHT_TIMEOUT_S``; a missing or unusable value gives the default."""
    raw = os.getenv("INSIGHT_TIMEOUT_S")
    if not raw:
        return DEFAULT_TIMEOUT_S
    try:
        value = float(raw)
    except ValueError:
        value = math.nan
    if not math.isfinite(value) or value <= 0:
        print(f"[llm] WARNING: invalid INSIGHT_TIMEOUT_S={raw!r}; using {DEFAULT_TIMEOUT_S:.0f}s")
        return DEFAULT_TIMEOUT_S
    return value


@dataclass(frozen=True)
class Prompt:
    system: str
    user: str

    def as_messages(self) -> list[dict]:
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]


class GatewayError(RuntimeError):
    """Raised when the language model cannot produce a completion."""


class LLMGateway(Protocol):
    """Contract for language model backends."""

    def complete(self, prompt: Prompt) -> str:
        """Return the completion text for ``prompt``.

        Implementations raise ``GatewayError`` (or an ``httpx.HTTPError``) on
        non-2xx responses, transport failures and malformed payloads. Timeouts
        are enforced by the caller.
        """
        raise NotImplementedError
