from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Iterable, Mapping, Optional

from pfandfinder.domain.models import Dataset, Insight
from pfandfinder.providers.llm.base import LLMGateway, configured_timeout

from .fallback import fallback_insight
from .prompting import build_prompt

NO_DATASETS_MESSAGE = "Select datasets to generate AI insights"


class InsightService:
    """Ask the language model about the active datasets, degrading to a local insight.

    The gateway call runs on a worker thread and is raced against ``timeout``.
    If the timer wins the worker is left to finish on its own; its result is
    discarded.
    """

    def __init__(self, gateway: Optional[LLMGateway] = None, *, timeout: Optional[float] = None) -> None:
        self.gateway = gateway
        self.timeout = configured_timeout() if timeout is None else timeout

    def generate_insight(self, active_ids: Iterable[str], datasets: Mapping[str, Dataset]) -> Insight:
        active = [dataset_id.lower() for dataset_id in active_ids]
        if not active:
            return Insight(text=NO_DATASETS_MESSAGE, is_fallback=True)

        if self.gateway is None:
            print("[insight] WARNING: Mistral API key not found, returning fallback response")
            return self._fallback(active, datasets)

        prompt = build_prompt(active, datasets)
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="insight-gateway")
        future = executor.submit(self.gateway.complete, prompt)
        try:
            text = future.result(timeout=self.timeout)
        except FutureTimeout:
            print(f"[insight] WARNING: gateway timed out after {self.timeout:.1f}s; using fallback")
            return self._fallback(active, datasets)
        except Exception as exc:
            print(f"[insight] ERROR: gateway call failed ({exc}); using fallback")
            return self._fallback(active, datasets)
        finally:
            executor.shutdown(wait=False)
        return Insight(text=text, is_fallback=False)

    @staticmethod
    def _fallback(active_ids: list[str], datasets: Mapping[str, Dataset]) -> Insight:
        return Insight(text=fallback_insight(active_ids, datasets), is_fallback=True)
