from __future__ import annotations

import os
from typing import Optional

import httpx

from .base import GatewayError, LLMGateway, Prompt, configured_timeout

EMPTY_COMPLETION = "No response from AI"


class MistralGateway(LLMGateway):
    BASE_URL = "https://api.mistral.ai/v1/chat/completions"
    DEFAULT_MODEL = "mistral-medium"

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model: Optional[str] = None,
        timeout: float = 10.0,
        temperature: float = 0.7,
        max_tokens: int = 800,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key or os.getenv("MISTRAL_API_KEY")
        if not self.api_key:
            raise RuntimeError("MISTRAL_API_KEY is required for MistralGateway")
        self.model = model or os.getenv("MISTRAL_MODEL", self.DEFAULT_MODEL)
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._transport = transport

    def complete(self, prompt: Prompt) -> str:
        payload = {
            "model": self.model,
            "messages": prompt.as_messages(),
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            resp = client.post(self.BASE_URL, json=payload, headers=headers)
            if resp.status_code >= 300:
                raise GatewayError(f"API error: {resp.status_code}")
            try:
                data = resp.json()
            except ValueError as exc:
                raise GatewayError("Malformed completion payload") from exc
        return self._content(data)

    @staticmethod
    def _content(data: dict) -> str:
        choices = data.get("choices") if isinstance(data, dict) else None
        if not choices:
            return EMPTY_COMPLETION
        message = (choices[0] or {}).get("message") or {}
        return message.get("content") or EMPTY_COMPLETION


def resolve_gateway(api_key: Optional[str] = None) -> Optional[LLMGateway]:
    api_key = api_key or os.getenv("MISTRAL_API_KEY")
    if not api_key:
        return None
    return MistralGateway(api_key=api_key, timeout=configured_timeout())
