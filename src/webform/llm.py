"""Chat-completion client for the reformatting step (Ollama or OpenAI)."""

from __future__ import annotations

import logging
import os
from typing import List, Optional

import httpx

logger = logging.getLogger(__name__)


class LLMError(RuntimeError):
    pass


class LLMClient:
    def __init__(
        self,
        backend: str = "ollama",
        model: Optional[str] = None,
        ollama_host: str = "http://localhost:11434",
        api_key: Optional[str] = None,
        temperature: float = 0.0,
        timeout: float = 120.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.backend = backend
        self.model = model or "mixtral:8x7b"
        self.ollama_host = ollama_host
        self.api_key = api_key
        self.temperature = temperature
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, settings) -> "LLMClient":
        return cls(
            backend=settings.backend,
            model=settings.model,
            ollama_host=settings.ollama_host,
            api_key=settings.api_key,
            temperature=settings.temperature,
            timeout=settings.timeout,
        )

    def complete(self, prompt: str) -> str:
        messages = [{"role": "user", "content": prompt}]
        try:
            return self.chat(messages)
        except LLMError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise LLMError(f"{self.backend} request failed: {exc}") from exc

    def chat(self, messages: List[dict]) -> str:
        if self.backend == "ollama":
            return self._chat_ollama(messages)
        if self.backend == "openai":
            return self._chat_openai(messages)
        raise LLMError(f"Unsupported LLM backend: {self.backend}")

    def _chat_ollama(self, messages: List[dict]) -> str:
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            # Non-streaming so the reply is a single JSON object.
            payload = {
                "model": self.model,
                "stream": False,
                "messages": messages,
                "options": {"temperature": self.temperature},
            }
            resp = client.post(f"{self.ollama_host.rstrip('/')}/api/chat", json=payload)
            resp.raise_for_status()
            return resp.json()["message"]["content"]

    def _chat_openai(self, messages: List[dict]) -> str:
        from openai import OpenAI

        api_key = self.api_key or os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise LLMError(
                "OpenAI API key not found. Set OPENAI_API_KEY or run 'webform config set llm.api_key YOUR_API_KEY'"
            )
        client = OpenAI(api_key=api_key, timeout=self.timeout)
        completion = client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=self.temperature,
        )
        return completion.choices[0].message.content or ""


__all__ = ["LLMClient", "LLMError"]
