# Role: Minimal wrapper around the batch-inference engine's HTTP API. Centralizes the engine URL, token
# budgets, timeouts and error handling, so the rest of the code calls two methods: generate_heads() and is_loaded().

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import requests

import headcall.config as config
from headcall.models.head import HeadKind


class EngineError(RuntimeError):
    pass


class EngineTimeout(EngineError):
    pass


class EngineClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        temperature: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        # Key lines:
        # - Location and timeouts come from config/env (no hardcoded hosts in call sites).
        # - A shared Session keeps the TCP connection warm between ticks.
        self.base_url = (base_url or config.ENGINE_URL).rstrip("/")
        self.timeout = config.DISPATCH_TIMEOUT_SECONDS if timeout is None else timeout
        self.temperature = config.TEMPERATURE if temperature is None else temperature
        self.session = session or requests.Session()

    def head_budget(self, head: HeadKind) -> int:
        if head == HeadKind.CONTENT:
            return config.CONTENT_HEAD_MAX_TOKENS
        return config.ARG_HEAD_MAX_TOKENS

    def generate_heads(self, prompt: str, heads: Sequence[HeadKind]) -> Dict[str, Any]:
        # 1) Validate inputs
        # 2) One POST carrying every head (the engine shares the encoded prefix across heads)
        # 3) Return the raw per-head mapping; completeness is checked by the dispatcher
        if not prompt or not prompt.strip():
            raise ValueError("Prompt must be non-empty.")
        if not heads:
            raise ValueError("At least one head is required.")

        payload = {
            "prompt": prompt,
            "heads": [{"name": h.value, "max_new_tokens": self.head_budget(h)} for h in heads],
            "temperature": self.temperature,
        }

        try:
            r = self.session.post(f"{self.base_url}/generate_heads", json=payload, timeout=self.timeout)
            r.raise_for_status()
            body = r.json()
        except requests.Timeout as e:
            raise EngineTimeout(f"Engine timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise EngineError(f"Engine call failed: {e}") from e
        except ValueError as e:
            raise EngineError(f"Engine returned non-JSON body: {e}") from e

        out = body.get("heads") if isinstance(body, dict) else None
        if not isinstance(out, dict):
            raise EngineError("Engine response has no 'heads' object.")

        return out

    def is_loaded(self, timeout: Optional[float] = None) -> bool:
        # Key line: never hangs; a short bounded wait and any failure means "not loaded".
        wait = config.HEALTH_TIMEOUT_SECONDS if timeout is None else timeout
        try:
            r = self.session.get(f"{self.base_url}/health", timeout=wait)
            if r.status_code != 200:
                return False
            body = r.json()
        except (requests.RequestException, ValueError):
            return False

        return isinstance(body, dict) and body.get("loaded") is True
