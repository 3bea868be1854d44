# Role: Caller-side capability object for the function-call service: health() and call().
# Transport errors propagate as requests.RequestException; the loop controller turns them into fallbacks.

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional, Sequence

import requests

import headcall.config as config


class FunctionCallClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = (base_url or config.SERVICE_URL).rstrip("/")
        # Key line: transport timeout sits just above the server's own dispatch timeout.
        self.timeout = (config.DISPATCH_TIMEOUT_SECONDS + 2.0) if timeout is None else timeout
        self.session = session or requests.Session()

    def health(self) -> Dict[str, bool]:
        # Ready when the model reports loaded, or the service says "ok". Never hangs past the health timeout.
        try:
            r = self.session.get(f"{self.base_url}/health", timeout=config.HEALTH_TIMEOUT_SECONDS)
            if r.status_code != 200:
                return {"ok": False}
            body = r.json()
        except (requests.RequestException, ValueError):
            return {"ok": False}

        if not isinstance(body, dict):
            return {"ok": False}
        return {"ok": body.get("loaded") is True or body.get("status") == "ok"}

    def call(
        self,
        query: str,
        env: Optional[Sequence[str]] = None,
        history: Optional[Sequence[str]] = None,
        tools: Optional[Sequence[Dict[str, Any]]] = None,
        include_content: bool = False,
    ) -> Dict[str, Any]:
        # 1) Build the wire body (history capped before sending)
        # 2) POST and time the full round trip
        # 3) Return the envelope plus client-side "ms"
        history = list(history or [])[-config.MAX_HISTORY :]
        body = {
            "messages": self.build_messages(query),
            "tools": list(tools or []),
            "environment": list(env or []),
            "history": history,
            "include_content_head": include_content,
        }

        started = time.perf_counter()
        r = self.session.post(f"{self.base_url}/v1/function_call", json=body, timeout=self.timeout)
        r.raise_for_status()
        result = r.json()
        if not isinstance(result, dict):
            raise requests.exceptions.InvalidJSONError(
                f"Service returned {type(result).__name__}, expected an envelope object", response=r
            )
        result["ms"] = round((time.perf_counter() - started) * 1000.0, 3)
        return result

    @staticmethod
    def build_messages(query: str) -> List[Dict[str, str]]:
        return [{"role": "user", "content": query}]
