# Role: Issues the single engine invocation for a request and returns one raw string per active head.
# All-or-nothing: any engine failure or missing head is a DispatchError. No retries here; the caller's next
# tick is the retry policy, so a slow engine is never paid for twice by one request.

from __future__ import annotations

from typing import Dict, Optional, Sequence

import headcall.config as config
from headcall.core.errors import DispatchError
from headcall.llm.engine_client import EngineClient
from headcall.models.context import DecodeContext
from headcall.models.head import HeadKind
from headcall.prompts.decode_prompt import render_prompt


class HeadDispatcher:
    def __init__(self, engine: Optional[EngineClient] = None) -> None:
        # Key line: the engine is injectable for testing/mocking.
        self.engine = engine or EngineClient()

    def dispatch(self, context: DecodeContext, heads: Sequence[HeadKind]) -> Dict[str, str]:
        # 1) Render the shared prefix once
        # 2) One engine call with the full ordered head list
        # 3) Verify every requested head came back as a string; drop anything extra
        if not heads:
            raise DispatchError("No heads to dispatch")

        prompt = render_prompt(context)

        try:
            out = self.engine.generate_heads(prompt, list(heads))
        except Exception as e:
            raise DispatchError(f"Engine dispatch failed: {e}", cause=e) from e

        if not isinstance(out, dict):
            raise DispatchError(f"Engine returned {type(out).__name__}, expected a head mapping")

        raw: Dict[str, str] = {}
        missing = []
        for head in heads:
            value = out.get(head.value)
            if not isinstance(value, str):
                missing.append(head.value)
                continue
            raw[head.value] = value

        if missing:
            raise DispatchError(f"Engine output incomplete; missing heads {missing}")

        if config.DEBUG:
            print("\n--- HEAD DISPATCH ---")
            print("HEADS:", [h.value for h in heads])
            print("RAW:", raw)

        return raw
