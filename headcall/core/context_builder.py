# Role: Assembles the shared DecodeContext (messages, serialized tools, environment, bounded history).
# Context length drives decode latency, so history is always cut to the most recent entries.

from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence

from pydantic import ValidationError

import headcall.config as config
from headcall.core.errors import SchemaError
from headcall.models.context import DecodeContext
from headcall.models.message import Message
from headcall.models.tool_schema import ToolSchema
from headcall.prompts.decode_prompt import serialize_tools


class ContextBuilder:
    def __init__(self, max_history: Optional[int] = None) -> None:
        self._max_history = config.MAX_HISTORY if max_history is None else max_history

    def build(
        self,
        messages: Iterable[Any],
        tools: Sequence[ToolSchema],
        environment: Optional[Iterable[str]] = None,
        history: Optional[Sequence[str]] = None,
    ) -> DecodeContext:
        # 1) Normalize messages (dicts from the wire or Message objects)
        # 2) Keep only the last N history entries (oldest dropped, never rejected)
        # 3) Serialize tools in declaration order
        try:
            msgs = tuple(m if isinstance(m, Message) else Message.model_validate(m) for m in (messages or []))
        except ValidationError as e:
            raise SchemaError(f"Malformed message: {e.errors()[0].get('msg', e)}") from e

        history = list(history or [])
        if self._max_history <= 0:
            history = []
        elif len(history) > self._max_history:
            history = history[-self._max_history :]

        return DecodeContext(
            messages=msgs,
            tools_text=serialize_tools(tools),
            environment=tuple(str(e) for e in (environment or [])),
            history=tuple(str(h) for h in history),
        )
