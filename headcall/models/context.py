# Role: Shared conditioning input for one request. Every head decodes from the same DecodeContext,
# so it is frozen once built and never shared between requests.

from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, ConfigDict

from headcall.models.message import Message


class DecodeContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    messages: Tuple[Message, ...] = ()
    tools_text: str = "[]"
    environment: Tuple[str, ...] = ()

    # Key line: already truncated to the most recent entries by ContextBuilder.
    history: Tuple[str, ...] = ()
