# Role: Single chat message schema for the decode context. Received on the wire as {role, content}
# and rendered into the shared prompt prefix that every head conditions on.

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

Role = Literal["user", "assistant", "system"]


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str
