# Role: Result contracts. FunctionCall is the structured payload; CallResult is the response envelope that
# always carries raw heads next to it, so consumers can degrade to heads when assembly fails.

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field

ArgValue = Union[int, float, str]


class CallStage(str, Enum):
    BUILDING = "building"
    DISPATCHING = "dispatching"
    ASSEMBLING = "assembling"
    DONE = "done"
    FAILED = "failed"


class FunctionCall(BaseModel):
    function: str
    args: Dict[str, ArgValue] = Field(default_factory=dict)
    content: Optional[str] = None


class CallResult(BaseModel):
    success: bool
    function: str = ""
    args: Dict[str, ArgValue] = Field(default_factory=dict)
    heads: Dict[str, str] = Field(default_factory=dict)
    latency_ms: float = 0.0

    # Diagnostics beyond the core wire fields.
    stage: CallStage = CallStage.DONE
    error: Optional[Dict[str, str]] = None
    content: Optional[str] = None

    @property
    def call(self) -> Optional[FunctionCall]:
        if not self.success:
            return None
        return FunctionCall(function=self.function, args=self.args, content=self.content)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
