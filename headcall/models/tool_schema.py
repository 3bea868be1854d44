# Role: Typed view of one callable tool. Parameter order is decode order: parameters[i] is filled by
# head arg(i+1). to_openai() rebuilds the OpenAI function-calling shape the model was tuned on.

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ToolParameter(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: str = "string"
    description: str = ""
    enum: Optional[List[Any]] = None
    required: bool = False

    def to_property(self) -> Dict[str, Any]:
        prop: Dict[str, Any] = {"type": self.type}
        if self.enum is not None:
            prop["enum"] = list(self.enum)
        if self.description:
            prop["description"] = self.description
        return prop


class ToolSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    parameters: List[ToolParameter] = Field(default_factory=list)

    def to_openai(self) -> Dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": {p.name: p.to_property() for p in self.parameters},
                    "required": [p.name for p in self.parameters if p.required],
                },
            },
        }
