# Role: Thin HTTP adapter for the decode endpoint. Validates request/response shapes and delegates the whole
# request to CallOrchestrator. Request-level failures come back as success=false with HTTP 200; only a
# malformed body is rejected (422) before the orchestrator runs.

from typing import Any, Dict, List, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from headcall.api import deps
from headcall.models.call_result import ArgValue
from headcall.models.message import Message

router = APIRouter(tags=["function_call"])


class FunctionCallRequest(BaseModel):
    messages: List[Message] = Field(default_factory=list)
    # Key line: entries stay untyped so malformed tools reach parse_tools and come back as SchemaError.
    tools: List[Any] = Field(default_factory=list)
    environment: List[str] = Field(default_factory=list)
    history: List[str] = Field(default_factory=list)
    include_content_head: bool = False


class FunctionCallResponse(BaseModel):
    success: bool
    function: str
    args: Dict[str, ArgValue]
    heads: Dict[str, str]
    latency_ms: float
    stage: str
    error: Optional[Dict[str, str]] = None
    content: Optional[str] = None


@router.post("/v1/function_call", response_model=FunctionCallResponse)
def function_call(req: FunctionCallRequest) -> FunctionCallResponse:
    # 1) Forward the request fields to the orchestrator
    # 2) Return the envelope in a stable schema (raw heads always included)
    result = deps.orchestrator.handle(
        messages=req.messages,
        tools=req.tools,
        environment=req.environment,
        history=req.history,
        include_content=req.include_content_head,
    )
    return FunctionCallResponse(**result.to_wire())
