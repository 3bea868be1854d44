# Role: Orchestrator for one function-call request. Runs the per-request state machine
# BUILDING -> DISPATCHING -> ASSEMBLING -> DONE (or FAILED from any stage) and always returns a CallResult
# envelope: typed failures become success=false with raw heads kept wherever they exist.

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

import headcall.config as config
from headcall.core.context_builder import ContextBuilder
from headcall.core.errors import AssemblyError, DispatchError, SchemaError
from headcall.core.head_dispatcher import HeadDispatcher
from headcall.core.result_assembler import ResultAssembler
from headcall.core.schema_analyzer import active_heads, parse_tools
from headcall.llm.engine_client import EngineClient
from headcall.models.call_result import CallResult, CallStage


@dataclass(frozen=True)
class HealthStatus:
    loaded: bool
    status: str


class CallOrchestrator:
    def __init__(
        self,
        engine: Optional[EngineClient] = None,
        context_builder: Optional[ContextBuilder] = None,
        dispatcher: Optional[HeadDispatcher] = None,
        assembler: Optional[ResultAssembler] = None,
    ) -> None:
        # Key line: dependencies are injectable for testing/mocking. Nothing here is per-request state,
        # so one instance can serve concurrent requests.
        self.engine = engine or EngineClient()
        self.context_builder = context_builder or ContextBuilder()
        self.dispatcher = dispatcher or HeadDispatcher(self.engine)
        self.assembler = assembler or ResultAssembler()

    def handle(
        self,
        messages: Iterable[Any],
        tools: Sequence[Any],
        environment: Optional[Iterable[str]] = None,
        history: Optional[Sequence[str]] = None,
        include_content: bool = False,
    ) -> CallResult:
        # 1) BUILDING: parse tools, pick heads, build the shared context (fail fast, no engine call)
        # 2) DISPATCHING: one engine call for all heads; latency clock starts here
        # 3) ASSEMBLING: coerce heads into a FunctionCall; on failure keep raw heads for fallback use
        # 4) DONE: full envelope with latency
        stage = CallStage.BUILDING
        try:
            parsed = parse_tools(tools)
            if not parsed:
                raise SchemaError("Tool list is empty")
            heads = active_heads(parsed, include_content=include_content)
            context = self.context_builder.build(messages, parsed, environment, history)
        except SchemaError as e:
            return self._failed(stage, e, heads={}, latency_ms=0.0)

        stage = CallStage.DISPATCHING
        started = time.perf_counter()
        try:
            raw = self.dispatcher.dispatch(context, heads)
        except DispatchError as e:
            return self._failed(stage, e, heads={}, latency_ms=self._elapsed_ms(started))

        stage = CallStage.ASSEMBLING
        try:
            call = self.assembler.assemble(raw, parsed)
        except AssemblyError as e:
            return self._failed(
                stage,
                e,
                heads=raw,
                latency_ms=self._elapsed_ms(started),
                function=(raw.get("function") or "").strip(),
            )

        result = CallResult(
            success=True,
            function=call.function,
            args=call.args,
            heads=raw,
            latency_ms=self._elapsed_ms(started),
            stage=CallStage.DONE,
            content=call.content,
        )

        if config.DEBUG:
            print(f"CALL DONE: {result.function}({result.args}) in {result.latency_ms}ms")

        return result

    def health(self) -> HealthStatus:
        # Role: liveness independent of the decode path. Never decodes; bounded wait inside is_loaded().
        try:
            loaded = bool(self.engine.is_loaded(timeout=config.HEALTH_TIMEOUT_SECONDS))
        except Exception as e:
            if config.DEBUG:
                print(f"HEALTH: engine probe failed: {e}")
            return HealthStatus(loaded=False, status="unavailable")

        return HealthStatus(loaded=loaded, status="ok" if loaded else "loading")

    def _failed(
        self,
        stage: CallStage,
        error: Exception,
        heads: dict,
        latency_ms: float,
        function: str = "",
    ) -> CallResult:
        if config.DEBUG:
            print(f"CALL FAILED at {stage.value}: {error}")

        return CallResult(
            success=False,
            function=function,
            args={},
            heads=dict(heads),
            latency_ms=latency_ms,
            stage=CallStage.FAILED,
            error={**error.to_dict(), "stage": stage.value},
        )

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return round((time.perf_counter() - started) * 1000.0, 3)
