"""Head Dispatcher: tests for the single engine invocation.

Tests cover:
    - Exactly one engine call carrying the full ordered head list
    - Engine errors and timeouts become DispatchError (no retry)
    - Incomplete or malformed engine output is a total failure
"""

import pytest

from headcall.core.context_builder import ContextBuilder
from headcall.core.errors import DispatchError
from headcall.core.head_dispatcher import HeadDispatcher
from headcall.core.schema_analyzer import active_heads, parse_tools
from headcall.llm.engine_client import EngineTimeout
from headcall.models.head import HeadKind

from fakes import FakeEngine, MOVE_TOOL


def _context():
    tools = parse_tools([MOVE_TOOL])
    return ContextBuilder().build([{"role": "user", "content": "go"}], tools, [], []), tools


def test_single_engine_call_with_all_heads():
    ctx, tools = _context()
    engine = FakeEngine(heads={"function": "move", "arg1": "down"})
    raw = HeadDispatcher(engine).dispatch(ctx, active_heads(tools, include_content=True))
    assert len(engine.calls) == 1
    assert engine.calls[0]["heads"] == ["content", "function", "arg1"]
    assert raw == {"content": "<|null|>", "function": "move", "arg1": "down"}


def test_engine_error_is_dispatch_error_without_retry():
    ctx, tools = _context()
    boom = RuntimeError("engine down")
    engine = FakeEngine(error=boom)
    with pytest.raises(DispatchError) as exc:
        HeadDispatcher(engine).dispatch(ctx, active_heads(tools))
    assert exc.value.cause is boom
    assert exc.value.partial == {}
    assert len(engine.calls) == 1


def test_timeout_is_dispatch_error():
    ctx, tools = _context()
    engine = FakeEngine(error=EngineTimeout("slow"))
    with pytest.raises(DispatchError):
        HeadDispatcher(engine).dispatch(ctx, active_heads(tools))


def test_missing_head_is_total_failure():
    ctx, tools = _context()
    engine = FakeEngine(heads={"function": "move"}, fill_null=False)
    with pytest.raises(DispatchError):
        HeadDispatcher(engine).dispatch(ctx, active_heads(tools))


def test_non_string_head_is_total_failure():
    ctx, tools = _context()
    engine = FakeEngine(heads={"function": "move", "arg1": 3})
    with pytest.raises(DispatchError):
        HeadDispatcher(engine).dispatch(ctx, active_heads(tools))


def test_unrequested_heads_dropped():
    ctx, tools = _context()
    engine = FakeEngine(heads={"function": "move", "arg1": "up", "arg5": "x"})
    raw = HeadDispatcher(engine).dispatch(ctx, [HeadKind.FUNCTION, HeadKind.ARG1])
    assert "arg5" not in raw


def test_prompt_is_rendered_context():
    ctx, tools = _context()
    engine = FakeEngine(heads={"function": "move", "arg1": "up"})
    HeadDispatcher(engine).dispatch(ctx, active_heads(tools))
    assert ctx.tools_text in engine.calls[0]["prompt"]


def test_empty_head_list_rejected():
    ctx, _ = _context()
    engine = FakeEngine()
    with pytest.raises(DispatchError):
        HeadDispatcher(engine).dispatch(ctx, [])
    assert engine.calls == []
