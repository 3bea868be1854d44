"""Loop Controller: tests for the single-slot gate, fallback contract and superseded results.

Tests cover:
    - A tick while a request is in flight makes no extra call
    - The gate is released exactly once per admitted call, on success and on failure
    - Failures (success=false, transport error, malformed reply) always produce a fallback decision
    - run() keeps its cadence after a stall instead of bursting
    - Invalidated requests are discarded when they resolve
"""

import threading
import time
from unittest.mock import MagicMock

import pytest
import requests

from headcall.client.latency import LatencyTracker
from headcall.client.loop_controller import Decision, LoopController, Observation
from headcall.client.service_client import FunctionCallClient

from fakes import MOVE_TOOL

SUCCESS = {"success": True, "function": "move", "args": {"direction": "down"}, "heads": {"function": "move", "arg1": "down"}, "ms": 12.0}


class BlockingClient:
    """Service-client double whose call() blocks until released."""

    def __init__(self, result=None, error=None):
        self.result = result or SUCCESS
        self.error = error
        self.release = threading.Event()
        self.started = threading.Event()
        self.calls = []

    def call(self, query, env, history, tools, include_content):
        self.calls.append({"query": query, "env": env, "history": history, "tools": tools})
        self.started.set()
        self.release.wait(5)
        if self.error is not None:
            raise self.error
        return dict(self.result)


class CountingGate:
    """Lock wrapper that counts releases."""

    def __init__(self):
        self._lock = threading.Lock()
        self.releases = 0

    def acquire(self, blocking=True):
        return self._lock.acquire(blocking)

    def release(self):
        self.releases += 1
        self._lock.release()

    def locked(self):
        return self._lock.locked()


def _controller(client, history=None):
    decisions = []
    failures = []

    def observe():
        return Observation(query="where now?", environment=["hp=3"], history=list(history or []))

    def fallback(observation, failure):
        failures.append(failure)
        return Decision(function="wait", args={}, source="fallback")

    controller = LoopController(client, observe, decisions.append, fallback, [MOVE_TOOL])
    controller._gate = CountingGate()
    return controller, decisions, failures


def test_second_tick_while_in_flight_is_noop():
    client = BlockingClient()
    controller, decisions, _ = _controller(client)

    assert controller.tick() is True
    assert client.started.wait(2)
    assert controller.in_flight is True
    assert controller.tick() is False
    assert controller.tick() is False
    assert len(client.calls) == 1

    client.release.set()
    assert controller.wait(2) is True
    assert controller._gate.releases == 1
    assert controller.in_flight is False
    assert [d.source for d in decisions] == ["model"]
    assert decisions[0].args == {"direction": "down"}


def test_gate_released_once_after_transport_failure():
    client = BlockingClient(error=requests.ConnectionError("refused"))
    controller, decisions, failures = _controller(client)

    controller.tick()
    client.release.set()
    controller.wait(2)

    assert controller._gate.releases == 1
    assert [d.source for d in decisions] == ["fallback"]
    assert failures[0].reason.startswith("transport")
    assert failures[0].result is None


def test_unsuccessful_result_goes_to_fallback_with_heads():
    failed = {"success": False, "function": "jump", "args": {}, "heads": {"function": "jump"}, "error": {"type": "UnknownFunctionError"}}
    client = BlockingClient(result=failed)
    client.release.set()
    controller, decisions, failures = _controller(client)

    controller.tick()
    controller.wait(2)

    assert decisions[0].function == "wait"
    assert failures[0].reason == "UnknownFunctionError"
    assert failures[0].result["heads"]["function"] == "jump"


def test_next_tick_admitted_after_completion():
    client = BlockingClient()
    client.release.set()
    controller, decisions, _ = _controller(client)

    controller.tick()
    controller.wait(2)
    assert controller.tick() is True
    controller.wait(2)

    assert len(client.calls) == 2
    assert controller._gate.releases == 2
    assert len(decisions) == 2


def test_history_capped_before_call():
    client = BlockingClient()
    client.release.set()
    controller, _, _ = _controller(client, history=[f"a{i}" for i in range(8)])

    controller.tick()
    controller.wait(2)

    assert client.calls[0]["history"] == ["a2", "a3", "a4", "a5", "a6", "a7"]


def test_invalidated_result_is_discarded():
    client = BlockingClient()
    controller, decisions, _ = _controller(client)

    controller.tick()
    client.started.wait(2)
    controller.invalidate()
    client.release.set()
    controller.wait(2)

    assert decisions == []
    assert controller._gate.releases == 1
    assert controller.in_flight is False


def test_run_ticks_at_cadence_without_overlap():
    client = BlockingClient()
    controller, _, _ = _controller(client)
    controller.period = 0.001

    ticks = controller.run(threading.Event(), max_ticks=5)
    client.release.set()
    controller.wait(2)

    assert ticks == 5
    assert len(client.calls) == 1


def test_run_stops_on_event():
    client = BlockingClient()
    client.release.set()
    controller, _, _ = _controller(client)
    stop = threading.Event()
    stop.set()
    assert controller.run(stop) == 0


def test_invalid_rate_rejected():
    with pytest.raises(ValueError):
        LoopController(BlockingClient(), lambda: None, lambda d: None, lambda o, f: None, [], hz=0)


def test_latency_tracker_rolling_average():
    tracker = LatencyTracker(window=2)
    assert tracker.average_ms is None
    tracker.record(10)
    tracker.record(None)
    tracker.record(20)
    tracker.record(40)
    assert tracker.count == 2
    assert tracker.average_ms == 30.0


def test_non_object_envelope_goes_to_fallback():
    session = MagicMock()
    resp = MagicMock()
    resp.status_code = 200
    resp.json.return_value = ["not", "an", "envelope"]
    session.post.return_value = resp
    client = FunctionCallClient(base_url="http://svc.test", timeout=1.0, session=session)
    controller, decisions, failures = _controller(client)

    controller.tick()
    controller.wait(2)

    assert [d.source for d in decisions] == ["fallback"]
    assert failures[0].reason.startswith("transport")
    assert controller._gate.releases == 1


def test_unexpected_client_error_goes_to_fallback():
    client = BlockingClient(error=KeyError("ms"))
    client.release.set()
    controller, decisions, failures = _controller(client)

    controller.tick()
    controller.wait(2)

    assert [d.source for d in decisions] == ["fallback"]
    assert failures[0].reason.startswith("client: KeyError")
    assert controller.in_flight is False


def test_run_does_not_burst_after_stall():
    client = BlockingClient()
    client.release.set()
    stalls = []

    def observe():
        if not stalls:
            stalls.append(True)
            time.sleep(0.3)
        return Observation(query="q")

    controller = LoopController(client, observe, lambda d: None, lambda o, f: None, [MOVE_TOOL], hz=10.0)

    started = time.monotonic()
    controller.run(threading.Event(), max_ticks=3)
    elapsed = time.monotonic() - started
    controller.wait(2)

    # stall (0.3s) plus two full periods after it; catching up would finish right after the stall
    assert elapsed >= 0.45
