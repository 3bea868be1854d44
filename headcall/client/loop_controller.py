# Role: Caller-side driver for the function-call service. Decides WHEN to issue a decode request:
# - a single-slot gate keeps at most one request in flight (a busy tick is dropped, never queued)
# - requests run on a worker thread so the consumer's render/update loop never waits on a decode
# - every failure (success=false, transport error, malformed reply) goes through the caller's fallback, so the
#   consumer gets a decision on every completed request

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

import requests

import headcall.config as config
from headcall.client.service_client import FunctionCallClient


@dataclass(frozen=True)
class Observation:
    query: str
    environment: List[str] = field(default_factory=list)
    history: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CallFailure:
    reason: str
    result: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class Decision:
    function: str
    args: Dict[str, Any]
    source: str  # "model" or "fallback"
    ms: Optional[float] = None
    heads: Dict[str, str] = field(default_factory=dict)


ObserveFn = Callable[[], Observation]
DecisionFn = Callable[[Decision], None]
FallbackFn = Callable[[Observation, CallFailure], Decision]


class LoopController:
    def __init__(
        self,
        client: FunctionCallClient,
        observe: ObserveFn,
        on_decision: DecisionFn,
        fallback: FallbackFn,
        tools: Sequence[Dict[str, Any]],
        include_content: bool = False,
        hz: float = 10.0,
    ) -> None:
        if hz <= 0:
            raise ValueError("hz must be > 0")

        self.client = client
        self.observe = observe
        self.on_decision = on_decision
        self.fallback = fallback
        self.tools = list(tools)
        self.include_content = include_content
        self.period = 1.0 / hz

        # Key line: capacity-1 gate. acquire(blocking=False) is the compare-and-set.
        self._gate = threading.Lock()
        self._epoch = 0
        self._epoch_lock = threading.Lock()
        self._worker: Optional[threading.Thread] = None

    @property
    def in_flight(self) -> bool:
        return self._gate.locked()

    def tick(self) -> bool:
        """Start one request unless one is already in flight. Returns True if a request was started."""
        if not self._gate.acquire(blocking=False):
            return False

        try:
            observation = self.observe()
            with self._epoch_lock:
                epoch = self._epoch
            worker = threading.Thread(target=self._run_call, args=(observation, epoch), daemon=True)
            self._worker = worker
            worker.start()
        except BaseException:
            # Worker never started, so it cannot release the gate.
            self._gate.release()
            raise

        return True

    def invalidate(self) -> None:
        # Role: mark in-flight work as superseded (e.g., world state moved on); its result is discarded.
        with self._epoch_lock:
            self._epoch += 1

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Join the current worker, if any. Returns True when nothing is in flight afterwards."""
        worker = self._worker
        if worker is not None:
            worker.join(timeout)
        return not self.in_flight

    def run(self, stop: threading.Event, max_ticks: Optional[int] = None) -> int:
        # Fixed cadence: one tick per period, independent of how long decodes take.
        ticks = 0
        next_at = time.monotonic()
        while not stop.is_set():
            if max_ticks is not None and ticks >= max_ticks:
                break
            self.tick()
            ticks += 1
            # Key line: after a stall, resume cadence from now instead of bursting to catch up.
            next_at = max(next_at, time.monotonic()) + self.period
            stop.wait(max(0.0, next_at - time.monotonic()))
        return ticks

    def _run_call(self, observation: Observation, epoch: int) -> None:
        # 1) Call the service (transport errors become a CallFailure)
        # 2) Drop the result if it was superseded while in flight
        # 3) Deliver the model decision, or the fallback decision on any failure
        # 4) Release the gate exactly once, whatever happened
        try:
            decision = self._decide(observation)

            with self._epoch_lock:
                stale = epoch != self._epoch
            if stale:
                if config.DEBUG:
                    print("LOOP: discarded superseded result")
                return

            self.on_decision(decision)
        finally:
            self._gate.release()

    def _decide(self, observation: Observation) -> Decision:
        try:
            result = self.client.call(
                observation.query,
                observation.environment,
                observation.history[-config.MAX_HISTORY :],
                self.tools,
                self.include_content,
            )
        except requests.RequestException as e:
            if config.DEBUG:
                print(f"LOOP: transport error -> fallback ({e})")
            return self.fallback(observation, CallFailure(reason=f"transport: {e}"))
        except Exception as e:
            # Key line: a broken client must still leave the consumer with a decision.
            if config.DEBUG:
                print(f"LOOP: client error -> fallback ({e!r})")
            return self.fallback(observation, CallFailure(reason=f"client: {type(e).__name__}: {e}"))

        if not isinstance(result, dict):
            return self.fallback(observation, CallFailure(reason="malformed envelope"))

        if not result.get("success"):
            error = result.get("error") or {}
            reason = error.get("type") or "unsuccessful"
            if config.DEBUG:
                print(f"LOOP: service failure {reason} -> fallback")
            return self.fallback(observation, CallFailure(reason=reason, result=result))

        return Decision(
            function=result.get("function", ""),
            args=dict(result.get("args") or {}),
            source="model",
            ms=result.get("ms"),
            heads=dict(result.get("heads") or {}),
        )
