# Role: Local developer CLI against a running function-call service. Sends one-off queries, probes health,
# and drives the LoopController for N ticks to watch gating, fallbacks and latency in the terminal.

from __future__ import annotations

import json
import os
import threading
from collections import deque
from typing import Any, Dict, List

import requests

import headcall.config
headcall.config.load_env()

from headcall.client.latency import LatencyTracker
from headcall.client.loop_controller import CallFailure, Decision, LoopController, Observation
from headcall.client.service_client import FunctionCallClient

DEMO_TOOLS: List[Dict[str, Any]] = [
    {
        "type": "function",
        "function": {
            "name": "move",
            "description": "Move one cell on the grid.",
            "parameters": {
                "type": "object",
                "properties": {
                    "direction": {"type": "string", "enum": ["up", "down", "left", "right", "stay"]},
                    "steps": {"type": "integer", "description": "Cells to move"},
                },
                "required": ["direction"],
            },
        },
    },
    {
        "type": "function",
        "function": {"name": "wait", "description": "Do nothing this tick.", "parameters": {"type": "object", "properties": {}}},
    },
]


def _load_tools() -> List[Dict[str, Any]]:
    path = os.getenv("HEADCALL_TOOLS_FILE")
    if not path:
        return DEMO_TOOLS
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _format_action(decision: Decision) -> str:
    args = ", ".join(f"{k}={v}" for k, v in decision.args.items())
    return f"{decision.function}({args})"


def _run_loop(client: FunctionCallClient, tools: List[Dict[str, Any]], query: str, ticks: int) -> None:
    # 1) Keep a bounded action history, fed back as context on the next request
    # 2) Fallback to "wait" on any failure so every completed request yields an action
    # 3) Print each decision and the rolling latency average
    history: deque = deque(maxlen=headcall.config.MAX_HISTORY)
    latency = LatencyTracker()

    def observe() -> Observation:
        return Observation(query=query, environment=[], history=list(history))

    def on_decision(decision: Decision) -> None:
        history.append(_format_action(decision))
        latency.record(decision.ms)
        avg = latency.average_ms
        avg_text = f"{avg:.1f}ms" if avg is not None else "n/a"
        print(f"[{decision.source}] {_format_action(decision)}  avg={avg_text}")

    def fallback(observation: Observation, failure: CallFailure) -> Decision:
        print(f"fallback ({failure.reason})")
        return Decision(function="wait", args={}, source="fallback")

    controller = LoopController(client, observe, on_decision, fallback, tools)
    stop = threading.Event()
    controller.run(stop, max_ticks=ticks)
    controller.wait(timeout=client.timeout)


def main() -> None:
    # 1) Create the client and load tools
    # 2) Route commands or free text -> service -> print result
    print("Function-Call CLI")
    print("Commands: /health, /tools, /loop N <query>, /exit")
    print("-" * 50)

    client = FunctionCallClient()
    tools = _load_tools()
    print(f"service: {client.base_url}  tools: {[t.get('function', t).get('name') for t in tools]}")

    while True:
        try:
            line = input("\nQuery: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not line:
            continue

        cmd = line.lower()

        if cmd in {"/exit", "exit", "quit", "/quit"}:
            print("Bye!")
            return

        if cmd == "/health":
            print(client.health())
            continue

        if cmd == "/tools":
            print(json.dumps(tools, indent=2))
            continue

        if cmd.startswith("/loop"):
            parts = line.split(maxsplit=2)
            try:
                ticks = int(parts[1]) if len(parts) > 1 else 10
            except ValueError:
                print("Usage: /loop N <query>")
                continue
            query = parts[2] if len(parts) > 2 else "Decide the next action."
            _run_loop(client, tools, query, ticks)
            continue

        try:
            result = client.call(line, tools=tools)
        except requests.RequestException as e:
            print(f"Request failed: {e}")
            continue

        status = "ok" if result.get("success") else f"FAILED ({(result.get('error') or {}).get('type')})"
        print(f"{status}: {result.get('function')}({result.get('args')})")
        print(f"heads: {result.get('heads')}")
        print(f"latency: server {result.get('latency_ms')}ms / round trip {result.get('ms')}ms")


if __name__ == "__main__":
    main()
