# Role: Prompt template for the shared decode prefix. The engine encodes this string once and every head
# branches from it, so it holds the full conditioning: tools, environment facts, recent actions, conversation.

from __future__ import annotations

import json
from typing import List, Sequence

import headcall.config as config
from headcall.models.context import DecodeContext
from headcall.models.tool_schema import ToolSchema


def serialize_tools(tools: Sequence[ToolSchema]) -> str:
    # Key line: compact separators keep the prefix short; declaration order is preserved (no sort_keys).
    return json.dumps([t.to_openai() for t in tools], ensure_ascii=False, separators=(",", ":"))


def render_prompt(context: DecodeContext) -> str:
    # Step 1: system block with the tool schema the model was tuned against.
    lines: List[str] = [
        "<|system|>",
        "You call exactly one function from the list below. Emit each field on its own head.",
        f"Unused argument heads must emit {config.NULL_SENTINEL}.",
        f"Tools: {context.tools_text}",
    ]

    # Step 2: opaque environment hints and bounded action history.
    if context.environment:
        lines.append("Environment:")
        lines.extend(f"- {fact}" for fact in context.environment)

    if context.history:
        lines.append("Recent actions (oldest first):")
        lines.extend(f"- {entry}" for entry in context.history)

    # Step 3: conversation, then the open assistant turn the heads continue from.
    for message in context.messages:
        lines.append(f"<|{message.role}|>")
        lines.append(message.content)

    lines.append("<|assistant|>")
    return "\n".join(lines)
