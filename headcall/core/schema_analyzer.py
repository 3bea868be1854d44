# Role: Derives the minimal head set for one request from that request's own tool list.
# Decoding a fixed maximal head count is correct but slow; this picks exactly the heads the widest tool needs.

from __future__ import annotations

from typing import Any, Iterable, List, Sequence

import headcall.config as config
from headcall.core.errors import SchemaError
from headcall.models.head import HeadKind, arg_head
from headcall.models.tool_schema import ToolParameter, ToolSchema


def parse_tools(raw_tools: Iterable[Any]) -> List[ToolSchema]:
    # 1) Unwrap {"type": "function", "function": {...}} or accept a bare function object
    # 2) Read properties in declaration order (that order is the arg-head order)
    # 3) Reject anything the assembler could not map back by name
    tools: List[ToolSchema] = []
    seen: set = set()

    for index, raw in enumerate(raw_tools or []):
        if isinstance(raw, ToolSchema):
            tool = raw
        else:
            tool = _parse_tool(raw, index)

        if tool.name in seen:
            raise SchemaError(f"Duplicate tool name: {tool.name!r}")
        seen.add(tool.name)
        tools.append(tool)

    return tools


def _parse_tool(raw: Any, index: int) -> ToolSchema:
    if not isinstance(raw, dict):
        raise SchemaError(f"Tool #{index} must be an object")

    fn = raw["function"] if "function" in raw else raw
    if not isinstance(fn, dict):
        raise SchemaError(f"Tool #{index} has a non-object 'function' entry")

    name = fn.get("name")
    if not isinstance(name, str) or not name.strip():
        raise SchemaError(f"Tool #{index} has no name")
    name = name.strip()

    params_schema = fn.get("parameters") or {}
    if not isinstance(params_schema, dict):
        raise SchemaError(f"Tool '{name}': 'parameters' must be an object")

    properties = params_schema.get("properties") or {}
    if not isinstance(properties, dict):
        raise SchemaError(f"Tool '{name}': 'properties' must be an object")

    required = params_schema.get("required") or []
    if not isinstance(required, list) or not all(isinstance(r, str) for r in required):
        raise SchemaError(f"Tool '{name}': 'required' must be a list of names")

    unknown = [r for r in required if r not in properties]
    if unknown:
        raise SchemaError(f"Tool '{name}': required names undeclared properties {unknown}")

    parameters = [_parse_parameter(name, pname, pschema, pname in required) for pname, pschema in properties.items()]

    description = fn.get("description") or ""
    return ToolSchema(name=name, description=str(description), parameters=parameters)


def _parse_parameter(tool_name: str, name: str, schema: Any, required: bool) -> ToolParameter:
    if not isinstance(schema, dict):
        raise SchemaError(f"Tool '{tool_name}': property '{name}' must be an object")

    enum = schema.get("enum")
    if enum is not None and not isinstance(enum, list):
        raise SchemaError(f"Tool '{tool_name}': enum of '{name}' must be a list")
    # Key line: arguments are int, float or str, so an enum option of any other type (bool included)
    # could never be returned as declared.
    if enum is not None and any(isinstance(o, bool) or not isinstance(o, (int, float, str)) for o in enum):
        raise SchemaError(f"Tool '{tool_name}': enum of '{name}' may only hold strings and numbers")

    ptype = schema.get("type") or "string"
    if isinstance(ptype, list):
        # JSON schema allows ["string", "null"]; keep the first concrete type for the prompt.
        ptype = next((t for t in ptype if t != "null"), "string")

    return ToolParameter(
        name=name,
        type=str(ptype),
        description=str(schema.get("description") or ""),
        enum=enum,
        required=required,
    )


def max_param_count(tools: Sequence[ToolSchema]) -> int:
    if not tools:
        return 0
    return min(config.MAX_ARG_HEADS, max(len(t.parameters) for t in tools))


def active_heads(tools: Sequence[Any], include_content: bool = False) -> List[HeadKind]:
    """
    Ordered head set for one request: [content?] + [function] + [arg1..argN].

    N is the widest tool's parameter count, capped at 6. The order is the order heads are
    requested from the engine and the order the assembler maps arguments back.
    """
    parsed = [t if isinstance(t, ToolSchema) else _parse_tool(t, i) for i, t in enumerate(tools)]

    heads: List[HeadKind] = []
    if include_content:
        heads.append(HeadKind.CONTENT)
    heads.append(HeadKind.FUNCTION)
    heads.extend(arg_head(i) for i in range(1, max_param_count(parsed) + 1))
    return heads
