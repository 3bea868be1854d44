# Role: Turns raw head strings into a typed FunctionCall. It maps arg heads back to parameter names by
# declaration order, drops null-sentinel heads on optional parameters, and refuses hallucinated values
# (unknown function, missing required argument, enum violation) instead of passing them through.

from __future__ import annotations

from typing import Dict, Mapping, Optional, Sequence

import headcall.config as config
from headcall.core.errors import EnumViolationError, MissingRequiredArgError, UnknownFunctionError
from headcall.models.call_result import ArgValue, FunctionCall
from headcall.models.head import ARG_HEADS, HeadKind
from headcall.models.tool_schema import ToolSchema
from headcall.utils.coercion import coerce_value, is_null, match_enum


class ResultAssembler:
    def assemble(self, raw: Mapping[str, str], tools: Sequence[ToolSchema]) -> FunctionCall:
        # 1) Resolve the function head against the request's own tools
        # 2) Walk that tool's parameters in order: null/absent -> omit or fail, else coerce + enum check
        # 3) Attach content text when the content head was decoded
        tool = self._match_tool(raw.get(HeadKind.FUNCTION.value), tools)

        args: Dict[str, ArgValue] = {}
        for position, param in enumerate(tool.parameters):
            head_raw: Optional[str] = None
            # Key line: only the first six parameters have a head; the rest are always "absent".
            if position < len(ARG_HEADS):
                head_raw = raw.get(ARG_HEADS[position].value)

            if is_null(head_raw):
                if param.required:
                    raise MissingRequiredArgError(tool.name, param.name)
                continue

            value = coerce_value(head_raw)

            if param.enum is not None:
                ok, value = match_enum(value, param.enum)
                if not ok:
                    raise EnumViolationError(tool.name, param.name, value, list(param.enum))

            args[param.name] = value

        content = raw.get(HeadKind.CONTENT.value)
        content = None if is_null(content) else content.strip()

        if config.DEBUG:
            print(f"ASSEMBLED: {tool.name}({args})")

        return FunctionCall(function=tool.name, args=args, content=content)

    def _match_tool(self, function_raw: Optional[str], tools: Sequence[ToolSchema]) -> ToolSchema:
        if is_null(function_raw):
            raise UnknownFunctionError(function_raw)

        name = function_raw.strip()
        for tool in tools:
            if tool.name == name:
                return tool

        raise UnknownFunctionError(name)
