# Role: Typed failure taxonomy for one function-call request. Every error carries a stable code so the
# orchestrator can report it inside the response envelope instead of raising past the API layer.

from __future__ import annotations

from typing import Any, Dict, Optional


class HeadCallError(Exception):
    code = "headcall_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, str]:
        return {"type": type(self).__name__, "code": self.code, "message": self.message}


class SchemaError(HeadCallError):
    """Malformed or empty tool definitions. Fatal to the request; no engine call is made."""

    code = "schema_error"


class DispatchError(HeadCallError):
    """
    The engine was unreachable, errored, timed out, or returned an incomplete head set.

    `partial` is reserved for engines that guarantee partial-result delivery. Dispatch here is
    all-or-nothing, so it is always empty.
    """

    code = "dispatch_error"

    def __init__(self, message: str, cause: Optional[BaseException] = None, partial: Optional[Dict[str, str]] = None) -> None:
        super().__init__(message)
        self.cause = cause
        self.partial: Dict[str, str] = dict(partial or {})


class AssemblyError(HeadCallError):
    code = "assembly_error"


class UnknownFunctionError(AssemblyError):
    code = "unknown_function"

    def __init__(self, function: Any) -> None:
        super().__init__(f"Model selected unknown function: {function!r}")
        self.function = function


class MissingRequiredArgError(AssemblyError):
    code = "missing_required_arg"

    def __init__(self, function: str, parameter: str) -> None:
        super().__init__(f"Required argument '{parameter}' of '{function}' was not produced")
        self.function = function
        self.parameter = parameter


class EnumViolationError(AssemblyError):
    code = "enum_violation"

    def __init__(self, function: str, parameter: str, value: Any, allowed: list) -> None:
        super().__init__(f"Argument '{parameter}' of '{function}' got {value!r}; allowed: {allowed}")
        self.function = function
        self.parameter = parameter
        self.value = value
        self.allowed = allowed
