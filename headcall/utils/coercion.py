# Role: Typed coercion for raw head strings. Widening order is int -> float -> string: the model is trained to
# emit the most specific type, so an integer-looking value is never kept as a float or string.

from __future__ import annotations

import re
from typing import Any, Optional, Sequence, Tuple, Union

import headcall.config as config

_INT_RE = re.compile(r"^-?[0-9]+$")
_DECIMAL_RE = re.compile(r"^-?([0-9]+\.[0-9]*|\.[0-9]+|[0-9]+)([eE][-+]?[0-9]+)?$")


def is_null(raw: Optional[str]) -> bool:
    # Key line: an absent head is treated like an explicit null sentinel.
    return raw is None or raw.strip() == config.NULL_SENTINEL


def coerce_value(raw: str) -> Union[int, float, str]:
    # 1) Trim decode whitespace
    # 2) Integer (optional leading '-', no separators)
    # 3) Decimal float
    # 4) Otherwise the trimmed string
    text = raw.strip()
    if _INT_RE.match(text):
        return int(text)
    if _DECIMAL_RE.match(text):
        return float(text)
    return text


def match_enum(value: Any, options: Sequence[Any]) -> Tuple[bool, Any]:
    """
    Check a coerced value against an enum. Returns (ok, value-as-declared).

    Matches on equality first, then on string form, so enum ["1", "2"] accepts a head that
    coerced to int 1 and hands back the declared "1".
    """
    for option in options:
        if type(option) is not bool and option == value:
            return True, option

    text = str(value)
    for option in options:
        if str(option) == text:
            return True, option

    return False, value
