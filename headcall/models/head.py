# Role: Central enum of decode heads. Head names double as the keys of RawHeadOutput and of the
# "heads" object on the wire, so the string values are part of the compatibility surface.

from enum import Enum


class HeadKind(str, Enum):
    CONTENT = "content"
    FUNCTION = "function"
    ARG1 = "arg1"
    ARG2 = "arg2"
    ARG3 = "arg3"
    ARG4 = "arg4"
    ARG5 = "arg5"
    ARG6 = "arg6"


ARG_HEADS = (
    HeadKind.ARG1,
    HeadKind.ARG2,
    HeadKind.ARG3,
    HeadKind.ARG4,
    HeadKind.ARG5,
    HeadKind.ARG6,
)


def arg_head(position: int) -> HeadKind:
    """Head for the 1-based argument position (1..6)."""
    if position < 1 or position > len(ARG_HEADS):
        raise ValueError(f"argument position out of range: {position}")
    return ARG_HEADS[position - 1]
