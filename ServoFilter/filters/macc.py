"""
Multiply-accumulate primitive for the filter taps.

Sums left to right starting from the offset, so a given set of operands
always produces the same result. Operands may be lists, tuples or 1-D numpy
arrays of any numeric type supporting + and *.
"""
from __future__ import annotations

from typing import Any, Sequence


def macc(offset: Any, a: Sequence[Any], b: Sequence[Any]) -> Any:
    assert len(a) == len(b), "macc operands must have the same length"
    acc = offset
    for ai, bi in zip(a, b):
        acc = acc + ai * bi
    return acc
