"""
Sixth-order IIR filter with output offset, saturation and hold.

The record (IIR6) carries only coefficients and limits. The filter state is
a separate history buffer owned by the caller, so one record can drive any
number of channels and can be replaced between samples without touching
their history.

History layout (13 slots, lower index = more recent):
- at rest:        [x0..x5, y0..y6]
- during the sum: [x0..x6, y1..y6]

Coefficients `ba` are [b0..b6, -a1..-a6], normalized so that a0 = 1. The new
output is y0 = y_offset + sum(bi*xi) - sum(aj*yj), clamped to [y_min, y_max].
Because only emitted (already clamped) outputs are stored, the feedback
terms see the saturated value, which gives integrator anti-windup without
any back-off of the output range.
"""
from __future__ import annotations

import dataclasses
import decimal
import json
import math
import numbers
from dataclasses import dataclass
from typing import Any, Dict, List, MutableSequence, Sequence, Tuple

from .macc import macc


ORDER = 6
LEN = 2 * ORDER + 1

_FIELDS = ("ba", "y_offset", "y_min", "y_max")


def clamp(x: Any, lo: Any, hi: Any) -> Any:
    """Saturate x to [lo, hi].

    NaN compares false against both limits and is returned as is.
    """
    if x < lo:
        return lo
    if x > hi:
        return hi
    return x


def _is_real(v: Any) -> bool:
    return isinstance(v, (numbers.Real, decimal.Decimal)) and not isinstance(v, bool)


def new_history(zero: Any = 0.0) -> List[Any]:
    return [zero] * LEN


@dataclass(frozen=True)
class IIR6:
    ba: Tuple[Any, ...] = (0.0,) * LEN
    y_offset: Any = 0.0
    y_min: Any = -math.inf
    y_max: Any = math.inf

    def __post_init__(self) -> None:
        # Callers may hand in a list; keep the record immutable
        if not isinstance(self.ba, tuple):
            object.__setattr__(self, "ba", tuple(self.ba))

    @classmethod
    def new(cls, y_min: Any, y_max: Any) -> "IIR6":
        zero = type(y_min)()
        return cls(ba=(zero,) * LEN, y_offset=zero, y_min=y_min, y_max=y_max)

    def update(self, xy: MutableSequence[Any], x0: Any, hold: bool = False) -> Any:
        """Feed x0 into the filter and return the new output.

        Only `xy` is modified. With `hold` the previous output is repeated,
        but the history still advances and records x0.
        """
        n = len(self.ba)
        assert n == LEN, "record must carry 2 * ORDER + 1 taps"
        assert len(xy) == n, "history length must match the coefficient vector"
        assert not self.y_min > self.y_max, "y_min must not exceed y_max"
        # Age every sample by one step, the oldest output falls off the end
        xy[1:n] = xy[0 : n - 1]
        xy[0] = x0
        if hold:
            y0 = xy[n // 2 + 1]
        else:
            y0 = macc(self.y_offset, self.ba, xy)
        y0 = clamp(y0, self.y_min, self.y_max)
        xy[n // 2] = y0
        return y0

    # Introspection -----------------------------------------------------
    def replace(self, **changes: Any) -> "IIR6":
        return dataclasses.replace(self, **changes)

    def dc_gain(self) -> float:
        b = sum(self.ba[: ORDER + 1])
        fb = 1 - sum(self.ba[ORDER + 1 :])
        if fb == 0:
            return math.inf if b != 0 else math.nan
        return float(b / fb)

    def validate(self) -> None:
        """Raise ValueError unless every field is a real number and y_min <= y_max."""
        if len(self.ba) != LEN:
            raise ValueError(f"IIR config field 'ba' must have {LEN} entries, got {len(self.ba)}")
        for i, v in enumerate(self.ba):
            if not _is_real(v):
                raise ValueError(f"IIR config field 'ba' entry {i} is not a number: {v!r}")
        for name in ("y_offset", "y_min", "y_max"):
            v = getattr(self, name)
            if not _is_real(v):
                raise ValueError(f"IIR config field '{name}' is not a number: {v!r}")
        if self.y_min > self.y_max:
            raise ValueError(f"IIR config field 'y_min' ({self.y_min}) exceeds 'y_max' ({self.y_max})")

    # Wire format -------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "ba": list(self.ba),
            "y_offset": self.y_offset,
            "y_min": self.y_min,
            "y_max": self.y_max,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IIR6":
        if not isinstance(data, dict):
            raise ValueError(f"IIR config must be a map, got {type(data).__name__}")
        missing = [k for k in _FIELDS if k not in data]
        if missing:
            raise ValueError(f"IIR config missing field(s): {', '.join(missing)}")
        extra = sorted(k for k in data if k not in _FIELDS)
        if extra:
            raise ValueError(f"IIR config has unknown field(s): {', '.join(extra)}")
        ba = data["ba"]
        if isinstance(ba, (str, bytes)) or not isinstance(ba, Sequence):
            raise ValueError("IIR config field 'ba' must be a list")
        if len(ba) != LEN:
            raise ValueError(f"IIR config field 'ba' must have {LEN} entries, got {len(ba)}")
        rec = cls(
            ba=tuple(ba),
            y_offset=data["y_offset"],
            y_min=data["y_min"],
            y_max=data["y_max"],
        )
        rec.validate()
        return rec

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: str) -> "IIR6":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"IIR config is not valid JSON: {e}") from e
        return cls.from_dict(data)
