from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np  # type: ignore

from ServoFilter.filters.iir6 import IIR6, new_history


@dataclass
class ResponseMetrics:
    final_value: float
    peak: float
    overshoot: float
    settling_index: int
    saturated: int


def _drive(record: IIR6, xs: Sequence[float]) -> np.ndarray:
    xy = new_history()
    out = np.zeros(len(xs), dtype=float)
    for i, x in enumerate(xs):
        out[i] = record.update(xy, float(x))
    return out


def step_response(record: IIR6, steps: int, amplitude: float = 1.0) -> np.ndarray:
    return _drive(record, np.full(max(0, int(steps)), float(amplitude)))


def impulse_response(record: IIR6, steps: int, amplitude: float = 1.0) -> np.ndarray:
    xs = np.zeros(max(0, int(steps)), dtype=float)
    if len(xs) > 0:
        xs[0] = float(amplitude)
    return _drive(record, xs)


def compute_metrics(
    outputs: Sequence[float],
    target: Optional[float] = None,
    tolerance: float = 0.02,
    limits: Optional[tuple[float, float]] = None,
) -> ResponseMetrics:
    """Summarize a response trace.

    `target` defaults to the last output. The settling index is the first
    sample after which every output stays within `tolerance` (relative to
    |target|, absolute when the target is 0) of the target; -1 if the trace
    never settles. Overshoot is relative to |target| (absolute for 0).
    """
    y = np.asarray(outputs, dtype=float)
    if y.size == 0:
        return ResponseMetrics(final_value=0.0, peak=0.0, overshoot=0.0, settling_index=-1, saturated=0)
    final = float(y[-1])
    tgt = final if target is None else float(target)
    scale = abs(tgt) if tgt != 0.0 else 1.0
    if tgt >= 0.0:
        peak = float(np.max(y))
        over = max(0.0, (peak - tgt) / scale)
    else:
        peak = float(np.min(y))
        over = max(0.0, (tgt - peak) / scale)
    band = tolerance * scale
    outside = np.nonzero(~(np.abs(y - tgt) <= band))[0]
    if outside.size == 0:
        settle = 0
    elif outside[-1] == y.size - 1:
        settle = -1
    else:
        settle = int(outside[-1]) + 1
    sat = 0
    if limits is not None:
        lo, hi = float(limits[0]), float(limits[1])
        sat = int(np.count_nonzero((y <= lo) | (y >= hi)))
    return ResponseMetrics(final_value=final, peak=peak, overshoot=over, settling_index=settle, saturated=sat)
