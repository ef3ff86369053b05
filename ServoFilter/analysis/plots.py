from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np  # type: ignore
import matplotlib
matplotlib.use("Agg")  # headless-safe backend
import matplotlib.pyplot as plt  # type: ignore

from ServoFilter.filters.iir6 import IIR6


def fig_response(inputs: Sequence[float], outputs: Sequence[float], record: IIR6, holds: Optional[Sequence[bool]] = None):
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.set_title("Filter Response")
    xs = np.asarray(inputs, dtype=float)
    ys = np.asarray(outputs, dtype=float)
    n = np.arange(len(ys))
    if len(xs) > 0:
        ax.step(np.arange(len(xs)), xs, where="post", c="steelblue", label="Input")
    if len(ys) > 0:
        ax.step(n, ys, where="post", c="darkorange", label="Output")
    for lim, name in ((record.y_min, "y_min"), (record.y_max, "y_max")):
        if math.isfinite(float(lim)):
            ax.axhline(float(lim), color="red", linestyle="--", linewidth=1, label=name)
    if holds is not None:
        held = np.nonzero(np.asarray(holds, dtype=bool))[0]
        if held.size > 0:
            ax.scatter(held, ys[held], c="gray", s=10, label="Held")
    ax.legend(loc="best")
    ax.set_xlabel("Sample")
    ax.set_ylabel("Value")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    return fig

