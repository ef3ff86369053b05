from __future__ import annotations

from typing import Any, Iterable, List, Optional

import numpy as np  # type: ignore

from ServoFilter.core.live_config import ConfigSlot
from .iir6 import LEN, new_history


class Channel:
    """One signal channel: a private history buffer driven by a shared slot.

    The slot is read once per tick. Publishing a new record into the slot
    never touches this channel's history (bump-less transfer).
    """

    def __init__(self, slot: ConfigSlot, name: str = "") -> None:
        self.slot = slot
        self.name = str(name or slot.name)
        self.xy: List[Any] = new_history()

    def reset(self) -> None:
        self.xy[:] = new_history()

    @property
    def last_output(self) -> Any:
        return self.xy[LEN // 2]

    def step(self, x: Any, hold: bool = False) -> Any:
        record = self.slot.current
        return record.update(self.xy, x, hold)

    def run(self, xs: Iterable[float], holds: Optional[Iterable[bool]] = None) -> np.ndarray:
        xs = list(xs)
        if holds is None:
            flags = [False] * len(xs)
        else:
            flags = [bool(h) for h in holds]
            if len(flags) != len(xs):
                raise ValueError(f"hold flags ({len(flags)}) and samples ({len(xs)}) differ in length")
        out = np.zeros(len(xs), dtype=float)
        for i, (x, h) in enumerate(zip(xs, flags)):
            out[i] = self.step(float(x), h)
        return out
