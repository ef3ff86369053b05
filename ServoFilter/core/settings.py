"""
Settings manager for ServoFilter.

Loads/saves JSON settings (default: ServoFilter/settings.json) holding one
IIR record per named channel, in the same map form used for live updates.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Optional

from ServoFilter.filters.iir6 import IIR6

logger = logging.getLogger(__name__)


class SettingsManager:
    def __init__(self, path: Optional[str] = None) -> None:
        here = os.path.dirname(os.path.abspath(__file__))
        self._root = os.path.dirname(here)
        self.path = path or os.path.join(self._root, "settings.json")
        self.data: Dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        if not os.path.exists(self.path):
            # provide minimal defaults: an inert channel bounded to +/-1
            self.data = {
                "verbose": False,
                "channels": {
                    "default": IIR6.new(-1.0, 1.0).to_dict(),
                },
            }
            logger.debug("settings file %s not found, using defaults", self.path)
            return
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path}: settings must be a JSON object, got {type(data).__name__}")
        self.data = data
        logger.debug("loaded settings from %s", self.path)

    def save(self) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self.data, f, indent=2)

    # Convenience accessors -------------------------------------------------
    def verbose(self) -> bool:
        return bool(self.data.get("verbose", False))

    def set_verbose(self, on: bool) -> None:
        self.data["verbose"] = bool(on)

    def channel_names(self) -> List[str]:
        chans = self.data.get("channels", {})
        if not isinstance(chans, dict):
            return []
        return sorted(chans)

    def iir_config(self, name: str) -> IIR6:
        chans = self.data.get("channels", {})
        if not isinstance(chans, dict) or name not in chans:
            raise KeyError(f"no channel named {name!r}")
        return IIR6.from_dict(chans[name])

    def set_iir_config(self, name: str, record: IIR6) -> None:
        self.data.setdefault("channels", {})[str(name)] = record.to_dict()
