"""
Live reconfiguration of a filter record.

A ConfigSlot holds one immutable IIR6 handle. Writers build a complete record
and swap the handle; readers take `current` once per sample, so an update
always sees either the old or the new record, never a mix of fields.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Dict

from ServoFilter.filters.iir6 import IIR6

logger = logging.getLogger(__name__)


class ConfigSlot:
    def __init__(self, initial: IIR6, name: str = "") -> None:
        self.name = str(name)
        self._record = initial
        self._version = 0
        self._lock = threading.Lock()

    @property
    def current(self) -> IIR6:
        return self._record

    @property
    def version(self) -> int:
        return self._version

    def publish(self, record: IIR6) -> int:
        if not isinstance(record, IIR6):
            raise TypeError(f"expected IIR6, got {type(record).__name__}")
        try:
            record.validate()
        except ValueError as e:
            logger.warning("channel %r: rejected config: %s", self.name, e)
            raise
        with self._lock:
            self._record = record
            self._version += 1
            version = self._version
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "channel %r: published config v%d (y_offset=%s, limits=[%s, %s], dc_gain=%s)",
                self.name, version, record.y_offset, record.y_min, record.y_max, record.dc_gain(),
            )
        return version

    def publish_dict(self, data: Dict[str, Any]) -> int:
        try:
            record = IIR6.from_dict(data)
        except ValueError as e:
            logger.warning("channel %r: rejected config: %s", self.name, e)
            raise
        return self.publish(record)

    def publish_json(self, text: str) -> int:
        try:
            record = IIR6.from_json(text)
        except ValueError as e:
            logger.warning("channel %r: rejected config: %s", self.name, e)
            raise
        return self.publish(record)
