"""
Per-engine store of calibrated fatigue constants.

Values are held in an immutable mapping that is replaced as a whole
under a lock, so a reader sees either the old or the new mapping and
never a partially written entry.
"""

import threading
from types import MappingProxyType
from typing import Mapping

from .models import LiftType


class CalibrationStore:
    """Lift type → calibrated k. Empty at construction; lives as long as its owner."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._values: Mapping[LiftType, float] = MappingProxyType({})

    def get(self, lift_type: LiftType) -> float | None:
        """Return the calibrated k for *lift_type*, or None if not calibrated."""
        return self._values.get(lift_type)

    def set(self, lift_type: LiftType, k: float) -> None:
        """Store *k* for *lift_type*, replacing any previous value."""
        with self._lock:
            updated = dict(self._values)
            updated[lift_type] = k
            self._values = MappingProxyType(updated)

    def snapshot(self) -> Mapping[LiftType, float]:
        """Return the current read-only mapping."""
        return self._values

    def reset(self) -> None:
        """Forget every calibration."""
        with self._lock:
            self._values = MappingProxyType({})

    def __len__(self) -> int:
        return len(self._values)
