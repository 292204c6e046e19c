from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from ..config import DEFAULT_NASH_TABLE
from ..core.hands import hand_strength, push_fold_order

__all__ = ["NashBucket", "NashRangeTable", "PushFoldMode"]

logger = logging.getLogger(__name__)

PushFoldMode = Literal["push", "call"]


@dataclass(frozen=True)
class NashBucket:
    max_stack_bb: float | None
    min_strength: int

    def covers(self, stack_bb: float) -> bool:
        return self.max_stack_bb is None or stack_bb <= self.max_stack_bb


class NashRangeTable:
    """Strength thresholds approximating Nash push and call ranges.

    A spot is keyed by mode, table size and position; each spot lists stack
    buckets in ascending order.  Ranges come back in push/fold order, i.e.
    the table's native hand ordering.
    """

    def __init__(self, resource: Path | None = None) -> None:
        self.resource = resource or DEFAULT_NASH_TABLE
        payload = self._load(self.resource)
        self._defaults = {mode: int(payload["defaults"][mode]) for mode in ("push", "call")}
        self._spots: dict[tuple[str, int, str], tuple[NashBucket, ...]] = {}
        for spot in payload["spots"]:
            key = (str(spot["mode"]), int(spot["players"]), str(spot["position"]).lower())
            self._spots[key] = self._buckets(spot["buckets"], key)

    @staticmethod
    def _load(path: Path) -> dict[str, Any]:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict) or not isinstance(data.get("spots"), list) or "defaults" not in data:
            raise ValueError("Invalid Nash table payload")
        return data

    @staticmethod
    def _buckets(raw: Sequence[Mapping[str, Any]], key: tuple[str, int, str]) -> tuple[NashBucket, ...]:
        buckets = tuple(
            NashBucket(
                max_stack_bb=float(entry["max_stack_bb"]) if entry.get("max_stack_bb") is not None else None,
                min_strength=int(entry["min_strength"]),
            )
            for entry in raw
        )
        bounded = [bucket.max_stack_bb for bucket in buckets if bucket.max_stack_bb is not None]
        if bounded != sorted(bounded) or not buckets or buckets[-1].max_stack_bb is not None:
            raise ValueError(f"Nash buckets for {key} must ascend and end with an open bucket")
        return buckets

    def min_strength(self, mode: PushFoldMode, stack_bb: float, position: str, players: int) -> int:
        buckets = self._spots.get((mode, players, position.lower()))
        if buckets is None:
            logger.debug("No Nash %s spot for %s %d-handed; using default threshold", mode, position, players)
            return self._defaults[mode]
        return next(bucket.min_strength for bucket in buckets if bucket.covers(stack_bb))

    def range_for(self, mode: PushFoldMode, stack_bb: float, position: str, players: int) -> list[str]:
        floor = self.min_strength(mode, stack_bb, position, players)
        return [hand for hand in push_fold_order() if hand_strength(hand) >= floor]

    def push_range(self, stack_bb: float, position: str, players: int) -> list[str]:
        return self.range_for("push", stack_bb, position, players)

    def call_range(self, stack_bb: float, position: str, players: int) -> list[str]:
        return self.range_for("call", stack_bb, position, players)
