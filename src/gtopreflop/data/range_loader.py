from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Protocol

from ..config import DEFAULT_RANGES
from ..core.hands import all_hand_classes, is_hand_class
from ..core.models import GTOStrategy, StrategyAction
from ..core.scenario import ScenarioType

__all__ = [
    "DEEP_DEPTH",
    "SHALLOW_DEPTH",
    "HandLookup",
    "IndexedLookup",
    "MappingLookup",
    "RangeLoaderConfig",
    "RangeRepository",
    "RangeResolver",
    "RangeTable",
    "get_repository",
]

logger = logging.getLogger(__name__)

SHALLOW_DEPTH = 100
DEEP_DEPTH = 200


class HandLookup(Protocol):
    """Uniform read access to one range table, whatever its storage."""

    def get(self, hand: str) -> GTOStrategy | None: ...

    def __iter__(self) -> Iterator[GTOStrategy]: ...

    def __len__(self) -> int: ...


class MappingLookup:
    """Table stored as a ``hand class -> strategy`` mapping."""

    def __init__(self, entries: Mapping[str, GTOStrategy]) -> None:
        self._entries = dict(entries)

    def get(self, hand: str) -> GTOStrategy | None:
        return self._entries.get(hand)

    def __iter__(self) -> Iterator[GTOStrategy]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)


class IndexedLookup:
    """Table stored as 169 slots in matrix order; empty slots are ``None``."""

    def __init__(self, slots: Sequence[GTOStrategy | None]) -> None:
        hands = all_hand_classes()
        if len(slots) != len(hands):
            raise ValueError(f"Indexed range table needs {len(hands)} slots, got {len(slots)}")
        self._slots = tuple(slots)
        self._index = {hand: idx for idx, hand in enumerate(hands)}

    def get(self, hand: str) -> GTOStrategy | None:
        idx = self._index.get(hand)
        return None if idx is None else self._slots[idx]

    def __iter__(self) -> Iterator[GTOStrategy]:
        return (slot for slot in self._slots if slot is not None)

    def __len__(self) -> int:
        return sum(1 for slot in self._slots if slot is not None)


@dataclass(frozen=True)
class RangeTable:
    scenario: ScenarioType
    key: str
    depth: int | None
    lookup: HandLookup


@dataclass(slots=True)
class RangeLoaderConfig:
    """Where the preflop range tables live."""

    resource: Path


class RangeRepository:
    """Load preflop range tables from JSON.

    Each table declares a scenario, a key (``"UTG"``, ``"BB_vs_BTN"`` ...), an
    optional stack depth and its hands.  Hands are either an object keyed by
    hand class or a list of 169 entries in matrix order (``null`` for hands
    the table does not cover).  Tables without a depth apply at every depth.
    """

    def __init__(self, config: RangeLoaderConfig | None = None) -> None:
        resource = config.resource if config else DEFAULT_RANGES
        self._config = RangeLoaderConfig(resource=resource)
        self._tables: dict[tuple[ScenarioType, str, int | None], RangeTable] = {}
        for table in self._parse(self._load_resource(resource)):
            self._tables[(table.scenario, table.key, table.depth)] = table
        logger.debug("Loaded %d range tables from %s", len(self._tables), resource)

    @staticmethod
    def _load_resource(path: Path) -> dict[str, Any]:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict) or not isinstance(data.get("tables"), list):
            raise ValueError("Invalid range data payload")
        return data

    @classmethod
    def _parse(cls, payload: Mapping[str, Any]) -> list[RangeTable]:
        scale = float(payload.get("frequency_scale", 100))
        tables: list[RangeTable] = []
        for raw in payload["tables"]:
            try:
                scenario = ScenarioType(raw["scenario"])
                key = str(raw["key"])
                depth = raw.get("depth")
                hands = raw["hands"]
            except (KeyError, TypeError, ValueError) as exc:
                raise ValueError(f"Invalid range table entry: {exc}") from exc
            if isinstance(hands, Mapping):
                lookup: HandLookup = MappingLookup(
                    {hand: cls._strategy(hand, actions, scale) for hand, actions in hands.items()}
                )
            elif isinstance(hands, list):
                if len(hands) != len(all_hand_classes()):
                    raise ValueError(f"Range table {scenario.value}/{key} must list {len(all_hand_classes())} hands")
                lookup = IndexedLookup(
                    [
                        None if actions is None else cls._strategy(hand, actions, scale)
                        for hand, actions in zip(all_hand_classes(), hands, strict=True)
                    ]
                )
            else:
                raise ValueError(f"Range table {scenario.value}/{key} has no hands")
            tables.append(
                RangeTable(
                    scenario=scenario,
                    key=key,
                    depth=int(depth) if depth is not None else None,
                    lookup=lookup,
                )
            )
        return tables

    @staticmethod
    def _strategy(hand: str, actions: Any, scale: float) -> GTOStrategy:
        if not is_hand_class(hand):
            raise ValueError(f"Unknown hand class in range data: {hand!r}")
        if not isinstance(actions, list) or not actions:
            raise ValueError(f"Range entry for {hand} has no actions")
        parsed: list[StrategyAction] = []
        for entry in actions:
            try:
                size = entry.get("size")
                parsed.append(
                    StrategyAction(
                        action=str(entry["action"]).lower(),
                        frequency=float(entry["frequency"]),
                        ev=float(entry["ev"]),
                        size=float(size) if size is not None else None,
                    )
                )
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                raise ValueError(f"Malformed action for {hand}: {entry!r}") from exc
        return GTOStrategy(hand=hand, actions=tuple(parsed), scale=scale)

    @property
    def resource(self) -> Path:
        return self._config.resource

    def table(self, scenario: ScenarioType, key: str, depth: int | None = None) -> RangeTable | None:
        """Depth-specific table for *key*, else the table shared by all depths."""

        if depth is not None:
            table = self._tables.get((scenario, key, depth))
            if table is not None:
                return table
        return self._tables.get((scenario, key, None))

    def tables(self) -> list[RangeTable]:
        return list(self._tables.values())

    def keys(self, scenario: ScenarioType, depth: int | None = None) -> list[str]:
        return sorted(
            {key for (sc, key, tdepth) in self._tables if sc is scenario and (tdepth is None or tdepth == depth)}
        )


class RangeResolver:
    """Resolve the GTO strategy for a hand in a classified spot."""

    def __init__(self, repository: RangeRepository, depth_split_bb: float = 100.0) -> None:
        self.repository = repository
        self.depth_split_bb = depth_split_bb

    def depth_for(self, effective_stack_bb: float) -> int:
        return SHALLOW_DEPTH if effective_stack_bb <= self.depth_split_bb else DEEP_DEPTH

    @staticmethod
    def candidate_keys(scenario: ScenarioType, hero_position: str, villain_position: str | None) -> list[str]:
        if scenario is ScenarioType.RFI:
            return [hero_position]
        if villain_position is None:
            return []
        keys = [f"{hero_position}_vs_{villain_position}"]
        if scenario is ScenarioType.VS_RFI and hero_position != "BB":
            keys.append(f"BB_vs_{villain_position}")
        return keys

    def resolve_table(
        self,
        scenario: ScenarioType,
        hero_position: str,
        villain_position: str | None,
        effective_stack_bb: float,
    ) -> RangeTable | None:
        depth = self.depth_for(effective_stack_bb)
        for key in self.candidate_keys(scenario, hero_position, villain_position):
            table = self.repository.table(scenario, key, depth)
            if table is not None:
                return table
        return None

    def resolve(
        self,
        scenario: ScenarioType,
        hero_position: str,
        villain_position: str | None,
        hand: str,
        effective_stack_bb: float,
    ) -> GTOStrategy | None:
        table = self.resolve_table(scenario, hero_position, villain_position, effective_stack_bb)
        if table is None:
            logger.debug(
                "No %s table for %s vs %s at %.0fbb", scenario.value, hero_position, villain_position, effective_stack_bb
            )
            return None
        return table.lookup.get(hand)


@lru_cache(maxsize=4)
def get_repository(resource: Path | None = None) -> RangeRepository:
    """Process-wide cached repository for *resource* (bundled tables by default)."""

    return RangeRepository(RangeLoaderConfig(resource=resource) if resource is not None else None)
