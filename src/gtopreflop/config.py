"""Runtime configuration for the engine, API and CLI.

Settings come from environment variables so the web app and the CLI share
one source of truth:

``GTOPREFLOP_RANGES``
    Path to the preflop range tables (JSON).  Defaults to the bundled
    6-max tables.
``GTOPREFLOP_NASH_TABLE``
    Path to the push/fold threshold table (JSON).
``GTOPREFLOP_DEPTH_SPLIT_BB``
    Effective stacks at or below this many big blinds use the shallow
    tables.  Defaults to 100.
``GTOPREFLOP_LOG_LEVEL``
    Logging level name for :func:`configure_logging`.
``GTOPREFLOP_FEATURES``
    Comma separated feature flags, case-insensitive.  Known flags:
    ``pushfold.strength_order`` extends opponent ranges by hand strength
    instead of matrix order.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

__all__ = [
    "DEFAULT_NASH_TABLE",
    "DEFAULT_RANGES",
    "EngineConfig",
    "configure_logging",
    "feature_enabled",
    "override_features",
]

_PREFIX: Final = "GTOPREFLOP_"
_DATA_DIR = Path(__file__).resolve().parent / "data" / "ranges"

DEFAULT_RANGES = _DATA_DIR / "preflop_6max.json"
DEFAULT_NASH_TABLE = _DATA_DIR / "nash_pushfold.json"

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _flag_set(raw: str | None) -> frozenset[str]:
    if not raw:
        return frozenset()
    return frozenset(part.strip().lower() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class EngineConfig:
    ranges_path: Path = DEFAULT_RANGES
    nash_table_path: Path = DEFAULT_NASH_TABLE
    depth_split_bb: float = 100.0
    log_level: str = "INFO"
    features: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EngineConfig:
        env = os.environ if environ is None else environ
        ranges = env.get(f"{_PREFIX}RANGES")
        nash = env.get(f"{_PREFIX}NASH_TABLE")
        split_raw = env.get(f"{_PREFIX}DEPTH_SPLIT_BB")
        try:
            split = float(split_raw) if split_raw else 100.0
        except ValueError:
            raise ValueError(f"{_PREFIX}DEPTH_SPLIT_BB must be a number, got {split_raw!r}") from None
        return cls(
            ranges_path=Path(ranges) if ranges else DEFAULT_RANGES,
            nash_table_path=Path(nash) if nash else DEFAULT_NASH_TABLE,
            depth_split_bb=split,
            log_level=(env.get(f"{_PREFIX}LOG_LEVEL") or "INFO").upper(),
            features=_flag_set(env.get(f"{_PREFIX}FEATURES")),
        )


_FEATURE_OVERRIDES: list[tuple[frozenset[str], frozenset[str]]] = []


def feature_enabled(flag: str, config: EngineConfig | None = None) -> bool:
    """Return True when *flag* is on, honouring :func:`override_features`."""

    key = flag.strip().lower()
    for enabled, disabled in reversed(_FEATURE_OVERRIDES):
        if key in disabled:
            return False
        if key in enabled:
            return True
    active = config.features if config is not None else _flag_set(os.getenv(f"{_PREFIX}FEATURES"))
    return key in active


@contextmanager
def override_features(*, enable: Iterable[str] = (), disable: Iterable[str] = ()):
    """Force feature flags on or off inside the block; innermost wins."""

    _FEATURE_OVERRIDES.append(
        (
            frozenset(flag.strip().lower() for flag in enable),
            frozenset(flag.strip().lower() for flag in disable),
        )
    )
    try:
        yield
    finally:
        _FEATURE_OVERRIDES.pop()


def configure_logging(level: str | int | None = None) -> None:
    """Install a root handler once; later calls only adjust the level."""

    resolved = level if level is not None else EngineConfig.from_env().log_level
    if isinstance(resolved, str):
        resolved = logging.getLevelName(resolved.upper())
        if not isinstance(resolved, int):
            resolved = logging.INFO
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=resolved, format=_LOG_FORMAT)
    root.setLevel(resolved)
