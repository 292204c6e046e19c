from __future__ import annotations

from typing import Final

__all__ = ["ACTION_LABELS", "AGGRESSIVE_ACTIONS", "action_kind", "normalize_action"]

_ACTION_ALIASES: Final[dict[str, str]] = {
    "fold": "fold",
    "folds": "fold",
    "check": "check",
    "checks": "check",
    "call": "call",
    "calls": "call",
    "bet": "raise",
    "bets": "raise",
    "raise": "raise",
    "raises": "raise",
    "all-in": "allin",
    "allin": "allin",
    "all in": "allin",
    "shove": "allin",
    "push": "allin",
}

ACTION_LABELS: Final[dict[str, str]] = {
    "fold": "fold",
    "check": "check",
    "call": "call",
    "raise": "raise",
    "allin": "all-in",
}

AGGRESSIVE_ACTIONS: Final[frozenset[str]] = frozenset({"raise", "allin"})


def action_kind(action: str) -> str | None:
    """Canonical fold/check/call/raise/allin for *action*, or None when unrecognised."""

    key = " ".join(action.strip().lower().split())
    if key in _ACTION_ALIASES:
        return _ACTION_ALIASES[key]
    if "all-in" in key:
        return "allin"
    return None


def normalize_action(action: str) -> str:
    """Map raw action text to fold/check/call/raise/allin."""

    kind = action_kind(action)
    if kind is None:
        raise ValueError(f"Unknown action: {action!r}")
    return kind
