"""Short-stack push/fold resolution, opponent models, ICM and drills."""

from __future__ import annotations

from .drill import DrillTracker, PushFoldDrill
from .icm import ApproximateICM, ChipShareICM, ThreeHandedICM
from .nash import NashRangeTable
from .resolver import NashPushFoldResolver, PushFoldEVAnalysis, PushFoldResult, PushFoldScenario

__all__ = [
    "ApproximateICM",
    "ChipShareICM",
    "DrillTracker",
    "NashPushFoldResolver",
    "NashRangeTable",
    "PushFoldDrill",
    "PushFoldEVAnalysis",
    "PushFoldResult",
    "PushFoldScenario",
    "ThreeHandedICM",
]
