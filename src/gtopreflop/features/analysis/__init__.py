"""Analysis feature: spot and hand-history scoring, schemas and API router."""

from .router import create_analysis_router
from .schemas import (
    AnalyzedActionPayload,
    HandAnalysisRequest,
    HandAnalysisResponse,
    HandHistoryPayload,
    HandSummaryPayload,
    SpotAnalysisPayload,
    SpotRequest,
)
from .service import AnalysisService

__all__ = [
    "AnalysisService",
    "AnalyzedActionPayload",
    "HandAnalysisRequest",
    "HandAnalysisResponse",
    "HandHistoryPayload",
    "HandSummaryPayload",
    "SpotAnalysisPayload",
    "SpotRequest",
    "create_analysis_router",
]
