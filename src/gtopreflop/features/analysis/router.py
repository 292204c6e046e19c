from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .schemas import HandAnalysisRequest, SpotAnalysisResponse, SpotRequest
from .service import AnalysisService

__all__ = ["create_analysis_router"]

logger = logging.getLogger(__name__)


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = str(first.get("msg", "invalid value"))
    return f"{location}: {message}" if location else message


class _AnalysisController:
    def __init__(self, service: AnalysisService) -> None:
        self.service = service

    async def spot(self, body: dict[str, Any]) -> JSONResponse:
        try:
            request = SpotRequest.model_validate(body)
        except ValidationError as exc:
            raise HTTPException(400, _first_error(exc)) from exc
        try:
            analysis = await self.service.analyze_spot_async(request)
        except ValueError as exc:
            raise HTTPException(400, str(exc)) from exc
        return JSONResponse(SpotAnalysisResponse(analysis=analysis).to_dict())

    async def hand(self, body: dict[str, Any]) -> JSONResponse:
        try:
            request = HandAnalysisRequest.model_validate(body)
        except ValidationError as exc:
            return self._failure(400, _first_error(exc))
        try:
            result = await self.service.analyze_hand_async(request.hand_history)
        except ValueError as exc:
            return self._failure(400, str(exc))
        except Exception:
            logger.exception("Hand analysis failed")
            return self._failure(500, "Internal server error")
        return JSONResponse(result.to_dict())

    @staticmethod
    def _failure(status: int, error: str) -> JSONResponse:
        return JSONResponse({"success": False, "error": error}, status_code=status)


def create_analysis_router(service: AnalysisService) -> APIRouter:
    controller = _AnalysisController(service)
    router = APIRouter(prefix="/api/v1/analyze", tags=["analysis"])

    @router.post("")
    async def analyze_spot(body: dict[str, Any] = Body(...)) -> JSONResponse:
        return await controller.spot(body)

    @router.post("/hand")
    async def analyze_hand(body: dict[str, Any] = Body(...)) -> JSONResponse:
        return await controller.hand(body)

    return router
