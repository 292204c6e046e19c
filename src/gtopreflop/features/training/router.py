from __future__ import annotations

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from .schemas import ChallengeAnswerRequest, PushFoldRequest
from .service import TrainingService, parse_challenge_date

__all__ = ["create_training_routers"]


class _TrainingController:
    def __init__(self, service: TrainingService) -> None:
        self.service = service

    async def evaluate(self, body: PushFoldRequest) -> JSONResponse:
        try:
            result = await self.service.evaluate_pushfold_async(body)
        except ValueError as exc:
            raise HTTPException(400, str(exc)) from exc
        return JSONResponse(result.to_dict())

    async def daily(self, date: str | None, reveal: bool) -> JSONResponse:
        try:
            day = parse_challenge_date(date)
        except ValueError as exc:
            raise HTTPException(400, str(exc)) from exc
        payload = await self.service.daily_challenge_async(day, reveal=reveal)
        return JSONResponse(payload.to_dict())

    async def grade(self, body: ChallengeAnswerRequest) -> JSONResponse:
        try:
            graded = await self.service.grade_challenge_async(body)
        except KeyError as exc:
            raise HTTPException(404, str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(400, str(exc)) from exc
        return JSONResponse(graded.to_dict())

    def range_table(self, scenario: str, key: str, depth: int | None) -> JSONResponse:
        try:
            payload = self.service.range_table(scenario, key, depth)
        except KeyError as exc:
            raise HTTPException(404, str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(400, str(exc)) from exc
        return JSONResponse(payload.to_dict())


def create_training_routers(service: TrainingService) -> tuple[APIRouter, APIRouter, APIRouter]:
    controller = _TrainingController(service)

    pushfold = APIRouter(prefix="/api/v1/pushfold", tags=["pushfold"])
    challenge = APIRouter(prefix="/api/v1/challenge", tags=["challenge"])
    ranges = APIRouter(prefix="/api/v1/ranges", tags=["ranges"])

    @pushfold.post("/evaluate")
    async def evaluate_pushfold(body: PushFoldRequest) -> JSONResponse:
        return await controller.evaluate(body)

    @challenge.get("/daily")
    async def daily_challenge(date: str | None = None, reveal: bool = False) -> JSONResponse:
        return await controller.daily(date, reveal)

    @challenge.post("/daily/answer")
    async def answer_daily_challenge(body: ChallengeAnswerRequest) -> JSONResponse:
        return await controller.grade(body)

    @ranges.get("/{scenario}/{key}")
    def get_range_table(scenario: str, key: str, depth: int | None = None) -> JSONResponse:
        return controller.range_table(scenario, key, depth)

    return pushfold, challenge, ranges
