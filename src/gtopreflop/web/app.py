from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import EngineConfig, configure_logging
from ..features.analysis import AnalysisService, create_analysis_router
from ..features.training import TrainingService, create_training_routers

__all__ = ["create_app", "main"]

logger = logging.getLogger(__name__)


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    detail = str(errors[0].get("msg", "Invalid request")) if errors else "Invalid request"
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, detail)
    return JSONResponse({"detail": detail}, status_code=400)


def create_app(
    config: EngineConfig | None = None,
    *,
    analysis: AnalysisService | None = None,
    training: TrainingService | None = None,
) -> FastAPI:
    cfg = config or EngineConfig.from_env()
    app = FastAPI(title="GTO Preflop Engine", version=__version__)
    app.add_exception_handler(RequestValidationError, _validation_error)  # type: ignore[arg-type]

    app.include_router(create_analysis_router(analysis or AnalysisService.from_config(cfg)))
    for router in create_training_routers(training or TrainingService.from_config(cfg)):
        app.include_router(router)

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    return app


def main() -> None:  # pragma: no cover - runner
    import uvicorn

    config = EngineConfig.from_env()
    configure_logging(config.log_level)
    host = os.environ.get("BIND", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))
    uvicorn.run(create_app(config), host=host, port=port)


if __name__ == "__main__":  # pragma: no cover
    main()
