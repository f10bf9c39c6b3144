"""FastAPI application exposing parsed schedules and the verification verdict."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Callable

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from .exceptions import UpstreamError
from .logging import get_logger
from .runtime import Runtime, build_runtime

logger = get_logger(__name__)


def get_runtime(request: Request) -> Runtime:
    runtime: Runtime = request.app.state.runtime
    return runtime


def create_app(runtime_factory: Callable[[], Runtime] = build_runtime) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        runtime = runtime_factory()
        app.state.runtime = runtime
        try:
            yield
        finally:
            runtime.close()

    api = FastAPI(title="Lease Schedule Parser", version="1.0.0", lifespan=lifespan)

    @api.get("/api/schedules")
    def schedules(runtime: Runtime = Depends(get_runtime)) -> list:
        try:
            entries = runtime.service.get_schedules()
        except UpstreamError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return [entry.to_payload() for entry in entries]

    @api.get("/api/schedules/AreResultsTheSame")
    def are_results_the_same(runtime: Runtime = Depends(get_runtime)) -> dict:
        outcome = runtime.service.verify_against_results()
        return {
            "same": outcome.same,
            "summary": outcome.summary,
            "report": outcome.report.to_payload() if outcome.report else None,
        }

    @api.get("/health/live")
    def live() -> dict:
        return {"status": "healthy"}

    @api.get("/health/ready")
    def ready(runtime: Runtime = Depends(get_runtime)):
        try:
            # Single attempt, no backoff.
            raw = runtime.client.fetch_raw_schedules(retries=1)
        except UpstreamError as exc:
            logger.warning("readiness_failed", error=str(exc))
            return JSONResponse(
                status_code=503,
                content={"status": "unhealthy", "error": str(exc)},
            )
        return {"status": "healthy", "raw_count": len(raw)}

    return api


app = create_app()
