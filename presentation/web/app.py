"""FastAPI application serving roster stats to the static front end."""
from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Annotated, Any, Callable, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from config import settings
from core.logging.logger import get_logger
from application.use_cases import RosterStatsUseCase
from presentation.runtime import TrackerRuntime, open_runtime

logger = get_logger(__name__, service="api")

RuntimeFactory = Callable[[], Any]


def get_runtime(request: Request) -> TrackerRuntime:
    return request.app.state.runtime


def get_roster(runtime: Annotated[TrackerRuntime, Depends(get_runtime)]) -> RosterStatsUseCase:
    return runtime.roster


RosterDependency = Annotated[RosterStatsUseCase, Depends(get_roster)]


def create_app(
    runtime_factory: Optional[RuntimeFactory] = None,
    static_dir: Optional[Path] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        runtime_factory: returns an async context manager yielding a
            ``TrackerRuntime``; defaults to the Riot-backed runtime.
        static_dir: front-end directory served at ``/`` when it exists.
    """
    factory = runtime_factory or open_runtime

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting roster tracker API...")
        async with factory() as runtime:
            app.state.runtime = runtime
            yield
        logger.info("Roster tracker API stopped")

    app = FastAPI(title="Roster Tracker API", lifespan=lifespan)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(lambda: f"Backend error on {request.url.path}: {exc!r}", exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Server error fetching stats"})

    @app.get("/api/players")
    async def list_players(roster: RosterDependency) -> List[dict]:
        logger.info("Incoming request to /api/players")
        summaries = await roster.execute()
        return [s.to_dict() for s in summaries]

    @app.get("/api/players/{puuid}")
    async def get_player(puuid: str, roster: RosterDependency) -> dict:
        try:
            summary = await roster.player(puuid)
        except KeyError:
            raise HTTPException(status_code=404, detail="Player is not tracked")
        return summary.to_dict()

    @app.get("/health")
    async def health(runtime: Annotated[TrackerRuntime, Depends(get_runtime)]) -> dict:
        return {"status": "ok", "players": len(runtime.roster.roster), "cached": len(runtime.cache)}

    directory = Path(static_dir) if static_dir is not None else settings.STATIC_DIR
    if directory.is_dir():
        app.mount("/", StaticFiles(directory=str(directory), html=True), name="static")

    return app
