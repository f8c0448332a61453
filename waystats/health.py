"""Health check and cache maintenance endpoints."""

from contextlib import asynccontextmanager
import time
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Query, Response
from fastapi.responses import JSONResponse

from waystats.cache.store import DDRAGON_PREFIX, OPGG_PREFIX, UGG_PREFIX
from waystats.config import settings
from waystats.service import GameData, build_game_data

KNOWN_PREFIXES = (DDRAGON_PREFIX, OPGG_PREFIX, UGG_PREFIX)


def create_app(game_data: Optional[GameData] = None) -> FastAPI:
    """
    Build the FastAPI app around a GameData container.

    Args:
        game_data: Injected container (tests); built from settings otherwise
    """
    data = game_data if game_data is not None else build_game_data(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await data.close()

    app = FastAPI(title="waystats health", lifespan=lifespan)
    app.state.game_data = data
    app.state.start_time = time.time()

    @app.get("/health")
    async def health_check() -> JSONResponse:
        """Basic health check with uptime."""
        uptime = int(time.time() - app.state.start_time)
        return JSONResponse({
            "status": "healthy",
            "uptime_seconds": uptime,
            "service": "waystats",
        })

    @app.get("/readiness")
    async def readiness_check() -> Response:
        """
        Readiness probe.

        Returns:
            200 once a version (real or fallback) can be resolved
        """
        version = await data.versions.get_latest_version()
        return Response(status_code=200, content=f"Ready ({version})")

    @app.get("/liveness")
    async def liveness_check() -> Response:
        return Response(status_code=200, content="Alive")

    @app.get("/version")
    async def version() -> Dict[str, Any]:
        latest = await data.versions.get_latest_version()
        return {"version": latest, "fallback": latest == data.versions.fallback}

    @app.post("/cache/clear")
    async def clear_cache(prefix: str = Query(...)) -> Dict[str, Any]:
        if prefix not in KNOWN_PREFIXES:
            raise HTTPException(status_code=400, detail=f"unknown prefix {prefix!r}")
        removed = await data.clear_cache(prefix)
        return {"prefix": prefix, "removed": removed}

    return app


if __name__ == "__main__":
    import uvicorn
    from waystats.logging_config import setup_logging

    setup_logging(settings.LOG_LEVEL)
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
