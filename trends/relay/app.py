from __future__ import annotations

import uuid
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from trends.core.config import SETTINGS, Settings
from trends.core.schemas import ErrorEnvelope
from trends.relay.upstream import UpstreamClient, UpstreamHTTPError
from trends.utils.logging import get_logger, set_log_context

logger = get_logger("relay")

MISSING_BARS_PARAMS = "Parameters 'symbols', 'start', 'end', and 'timeframe' are required"

_upstream: Optional[UpstreamClient] = None


def get_upstream() -> UpstreamClient:
    global _upstream
    if _upstream is None:
        _upstream = UpstreamClient()
    return _upstream


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorEnvelope(error=message).model_dump())


def _origins(raw: str) -> list[str]:
    origins = [o.strip() for o in (raw or "").split(",") if o.strip()]
    if not origins or "*" in origins:
        return ["*"]
    return origins


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or SETTINGS
    app = FastAPI(title="trends relay")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_origins(settings.allow_origins),
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        # callers (RelayClient) send their own id so both sides log the same one
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        set_log_context(request_id=request_id, component="relay")
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        logger.info(f"request method={request.method} path={request.url.path} status={response.status_code}")
        return response

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    @app.get("/api/bars")
    def bars(
        symbols: Optional[str] = None,
        start: Optional[str] = None,
        end: Optional[str] = None,
        timeframe: Optional[str] = None,
        upstream: UpstreamClient = Depends(get_upstream),
    ):
        if not symbols or not start or not end or not timeframe:
            return _error(400, MISSING_BARS_PARAMS)

        try:
            return upstream.get_bars(symbols=symbols, start=start, end=end, timeframe=timeframe)
        except UpstreamHTTPError as e:
            logger.warning(f"alpaca_failed status={e.status_code} symbols={symbols}")
            return _error(e.status_code, f"Failed to fetch bars data from Alpaca: {e.body}")
        except Exception:
            logger.exception(f"bars_error symbols={symbols} timeframe={timeframe}")
            return _error(500, "An error occurred while fetching bars data")

    @app.get("/api/symbols")
    def symbols(upstream: UpstreamClient = Depends(get_upstream)):
        try:
            return upstream.get_symbols()
        except UpstreamHTTPError as e:
            logger.warning(f"polygon_failed status={e.status_code}")
            return _error(e.status_code, f"Failed to fetch symbols from Polygon: {e.body}")
        except Exception:
            logger.exception("symbols_error")
            return _error(500, "An error occurred while fetching symbols")

    return app


app = create_app()
