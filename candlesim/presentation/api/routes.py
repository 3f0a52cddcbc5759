"""
CandleSim – API Routes (FastAPI)
===================================
Endpoints REST, UDF (TradingView) y WebSocket.

Endpoints disponibles:
  WS     /ws/ohlcv?symbol=&timeframes=   → streaming de velas en tiempo real
  GET    /api/health                     → health check
  GET    /api/status                     → estado de todas las simulaciones
  GET    /api/candles?symbol=&count=     → últimas N velas de una simulación
  POST   /api/simulations                → iniciar / reconfigurar simulación
  DELETE /api/simulations?symbol=        → detener simulación
  GET    /udf/config                     → configuración UDF
  GET    /udf/time                       → hora del servidor (segundos)
  GET    /udf/symbols?symbol=            → resolve de símbolo
  GET    /udf/search?query=&limit=       → búsqueda entre símbolos simulados
  GET    /udf/history?symbol=&resolution=&from=&to=&countback=
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse

from candlesim.domain.exceptions.domain_errors import ConfigurationError
from candlesim.domain.value_objects.resolution import SUPPORTED_RESOLUTIONS
from candlesim.domain.value_objects.simulation_config import SimulationConfig
from candlesim.presentation.api.schemas import (
    CandlesResponse,
    HealthResponse,
    SimulationRequest,
    SimulationResponse,
)
from candlesim.presentation.websocket.websocket_manager import ClientFilter
from candlesim.shared.config.settings import Settings, settings
from candlesim.shared.logging.logger import get_logger

logger = get_logger("api.routes")

router = APIRouter()

EXCHANGE = "CandleSim"
TIMEZONE = "Etc/UTC"

# Referencias a componentes inyectados desde main.py
_ws_manager = None
_simulations = None
_udf_history = None
_clock = None
_settings: Settings = settings


def init_routes(
    ws_manager,
    simulations,
    udf_history,
    clock,
    app_settings: Optional[Settings] = None,
) -> None:
    """Inyectar dependencias desde main.py al arrancar."""
    global _ws_manager, _simulations, _udf_history, _clock, _settings
    _ws_manager = ws_manager
    _simulations = simulations
    _udf_history = udf_history
    _clock = clock
    _settings = app_settings or settings


def build_config(body: SimulationRequest) -> SimulationConfig:
    """SimulationRequest + defaults de settings → SimulationConfig validado."""
    def pick(value, default):
        return default if value is None else value

    config = SimulationConfig(
        symbol=body.symbol,
        candle_duration_ms=pick(body.candle_duration_ms, _settings.candle_duration_ms),
        history_length=pick(body.history_length, _settings.history_length),
        tick_interval_ms=pick(body.tick_interval_ms, _settings.tick_interval_ms),
        volatility=pick(body.volatility, _settings.volatility),
        start_price=pick(body.start_price, _settings.start_price),
    )
    if config.history_length > _settings.max_history_length:
        raise ConfigurationError(
            f"history_length no puede superar {_settings.max_history_length}",
            field="history_length", value=config.history_length,
        )
    return config


# ─── WebSocket endpoint para streaming OHLCV ──────────────────────────

@router.websocket("/ws/ohlcv")
async def ohlcv_stream(
    websocket: WebSocket,
    symbol: Optional[str] = None,
    timeframes: Optional[str] = None,
) -> None:
    """
    Streaming de velas en formato TradingView Bar.
    Al conectar se envía un snapshot de la secuencia actual del símbolo;
    luego cada tick llega como mensaje {"type": "ohlcv", ...}.
    """
    if _ws_manager is None or _simulations is None:
        await websocket.close(code=1011, reason="Server not ready")
        return

    symbol = symbol or (_settings.simulation_symbols[0] if _settings.simulation_symbols else "")
    client_filter = ClientFilter.parse(symbol, timeframes)
    await _ws_manager.connect(websocket, client_filter)
    try:
        usecase = _simulations.get(symbol)
        if usecase is not None and usecase.config is not None:
            candles = usecase.candles[-_settings.max_candles_response:]
            await websocket.send_json({
                "type": "snapshot",
                "symbol": symbol,
                "timeframe": usecase.config.timeframe,
                "bars": [c.to_dict() for c in candles],
            })

        while True:
            try:
                data = await websocket.receive_text()
            except WebSocketDisconnect:
                break
            if data.strip().lower() == "ping":
                await websocket.send_text("pong")
            else:
                logger.debug("Mensaje de cliente WS: %s", data[:100])
    finally:
        _ws_manager.disconnect(websocket)


# ─── REST endpoints de estado ──────────────────────────────────────────

@router.get("/api/health", response_model=HealthResponse)
async def health_check() -> dict:
    """Health check para monitoreo."""
    return {"status": "ok", "service": "candlesim"}


@router.get("/api/status")
async def system_status() -> dict:
    """Estado de todas las simulaciones activas."""
    return {
        "simulations": _simulations.snapshot() if _simulations else {},
        "ws_clients": _ws_manager.client_count if _ws_manager else 0,
    }


@router.get("/api/candles", response_model=CandlesResponse)
async def get_candles(
    symbol: str = Query(..., description="Símbolo simulado"),
    count: int = Query(default=200, ge=1, description="Número de velas"),
):
    """Obtener las últimas N velas de una simulación en curso."""
    if _simulations is None:
        return JSONResponse(status_code=503, content={"error": "Server not ready"})

    usecase = _simulations.get(symbol)
    if usecase is None or usecase.config is None:
        return JSONResponse(
            status_code=404,
            content={"error": f"Símbolo '{symbol}' no está siendo simulado"},
        )

    count = min(count, _settings.max_candles_response)
    candles = usecase.candles[-count:]
    return {
        "symbol": symbol,
        "timeframe": usecase.config.timeframe,
        "count": len(candles),
        "candles": [c.to_dict() for c in candles],
    }


# ─── REST endpoints de simulación ─────────────────────────────────────

@router.post("/api/simulations", response_model=SimulationResponse)
async def start_simulation(body: SimulationRequest):
    """Iniciar una simulación o reconfigurarla si ya existe."""
    if _simulations is None:
        return JSONResponse(status_code=503, content={"error": "Server not ready"})

    try:
        config = build_config(body)
    except ConfigurationError as exc:
        logger.warning("Configuración rechazada para '%s': %s", body.symbol, exc.message)
        return JSONResponse(status_code=422, content=exc.to_dict())

    candles = await _simulations.start(config)
    return {
        "symbol": config.symbol,
        "timeframe": config.timeframe,
        "candles": len(candles),
        "last_candle": candles[-1].to_dict() if candles else None,
        "config": config.to_dict(),
    }


@router.delete("/api/simulations")
async def stop_simulation(symbol: str = Query(..., description="Símbolo a detener")):
    """Detener una simulación. Idempotente."""
    if _simulations is None:
        return JSONResponse(status_code=503, content={"error": "Server not ready"})
    stopped = await _simulations.stop(symbol)
    return {"symbol": symbol, "stopped": stopped}


# ─── UDF (TradingView) ─────────────────────────────────────────────────

@router.get("/udf/config")
async def udf_config() -> dict:
    return {
        "supported_resolutions": SUPPORTED_RESOLUTIONS,
        "supports_group_request": False,
        "supports_marks": False,
        "supports_search": True,
        "supports_timescale_marks": False,
        "supports_time": True,
    }


@router.get("/udf/time")
async def udf_time() -> int:
    """Hora del servidor en segundos."""
    return _clock.now_ms() // 1000 if _clock else 0


@router.get("/udf/symbols")
async def udf_resolve(symbol: str = Query(...)) -> dict:
    return {
        "name": symbol,
        "ticker": symbol,
        "description": f"{symbol} (simulado)",
        "type": "crypto",
        "exchange": EXCHANGE,
        "listed_exchange": EXCHANGE,
        "minmov": 1,
        "pricescale": 10_000,
        "timezone": TIMEZONE,
        "session": "24x7",
        "has_intraday": True,
        "has_daily": True,
        "has_weekly_and_monthly": True,
        "supported_resolutions": SUPPORTED_RESOLUTIONS,
    }


@router.get("/udf/history")
async def udf_history(
    symbol: str = Query(...),
    resolution: str = Query(...),
    from_: int = Query(..., alias="from"),
    to: int = Query(...),
    countback: Optional[int] = Query(default=None, ge=1),
) -> dict:
    """Barras históricas deterministas en formato columnar UDF."""
    if _udf_history is None:
        return {"s": "error", "errmsg": "Server not ready"}
    return _udf_history.execute(symbol, resolution, from_, to, countback).to_dict()


@router.get("/udf/search")
async def udf_search(
    query: str = Query(default=""),
    limit: int = Query(default=30, ge=1),
) -> list:
    """Búsqueda de símbolos entre las simulaciones activas."""
    symbols = _simulations.symbols() if _simulations else []
    needle = query.strip().upper()
    matches = [s for s in sorted(symbols) if needle in s.upper()]
    return [
        {
            "symbol": symbol,
            "full_name": symbol,
            "description": f"{symbol} (simulado)",
            "exchange": EXCHANGE,
            "ticker": symbol,
            "type": "crypto",
        }
        for symbol in matches[:limit]
    ]
