import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request  # type: ignore
from fastapi.exceptions import RequestValidationError  # type: ignore
from fastapi.middleware.cors import CORSMiddleware  # type: ignore
from fastapi.responses import JSONResponse  # type: ignore
from fastapi.staticfiles import StaticFiles  # type: ignore

from battery_monitor import config
from battery_monitor.config import ConfigError, Settings, load_settings
from battery_monitor.models.api import INVALID_MODE_MESSAGE, ErrorResponse, HealthResponse
from battery_monitor.routers import battery, dashboard
from battery_monitor.services.dashboard_service import DashboardMonitor
from battery_monitor.telemetry.thresholds import ThresholdConfigError, load_threshold_table
from battery_monitor.thingspeak.client import ThingSpeakClient

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    client: Optional[ThingSpeakClient] = None,
) -> FastAPI:
    """
    Build the API. Settings are resolved at startup when not given, so a
    missing credential stops the server before it accepts requests.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        resolved = settings or load_settings()
        thresholds = load_threshold_table(resolved.thresholds_file)
        thingspeak = client or ThingSpeakClient.from_settings(resolved)

        monitor = DashboardMonitor(
            thingspeak,
            thresholds=thresholds,
            range_config=resolved.range,
            layout=resolved.layout,
            interval=resolved.refresh_interval,
        )

        app.state.settings = resolved
        app.state.thingspeak = thingspeak
        app.state.monitor = monitor

        logger.info(f"📊 ThingSpeak channel: {resolved.channel_id}")
        if resolved.dashboard_polling:
            monitor.start()

        yield

        await monitor.stop()
        await thingspeak.aclose()

    app = FastAPI(title="EV Battery Monitor", lifespan=lifespan)

    origins = settings.cors_origins if settings else config.CORS_ORIGINS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError):
        message = INVALID_MODE_MESSAGE if request.url.path == "/api/mode" else "Invalid request"
        body = ErrorResponse(message=message)
        return JSONResponse(status_code=400, content=body.model_dump(exclude_none=True))

    @app.get("/api/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(
            message="EV Battery Monitor API is running",
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    app.include_router(battery.router)
    app.include_router(dashboard.router)

    static_dir = settings.static_dir if settings else config.STATIC_DIR
    if static_dir and Path(static_dir).is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    return app


app = create_app()


def run() -> None:
    import uvicorn  # type: ignore

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        settings = load_settings()
        load_threshold_table(settings.thresholds_file)
    except (ConfigError, ThresholdConfigError) as e:
        logger.critical(f"❌ {e}")
        raise SystemExit(1)

    logger.info(f"🚀 Server starting on http://localhost:{config.PORT}")
    uvicorn.run("battery_monitor.main:app", host="0.0.0.0", port=config.PORT)


if __name__ == "__main__":
    run()
