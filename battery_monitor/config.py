import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from dotenv import load_dotenv  # type: ignore

from battery_monitor.telemetry.range_estimator import RangeConfig
from battery_monitor.thingspeak.client import THINGSPEAK_BASE_URL
from battery_monitor.thingspeak.decoder import FieldLayout

load_dotenv()

REQUIRED_CREDENTIALS = (
    "THINGSPEAK_CHANNEL_ID",
    "THINGSPEAK_READ_API_KEY",
    "THINGSPEAK_WRITE_API_KEY",
)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
PORT = int(os.getenv("PORT", "3000"))
STATIC_DIR = os.getenv("STATIC_DIR", "public") or None
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]


class ConfigError(RuntimeError):
    pass


class MissingCredentialsError(ConfigError):
    def __init__(self, missing: List[str]):
        self.missing = missing
        super().__init__(f"Missing ThingSpeak credentials: {', '.join(missing)}")


@dataclass(frozen=True)
class Settings:
    channel_id: str
    read_api_key: str
    write_api_key: str
    base_url: str = THINGSPEAK_BASE_URL
    timeout: float = 10.0
    refresh_interval: float = 15.0
    history_results: int = 10
    thresholds_file: Optional[str] = None
    layout: FieldLayout = FieldLayout()
    range: RangeConfig = RangeConfig()
    dashboard_polling: bool = True
    static_dir: Optional[str] = "public"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


def _number(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{key} must be a number, got {raw!r}")


def _flag(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build settings from the environment (.env already loaded).
    Raises MissingCredentialsError when any ThingSpeak credential is absent.
    """
    env = os.environ if env is None else env

    missing = [key for key in REQUIRED_CREDENTIALS if not env.get(key)]
    if missing:
        raise MissingCredentialsError(missing)

    range_mode = env.get("RANGE_MODE", "model").strip().lower()
    if range_mode not in ("model", "percent"):
        raise ConfigError(f"RANGE_MODE must be 'model' or 'percent', got {range_mode!r}")

    history_results = int(_number(env, "HISTORY_RESULTS", 10))
    if history_results < 1:
        raise ConfigError("HISTORY_RESULTS must be at least 1")

    refresh_interval = _number(env, "REFRESH_INTERVAL_SECONDS", 15.0)
    if refresh_interval <= 0:
        raise ConfigError("REFRESH_INTERVAL_SECONDS must be positive")

    power_field = env.get("THINGSPEAK_POWER_FIELD", "field3").strip() or None

    return Settings(
        channel_id=env["THINGSPEAK_CHANNEL_ID"],
        read_api_key=env["THINGSPEAK_READ_API_KEY"],
        write_api_key=env["THINGSPEAK_WRITE_API_KEY"],
        base_url=env.get("THINGSPEAK_BASE_URL", THINGSPEAK_BASE_URL),
        timeout=_number(env, "THINGSPEAK_TIMEOUT", 10.0),
        refresh_interval=refresh_interval,
        history_results=history_results,
        thresholds_file=env.get("THRESHOLDS_FILE") or None,
        layout=FieldLayout(power=power_field),
        range=RangeConfig(
            capacity_kwh=_number(env, "BATTERY_CAPACITY_KWH", 2.0),
            efficiency_km_per_kwh=_number(env, "EFFICIENCY_KM_PER_KWH", 50.0),
            min_temp=_number(env, "RANGE_MIN_TEMP", 0.0),
            max_temp=_number(env, "RANGE_MAX_TEMP", 45.0),
            mode=range_mode,
        ),
        dashboard_polling=_flag(env, "DASHBOARD_POLLING", True),
        static_dir=env.get("STATIC_DIR", "public") or None,
        cors_origins=[o.strip() for o in env.get("CORS_ORIGINS", "*").split(",") if o.strip()],
    )
