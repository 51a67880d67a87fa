import os
from dataclasses import dataclass
from typing import Any, Callable

SERVICE_NAME = "receipt-points"


def _flag(raw: str) -> bool:
    if raw.strip().lower() in ("1", "true", "yes", "on"):
        return True
    if raw.strip().lower() in ("0", "false", "no", "off", ""):
        return False
    raise ValueError(raw)


def _env(name: str, default: Any, cast: Callable[[str], Any]):
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except Exception as e:
        raise ValueError(f"env var {name!r}={raw!r} not valid for {cast.__name__}") from e


@dataclass(frozen=True)
class Settings:
    service: str = SERVICE_NAME
    host: str = "0.0.0.0"
    port: int = 5000
    threaded: bool = True
    log_level: str = "INFO"
    json_logs: bool = False
    # reject receipts with unscorable items or amounts at submission time
    strict_amounts: bool = False


def load_settings() -> Settings:
    """ Reads the settings from the environment, falling back to the defaults above """
    return Settings(
        host=_env("HOST", Settings.host, str),
        port=_env("PORT", Settings.port, int),
        threaded=_env("THREADED", Settings.threaded, _flag),
        log_level=_env("LOG_LEVEL", Settings.log_level, str),
        json_logs=_env("JSON_LOGS", Settings.json_logs, _flag),
        strict_amounts=_env("STRICT_AMOUNTS", Settings.strict_amounts, _flag),
    )
