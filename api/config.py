# api/config.py
"""
Process configuration, read once from the environment at startup.
A .env file in the working directory is loaded first when present.
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

from api.normalizer import WrapStyle

DEFAULT_EXECUTOR_URL = "https://api.jdoodle.com/v1/execute"
DEFAULT_FAILURE_MARKERS = (
    "main class not found",
    "could not find or load main class",
    "main method not found",
)


class ConfigError(Exception):
    """Raised when the environment cannot produce a usable configuration."""


def _get(env: Mapping[str, str], key: str, default: str = "") -> str:
    return (env.get(key) or default).strip()


def _flag(env: Mapping[str, str], key: str) -> bool:
    return _get(env, key, "false").lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class Settings:
    client_id: str
    client_secret: str
    port: int = 3000
    host: str = "0.0.0.0"
    executor_url: str = DEFAULT_EXECUTOR_URL
    language: str = "kotlin"
    version_index: str = "0"
    request_timeout: float = 15.0
    wrap_style: WrapStyle = WrapStyle.FUNCTION
    failure_markers: Tuple[str, ...] = field(default=DEFAULT_FAILURE_MARKERS)
    debug: bool = False


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from `env` (defaults to os.environ after loading .env).
    Missing executor credentials are fatal: there is no useful way to run
    without them.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    client_id = _get(env, "JDOODLE_CLIENT_ID")
    client_secret = _get(env, "JDOODLE_CLIENT_SECRET")
    missing = [
        name
        for name, value in (("JDOODLE_CLIENT_ID", client_id), ("JDOODLE_CLIENT_SECRET", client_secret))
        if not value
    ]
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

    raw_style = _get(env, "WRAP_STYLE", WrapStyle.FUNCTION.value).lower()
    try:
        wrap_style = WrapStyle(raw_style)
    except ValueError:
        choices = ", ".join(s.value for s in WrapStyle)
        raise ConfigError(f"WRAP_STYLE must be one of: {choices} (got {raw_style!r})") from None

    raw_markers = _get(env, "FAILURE_MARKERS")
    if raw_markers:
        failure_markers = tuple(m.strip() for m in raw_markers.split(",") if m.strip())
    else:
        failure_markers = DEFAULT_FAILURE_MARKERS

    try:
        port = int(_get(env, "PORT", "3000"))
        request_timeout = float(_get(env, "REQUEST_TIMEOUT", "15"))
    except ValueError as e:
        raise ConfigError(f"Invalid numeric setting: {e}") from e

    return Settings(
        client_id=client_id,
        client_secret=client_secret,
        port=port,
        host=_get(env, "HOST", "0.0.0.0"),
        executor_url=_get(env, "JDOODLE_URL", DEFAULT_EXECUTOR_URL),
        language=_get(env, "JDOODLE_LANGUAGE", "kotlin"),
        version_index=_get(env, "JDOODLE_VERSION_INDEX", "0"),
        request_timeout=request_timeout,
        wrap_style=wrap_style,
        failure_markers=failure_markers,
        debug=_flag(env, "DEBUG"),
    )
