"""
Runtime settings, read from environment variables.

CHESS_RELAY_HOST       interface to bind (default 0.0.0.0)
CHESS_RELAY_PORT       fixed TCP port of the relay (default 8080)
CHESS_RELAY_LOG_LEVEL  logging level name (default INFO)
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from src.core.exceptions import ConfigError

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        raw_port = env.get("CHESS_RELAY_PORT", str(DEFAULT_PORT))
        try:
            port = int(raw_port)
        except ValueError as exc:
            raise ConfigError(f"CHESS_RELAY_PORT must be an integer, got {raw_port!r}.") from exc
        if not 0 < port < 65536:
            raise ConfigError(f"CHESS_RELAY_PORT out of range: {port}.")

        log_level = env.get("CHESS_RELAY_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigError(f"Unknown CHESS_RELAY_LOG_LEVEL: {log_level!r}.")

        return cls(
            host=env.get("CHESS_RELAY_HOST", DEFAULT_HOST),
            port=port,
            log_level=log_level,
        )
