from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


def _env_str(key: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(key)
    if v is None:
        return default
    v = v.strip()
    return v if v else default


def _env_bool(key: str, default: bool) -> bool:
    v = _env_str(key)
    if v is None:
        return default
    return v.lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class Settings:
    # Logging
    log_level: str
    log_json: bool

    # Response exports
    payload_column: str
    archived_column: str
    csv_encoding: Optional[str]

    @staticmethod
    def from_env() -> "Settings":
        # Read configuration from environment variables.
        # Scoring constants are not configurable: they are part of the output.
        return Settings(
            log_level=_env_str("UXSCORE_LOG_LEVEL", "INFO") or "INFO",
            log_json=_env_bool("UXSCORE_LOG_JSON", True),

            payload_column=_env_str("UXSCORE_PAYLOAD_COLUMN", "Payload") or "Payload",
            archived_column=_env_str("UXSCORE_ARCHIVED_COLUMN", "archived") or "archived",
            csv_encoding=_env_str("UXSCORE_CSV_ENCODING"),
        )
