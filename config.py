"""
Application Settings
====================
Environment-driven configuration shared by the Streamlit app and the export API.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional


FORM_STATE_KEY = "qc-funding-calc"
RESULT_KEY = "qc-funding-result"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    scoring_api_url: str
    report_api_url: str
    scoring_timeout_seconds: Optional[float]
    state_dir: str
    storage_backend: str
    environment: str
    log_level: str
    host: str
    port: int


def _parse_timeout(raw: str) -> Optional[float]:
    raw = (raw or "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None


def _parse_port(raw: str, default: int = 8000) -> int:
    try:
        port = int((raw or "").strip())
    except ValueError:
        return default
    return port if 0 < port < 65536 else default


def get_settings() -> Settings:
    return Settings(
        scoring_api_url=os.getenv("SCORING_API_URL", "http://20.119.101.162/calculate"),
        report_api_url=os.getenv("REPORT_API_URL", "http://localhost:8000/api/report-pdf"),
        scoring_timeout_seconds=_parse_timeout(os.getenv("SCORING_TIMEOUT_SECONDS", "30")),
        state_dir=os.getenv("STATE_DIR", ".funding_calculator"),
        storage_backend=os.getenv("STORAGE_BACKEND", "session").strip().lower(),
        environment=os.getenv("ENVIRONMENT", "local"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_parse_port(os.getenv("PORT", "8000")),
    )


def configure_logging(level: str = "INFO") -> None:
    """Install one stream handler on the root logger (idempotent across Streamlit reruns)."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if any(getattr(h, "_funding_calculator", False) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._funding_calculator = True  # type: ignore[attr-defined]
    root.addHandler(handler)
