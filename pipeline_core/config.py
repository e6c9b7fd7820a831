"""
Runtime configuration for the pipeline tool.

Layout defaults live on LayoutConfig in models.py and mirror the editor's
auto-arrange settings. Service settings can be overridden through environment
variables.
"""

import logging
import os

from .models import LayoutConfig

# Service settings
HOST = os.environ.get("PIPELINE_DAG_HOST", "127.0.0.1")
PORT = int(os.environ.get("PIPELINE_DAG_PORT", "8765"))
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        "PIPELINE_DAG_CORS_ORIGINS",
        "http://localhost:5173,http://localhost:3000,http://127.0.0.1:5173",
    ).split(",")
    if origin.strip()
]
LOG_LEVEL = os.environ.get("PIPELINE_DAG_LOG_LEVEL", "INFO")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def default_layout_config() -> LayoutConfig:
    """Layout settings used when a caller passes no config."""
    return LayoutConfig()


def configure_logging(level: str | None = None) -> None:
    """Apply the process-wide logging setup used by the API and CLI."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT,
    )
