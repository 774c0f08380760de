"""
config.py — Walkscore settings
===============================
Server-side knobs, read once from the environment (a local .env is loaded
first). Scoring constants live in scoring_engine.py and are not tunable
from here.
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


def _list_env(name: str, sep: str = ",") -> list[str]:
    raw = os.environ.get(name, "")
    return [item.strip() for item in raw.split(sep) if item.strip()]


# Server
PORT      = _int_env("PORT", 5000)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# CORS: comma-separated list of allowed origins; empty means same-origin only
CORS_ORIGINS = _list_env("CORS_ORIGINS")

# Rate limiting (flask-limiter syntax, ";"-separated for defaults)
RATE_LIMITS      = _list_env("RATE_LIMITS", sep=";") or ["200 per hour", "60 per minute"]
SCORE_RATE_LIMIT = os.environ.get("SCORE_RATE_LIMIT", "60 per minute")

# Upper bound on alternatives accepted by /score/batch
MAX_BATCH_ROUTES = _int_env("MAX_BATCH_ROUTES", 10)

LOG_FORMAT  = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str | None = None) -> logging.Logger:
    """
    Configure console logging once and return the "walkscore" logger.
    Module loggers (scoring_engine, app) propagate to the root handler; a
    root that already has handlers (gunicorn, pytest) is left alone.
    """
    logger = logging.getLogger("walkscore")
    root = logging.getLogger()
    if root.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    root.addHandler(handler)
    root.setLevel(level or LOG_LEVEL)
    return logger
