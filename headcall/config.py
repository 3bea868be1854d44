# Role: Central configuration module. Loads .env into environment variables and computes runtime settings
# (DEBUG, engine location, timeouts, head budgets). Importers read headcall.config.<NAME> at call time,
# so values stay correct even if load_env() runs after import.

from __future__ import annotations

import os
from dotenv import load_dotenv

DEBUG: bool = False

ENGINE_URL: str = "http://127.0.0.1:8001"
SERVICE_URL: str = "http://127.0.0.1:8000"

DISPATCH_TIMEOUT_SECONDS: float = 10.0
HEALTH_TIMEOUT_SECONDS: float = 3.0

NULL_SENTINEL: str = "<|null|>"
MAX_ARG_HEADS: int = 6
MAX_HISTORY: int = 6

ARG_HEAD_MAX_TOKENS: int = 16
CONTENT_HEAD_MAX_TOKENS: int = 128
TEMPERATURE: float = 0.0


def _float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def load_env() -> None:
    """
    Load .env into os.environ, then recompute every setting.
    MAX_ARG_HEADS and MAX_HISTORY are part of the model contract and are not overridable.
    """
    global DEBUG, ENGINE_URL, SERVICE_URL
    global DISPATCH_TIMEOUT_SECONDS, HEALTH_TIMEOUT_SECONDS, NULL_SENTINEL
    global ARG_HEAD_MAX_TOKENS, CONTENT_HEAD_MAX_TOKENS, TEMPERATURE

    load_dotenv()
    # Key line: accept common truthy values.
    DEBUG = os.getenv("DEBUG", "0").lower() in {"1", "true", "yes"}

    ENGINE_URL = os.getenv("HEADCALL_ENGINE_URL", ENGINE_URL).rstrip("/")
    SERVICE_URL = os.getenv("HEADCALL_SERVICE_URL", SERVICE_URL).rstrip("/")

    DISPATCH_TIMEOUT_SECONDS = _float("HEADCALL_DISPATCH_TIMEOUT", DISPATCH_TIMEOUT_SECONDS)
    HEALTH_TIMEOUT_SECONDS = _float("HEADCALL_HEALTH_TIMEOUT", HEALTH_TIMEOUT_SECONDS)

    NULL_SENTINEL = os.getenv("HEADCALL_NULL_SENTINEL", NULL_SENTINEL)

    ARG_HEAD_MAX_TOKENS = _int("HEADCALL_ARG_HEAD_MAX_TOKENS", ARG_HEAD_MAX_TOKENS)
    CONTENT_HEAD_MAX_TOKENS = _int("HEADCALL_CONTENT_HEAD_MAX_TOKENS", CONTENT_HEAD_MAX_TOKENS)
    TEMPERATURE = _float("HEADCALL_TEMPERATURE", TEMPERATURE)
