# Rev 1.0.0

"""Client settings resolved from the environment."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional


DEFAULT_API_URL = "http://localhost:3000"
DEFAULT_TIMEOUT_S = 10.0
DEFAULT_DEBOUNCE_MS = 500
DEFAULT_PAGE_LIMIT = 50


@dataclass(frozen=True)
class ClientSettings:
    api_url: str = DEFAULT_API_URL
    api_token: Optional[str] = None
    timeout_s: float = DEFAULT_TIMEOUT_S
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    page_limit: int = DEFAULT_PAGE_LIMIT


def _read_int(env: Mapping[str, str], name: str, default: int, *, minimum: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def _read_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def load_settings(env: Optional[Mapping[str, str]] = None) -> ClientSettings:
    """Build settings from ``STOCKDESK_*`` variables, falling back to defaults."""
    env = os.environ if env is None else env
    token = (env.get("STOCKDESK_API_TOKEN") or "").strip() or None
    return ClientSettings(
        api_url=(env.get("STOCKDESK_API_URL") or DEFAULT_API_URL).rstrip("/"),
        api_token=token,
        timeout_s=_read_float(env, "STOCKDESK_API_TIMEOUT", DEFAULT_TIMEOUT_S),
        debounce_ms=_read_int(env, "STOCKDESK_SEARCH_DEBOUNCE_MS", DEFAULT_DEBOUNCE_MS, minimum=0),
        page_limit=_read_int(env, "STOCKDESK_PAGE_LIMIT", DEFAULT_PAGE_LIMIT, minimum=1),
    )
