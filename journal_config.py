# journal_config.py
"""
Central configuration for the MindScribe dashboard.

- JOURNAL_API_BASE_URL: base URL of the Journal API (entries, goals, chat, analysis).
- JOURNAL_API_TIMEOUT: optional HTTP timeout in seconds. Unset means no timeout.
- DEMO_USER_ID: fixed identity used in demo mode.
- DISPLAY_TIMEZONE: zone that entry timestamps are shown in.
- CHAT_CONTEXT_WINDOW / CHAT_CONTEXT_SEPARATOR: how recent entries are fed to the chat.
"""

import os


def _bool_env(name: str, default: str = "false") -> bool:
    value = os.getenv(name, default).strip().lower()
    return value in {"1", "true", "yes", "y"}


def _optional_float_env(name: str) -> float | None:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


# Base URL for the Journal API
JOURNAL_API_BASE_URL: str = os.getenv(
    "JOURNAL_API_BASE_URL", "https://mindscribe-api-8laf.onrender.com"
).rstrip("/")

# HTTP timeout (None = wait forever)
JOURNAL_API_TIMEOUT: float | None = _optional_float_env("JOURNAL_API_TIMEOUT")

# Identity used when nobody is signed in
DEMO_USER_ID: str = os.getenv("DEMO_USER_ID", "demo_user")

DISPLAY_TIMEZONE: str = os.getenv("DISPLAY_TIMEZONE", "Asia/Kolkata")

try:
    CHAT_CONTEXT_WINDOW: int = int(os.getenv("CHAT_CONTEXT_WINDOW", "5"))
except ValueError:
    CHAT_CONTEXT_WINDOW = 5

CHAT_CONTEXT_SEPARATOR: str = os.getenv("CHAT_CONTEXT_SEPARATOR", " | ")

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# One JSON object per log line instead of human-readable output
LOG_JSON: bool = _bool_env("LOG_JSON", "false")
