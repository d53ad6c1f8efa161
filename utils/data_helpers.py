"""General data processing and formatting utilities."""

import io
from typing import Any


def maybe_load_dotenv() -> None:
    """Attempt to load environment variables from .env file."""
    try:
        from dotenv import load_dotenv
        load_dotenv(override=False)
    except Exception:
        return


def as_float(x: Any) -> float | None:
    """Safely convert a value to float."""
    try:
        return float(x) if x is not None else None
    except Exception:
        return None


def frame_csv_bytes(df: Any) -> bytes:
    """Convert a DataFrame to CSV bytes, keeping its column order."""
    if df is None or getattr(df, "empty", True):
        return b""
    buf = io.StringIO()
    df.to_csv(buf, index=False)
    return buf.getvalue().encode("utf-8")


def format_interval_ms(interval_ms: int) -> str:
    """Human-readable refresh interval, e.g. ``90s`` or ``1 min``."""
    seconds = max(0, int(interval_ms)) / 1000
    if seconds < 60 or seconds % 60:
        return f"{seconds:g}s"
    return f"{int(seconds // 60)} min"


def init_session_state(defaults: dict[str, Any]) -> None:
    """Initialize multiple session state keys with defaults if not already set.

    Example:
        init_session_state({
            "rre_controller": None,
            "rre_last_apply_ok": True,
        })
    """
    import streamlit as st
    for key, default in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = default
