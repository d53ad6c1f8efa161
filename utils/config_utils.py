"""Configuration helpers for resolving dashboard settings across sources."""

from collections.abc import Mapping
from typing import Any

DEFAULT_REQUEST_INTERVAL_MS = 60_000
DEFAULT_HTTP_TIMEOUT_S = 30.0

# endpoint key -> (default path, flat secrets / env variable name)
ENDPOINT_DEFAULTS: dict[str, tuple[str, str]] = {
    "data_url": ("/evaluation", "RRE_DATA_URL"),
    "metric_list_url": ("/metrics", "RRE_METRIC_LIST_URL"),
    "version_list_url": ("/versions", "RRE_VERSION_LIST_URL"),
    "corpus_list_url": ("/corpora", "RRE_CORPUS_LIST_URL"),
    "topic_list_url": ("/topics", "RRE_TOPIC_LIST_URL"),
    "query_group_list_url": ("/queryGroups", "RRE_QUERY_GROUP_LIST_URL"),
    "filter_url": ("/filter", "RRE_FILTER_URL"),
}


def normalize_base_url(raw: str | None) -> str:
    """Normalize user-provided backend base URL values."""
    if raw is None:
        return ""

    cleaned = str(raw).strip()
    if not cleaned:
        return ""

    return cleaned.rstrip("/")


def join_endpoint(base_url: str, endpoint: str) -> str:
    """Join a relative endpoint path onto the base URL; absolute URLs pass through."""
    ep = str(endpoint or "").strip()
    if ep.lower().startswith(("http://", "https://")):
        return ep
    base = normalize_base_url(base_url)
    if not base:
        return ep
    if not ep:
        return base
    return f"{base}/{ep.lstrip('/')}"


def get_nested(mapping: Mapping[str, Any] | None, path: tuple[str, ...]) -> Any:
    """Safely fetch a nested mapping value for a tuple path."""
    current: Any = mapping
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def _clean_candidate(value: Any) -> str:
    if value is None:
        return ""
    out = str(value).strip()
    return out


def _resolve_value(candidates: list[tuple[str, Any]]) -> tuple[str, str]:
    for source, raw in candidates:
        value = _clean_candidate(raw)
        if value:
            return value, source
    return "", "missing"


def _positive_number(raw: str, default: float) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def resolve_dashboard_config(
    session: Mapping[str, Any] | None,
    secrets: Mapping[str, Any] | None,
    env: Mapping[str, Any] | None,
) -> dict[str, Any]:
    """Resolve backend URLs and timings from session, secrets, and environment sources."""
    session_map = session if isinstance(session, Mapping) else {}
    secrets_map = secrets if isinstance(secrets, Mapping) else {}
    env_map = env if isinstance(env, Mapping) else {}

    def lookup(session_key: str, flat_key: str, nested_key: str) -> tuple[str, str]:
        return _resolve_value(
            [
                ("session", session_map.get(session_key)),
                ("secrets", secrets_map.get(flat_key)),
                ("secrets", get_nested(secrets_map, ("rre", nested_key))),
                ("env", env_map.get(flat_key)),
            ]
        )

    base_url_raw, base_source = lookup("rre_base_url", "RRE_BASE_URL", "base_url")
    base_url = normalize_base_url(base_url_raw)

    sources: dict[str, str] = {"base_url": base_source}
    endpoints: dict[str, str] = {}
    for key, (default_path, flat_key) in ENDPOINT_DEFAULTS.items():
        raw, source = lookup(f"rre_{key}", flat_key, key)
        if not raw:
            raw, source = default_path, "default"
        endpoints[key] = join_endpoint(base_url, raw)
        sources[key] = source

    interval_raw, interval_source = lookup(
        "rre_request_interval_ms", "RRE_REQUEST_INTERVAL_MS", "request_interval_ms"
    )
    request_interval_ms = int(_positive_number(interval_raw, DEFAULT_REQUEST_INTERVAL_MS))
    sources["request_interval_ms"] = interval_source if interval_raw else "default"

    timeout_raw, timeout_source = lookup("rre_http_timeout_s", "RRE_HTTP_TIMEOUT_S", "http_timeout_s")
    http_timeout_s = _positive_number(timeout_raw, DEFAULT_HTTP_TIMEOUT_S)
    sources["http_timeout_s"] = timeout_source if timeout_raw else "default"

    return {
        "base_url": base_url,
        "endpoints": endpoints,
        "request_interval_ms": request_interval_ms,
        "http_timeout_s": http_timeout_s,
        "sources": sources,
    }
