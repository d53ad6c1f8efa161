"""RRE server API utilities for fetching filter lists and evaluation data."""

import logging
from collections.abc import Mapping
from typing import Any

import requests

from utils.config_utils import DEFAULT_HTTP_TIMEOUT_S, ENDPOINT_DEFAULTS, join_endpoint
from utils.filter_catalog import ActiveFilterRequest

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Raised when a request to the RRE server fails or returns an unusable body."""

    def __init__(self, message: str, *, url: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class RREClient:
    """Stateless request/response access to the RRE server endpoints."""

    def __init__(
        self,
        *,
        base_url: str = "",
        endpoints: Mapping[str, str] | None = None,
        timeout_s: float = DEFAULT_HTTP_TIMEOUT_S,
        session: requests.Session | None = None,
    ) -> None:
        given = dict(endpoints or {})
        self.endpoints: dict[str, str] = {
            key: join_endpoint(base_url, given.get(key) or default_path)
            for key, (default_path, _) in ENDPOINT_DEFAULTS.items()
        }
        self.timeout_s = float(timeout_s)
        self.session = session if session is not None else requests.Session()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _check(self, r: requests.Response, url: str) -> Any:
        if r.status_code >= 400:
            text_preview = ""
            try:
                text_preview = str(getattr(r, "text", "") or "")
            except Exception:
                text_preview = ""
            logger.error("Error from URL %s - status %s", url, r.status_code)
            raise GatewayError(
                f"RRE server error (status {r.status_code}): {text_preview[:500]}",
                url=url,
                status_code=r.status_code,
            )
        try:
            return r.json()
        except ValueError as exc:
            logger.error("Error from URL %s - response is not JSON", url)
            raise GatewayError("RRE server returned a non-JSON body", url=url, status_code=r.status_code) from exc

    def _get_json(self, key: str, params: dict[str, Any] | None = None) -> Any:
        url = self.endpoints[key]
        try:
            r = self.session.get(url, params=params, timeout=self.timeout_s)
        except requests.RequestException as exc:
            logger.error("Error from URL %s - %s", url, exc)
            raise GatewayError(f"Request to {url} failed: {exc}", url=url) from exc
        return self._check(r, url)

    def _get_names(self, key: str, params: dict[str, Any] | None = None) -> list[str]:
        data = self._get_json(key, params)
        if not isinstance(data, list):
            logger.error("Error from URL %s - expected a JSON array, got %s", self.endpoints[key], type(data).__name__)
            raise GatewayError("Expected a JSON array of names", url=self.endpoints[key])
        return [str(x) for x in data if x is not None]

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    def get_data(self) -> Any:
        """Fetch the full, unfiltered evaluation dataset."""
        return self._get_json("data_url")

    def get_metric_list(self) -> list[str]:
        return self._get_names("metric_list_url")

    def get_version_list(self) -> list[str]:
        return self._get_names("version_list_url")

    def get_corpus_list(self) -> list[str]:
        return self._get_names("corpus_list_url")

    def get_topic_list(self, corpus: str) -> list[str]:
        return self._get_names("topic_list_url", {"corpus": corpus})

    def get_query_group_list(self, corpus: str, topic: str) -> list[str]:
        return self._get_names("query_group_list_url", {"corpus": corpus, "topic": topic})

    def filter_evaluation_data(self, request: ActiveFilterRequest) -> Any:
        """POST the active filter and return the filtered evaluation dataset."""
        url = self.endpoints["filter_url"]
        try:
            r = self.session.post(
                url,
                json=request.to_payload(),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout_s,
            )
        except requests.RequestException as exc:
            logger.error("Error filtering content - %s", exc)
            raise GatewayError(f"Filter request to {url} failed: {exc}", url=url) from exc
        return self._check(r, url)


def build_client(config: Mapping[str, Any], session: requests.Session | None = None) -> RREClient:
    """Create a client from a ``resolve_dashboard_config`` result."""
    return RREClient(
        base_url=str(config.get("base_url") or ""),
        endpoints=config.get("endpoints") or {},
        timeout_s=float(config.get("http_timeout_s") or DEFAULT_HTTP_TIMEOUT_S),
        session=session,
    )
