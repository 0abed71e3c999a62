"""
app/connectors/base.py

Base connector abstraction and shared HTTP mechanics.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)


class ConnectorRequestError(RuntimeError):
    """
    Raised when a connector cannot reach its upstream or decode its reply.
    """


class BaseConnector:
    """
    Shared single-attempt HTTP behaviour for outbound provider calls.

    Each request is made once with a fixed timeout. Non-2xx responses are
    logged and reported as ``None``; transport failures and undecodable
    bodies raise :class:`ConnectorRequestError`.
    """

    source: str

    def __init__(
        self,
        *,
        source: str,
        timeout_seconds: float,
        session: requests.Session | None = None,
    ) -> None:
        self.source = source
        self._session = session or requests.Session()
        self._timeout_seconds = timeout_seconds

    def _request_json(
        self,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any | None:
        """
        Execute one HTTP request and return parsed JSON, or None for non-2xx replies.
        """

        try:
            response = self._session.request(
                method=method,
                url=url,
                params=params,
                headers=headers,
                timeout=self._timeout_seconds,
            )
        except (requests.Timeout, requests.ConnectionError) as exc:
            logger.error(
                "Connector request failed source=%s url=%s error=%s",
                self.source,
                url,
                exc,
            )
            raise ConnectorRequestError(f"{self.source}: upstream unreachable.") from exc

        if not 200 <= response.status_code < 300:
            logger.warning(
                "Connector request rejected source=%s status=%s url=%s body=%s",
                self.source,
                response.status_code,
                url,
                (response.text or "")[:500],
            )
            return None

        try:
            return response.json()
        except ValueError as exc:
            raise ConnectorRequestError(f"{self.source}: response was not valid JSON.") from exc
