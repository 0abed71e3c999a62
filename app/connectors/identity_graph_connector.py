"""
app/connectors/identity_graph_connector.py

Identity graph connector: signed email and PII lookups plus field extraction.
"""

from __future__ import annotations

import hashlib
import json
import logging
import time
from typing import Any, Iterable

import requests

from app.config import IdentityProviderSettings
from app.connectors.base import BaseConnector
from app.domain.brand_intel import RecordValue

logger = logging.getLogger(__name__)

_EMAIL_PATH = "/v2/identities/byEmail"
_PII_PATH = "/v2/identities/byPii"

_MISSING = object()


def build_auth_header(key_id: str, secret: str, timestamp_ms: int | None = None) -> str:
    """
    Build the provider's signed Authorization value.

    Format: ``{key_id}{timestamp_ms}{md5(timestamp_ms + secret)}``. The
    timestamp is taken from the clock when not supplied, so the header must
    be rebuilt for every request.
    """

    timestamp = str(timestamp_ms if timestamp_ms is not None else int(time.time() * 1000))
    digest = hashlib.md5(f"{timestamp}{secret}".encode("utf-8")).hexdigest()
    return f"{key_id}{timestamp}{digest}"


def _first(items: Any) -> dict:
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return {}


def _lookup_sources(identity: dict) -> list[dict]:
    """
    Ordered places a requested field may live inside one identity.
    """

    finances = identity.get("finances")
    return [
        _first(identity.get("data")),
        identity,
        finances if isinstance(finances, dict) else {},
        _first(identity.get("properties")),
        _first(identity.get("vehicles")),
    ]


def _to_scalar(value: Any) -> RecordValue:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return json.dumps(value, default=str, sort_keys=True)


def extract_fields(identity: dict, requested_fields: Iterable[str]) -> dict[str, RecordValue]:
    """
    Pull the requested fields out of one nested identity record.

    Sources are searched in order: ``data[0]``, the identity itself,
    ``finances``, ``properties[0]``, ``vehicles[0]``. An exact key match in
    any source wins; otherwise the first case-insensitive match is used.
    Fields that cannot be found are omitted.
    """

    sources = _lookup_sources(identity)
    extracted: dict[str, RecordValue] = {}

    for field_name in requested_fields:
        value = _find_exact(sources, field_name)
        if value is _MISSING:
            value = _find_case_insensitive(sources, field_name)
        if value is not _MISSING:
            extracted[field_name] = _to_scalar(value)

    return extracted


def _find_exact(sources: list[dict], field_name: str) -> Any:
    for source in sources:
        if field_name in source:
            return source[field_name]
    return _MISSING


def _find_case_insensitive(sources: list[dict], field_name: str) -> Any:
    wanted = field_name.lower()
    for source in sources:
        for key, value in source.items():
            if isinstance(key, str) and key.lower() == wanted:
                return value
    return _MISSING


class IdentityGraphConnector(BaseConnector):
    """
    Connector for the identity-resolution provider.

    Lookups return the first matching identity or ``None`` on a miss.
    Transport failures propagate as ``ConnectorRequestError``.
    """

    def __init__(
        self,
        *,
        settings: IdentityProviderSettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(
            source="identity_graph",
            timeout_seconds=settings.timeout_seconds,
            session=session,
        )
        self._settings = settings

    @property
    def is_configured(self) -> bool:
        return self._settings.is_configured

    def lookup_by_email(self, email: str) -> dict | None:
        return self._lookup(_EMAIL_PATH, {"email": email})

    def lookup_by_pii(
        self,
        *,
        first_name: str | None,
        last_name: str | None,
        city: str | None = None,
        state: str | None = None,
    ) -> dict | None:
        candidates = {
            "firstName": first_name,
            "lastName": last_name,
            "city": city,
            "state": state,
        }
        params = {key: value for key, value in candidates.items() if value}
        return self._lookup(_PII_PATH, params)

    def _lookup(self, path: str, params: dict[str, str]) -> dict | None:
        if not self.is_configured:
            raise RuntimeError("Identity provider credentials are not configured.")

        origin = (self._settings.origin or "").rstrip("/")
        payload = self._request_json(
            method="GET",
            url=f"{origin}{path}",
            params=params,
            headers={
                "Authorization": build_auth_header(
                    self._settings.key_id or "",
                    self._settings.secret or "",
                ),
                "Content-Type": "application/json",
            },
        )
        if not isinstance(payload, dict):
            return None

        identities = payload.get("identities")
        identity = _first(identities)
        return identity or None
