"""Delivery of Solano payloads to the configured webhook endpoints.

Delivery is best-effort fan-out: every endpoint is attempted in order and a
failure at one endpoint is recorded in its DeliveryOutcome, never raised,
so the remaining endpoints still receive the trigger.
"""

from __future__ import annotations

import logging
import ssl
from dataclasses import dataclass

import httpx

from solanohook_core.errors import ConfigError, DeliveryError
from solanohook_core.solano.payload import SolanoPayload, build_payload

logger = logging.getLogger(__name__)

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


@dataclass(frozen=True)
class DeliveryOutcome:
    """Result of one POST to one Solano endpoint."""

    endpoint: str
    status_code: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code is not None and 200 <= self.status_code < 300


def _verify_context(ca_bundle: str | None) -> ssl.SSLContext | bool:
    if not ca_bundle:
        return True
    try:
        return ssl.create_default_context(cafile=ca_bundle)
    except (OSError, ssl.SSLError) as e:
        raise ConfigError(f"Cannot load CA bundle {ca_bundle}: {e}") from e


class Dispatcher:
    """Posts Solano payloads over HTTPS with certificate verification on.

    ca_bundle narrows verification to a specific CA file; there is no way to
    turn verification off. The logger is injectable so tests can assert on
    the attempt/outcome lines without a real handler (``log``).
    """

    def __init__(
        self,
        timeout: float = 10,
        ca_bundle: str | None = None,
        log: logging.Logger | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.timeout = timeout
        self.verify = _verify_context(ca_bundle)
        self.log = log or logger
        self._transport = transport

    def send(self, endpoint_url: str, ref: str, commit_sha: str) -> DeliveryOutcome:
        """POST the payload for ref/commit_sha to a single endpoint."""
        return self._post(endpoint_url, build_payload(ref, commit_sha))

    def dispatch(self, endpoints, ref: str, commit_sha: str) -> list[DeliveryOutcome]:
        """POST the same payload to every endpoint and return one outcome per endpoint.

        The payload is built once, before any network traffic, so an InvalidRef
        surfaces to the caller instead of being logged once per endpoint.
        """
        payload = build_payload(ref, commit_sha)
        return [self._post(endpoint, payload) for endpoint in endpoints]

    def _post(self, endpoint_url: str, payload: SolanoPayload) -> DeliveryOutcome:
        self.log.info(
            "solano dispatch start endpoint=%s branch=%s commit=%s",
            endpoint_url,
            payload.branch,
            payload.commit,
        )
        try:
            with httpx.Client(timeout=self.timeout, verify=self.verify, transport=self._transport) as client:
                response = client.post(endpoint_url, content=payload.to_json(), headers=JSON_HEADERS)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            failure = DeliveryError(endpoint_url, f"{type(e).__name__}: {e}")
            self.log.warning("solano dispatch failed endpoint=%s error=%s", endpoint_url, failure.reason)
            return DeliveryOutcome(endpoint=endpoint_url, error=failure.reason)

        if not response.is_success:
            failure = DeliveryError(endpoint_url, f"HTTP {response.status_code}")
            self.log.warning(
                "solano dispatch failed endpoint=%s status=%d error=%s",
                endpoint_url,
                response.status_code,
                failure.reason,
            )
            return DeliveryOutcome(endpoint=endpoint_url, status_code=response.status_code, error=failure.reason)

        self.log.info("solano dispatch done endpoint=%s status=%d", endpoint_url, response.status_code)
        return DeliveryOutcome(endpoint=endpoint_url, status_code=response.status_code)
