"""Gerrit changes query and patchset ref resolution.

Gerrit prefixes every JSON response body with the anti-XSSI line ``)]}'``
so the body cannot be evaluated as a script. decode_gerrit_json() owns that
quirk; RefResolver only deals with decoded change entries.
"""

from __future__ import annotations

import json
import logging

import httpx

from solanohook_core.errors import GerritQueryError, MissingPatchset

logger = logging.getLogger(__name__)

XSSI_PREFIX = ")]}'"

# ALL_REVISIONS makes Gerrit return every patchset, not just the current one.
QUERY_OPTIONS = ("ALL_REVISIONS", "DOWNLOAD_COMMANDS")


def decode_gerrit_json(text: str):
    """Strip Gerrit's anti-XSSI prefix and decode the JSON that follows."""
    if not text.startswith(XSSI_PREFIX):
        raise GerritQueryError("Gerrit response is missing the )]}' prefix")
    try:
        return json.loads(text[len(XSSI_PREFIX) :])
    except json.JSONDecodeError as e:
        raise GerritQueryError(f"Gerrit response is not valid JSON: {e}") from e


def find_revision_ref(changes: list[dict], patchset_number: int) -> str | None:
    """Return the ref of the first revision numbered patchset_number, or None.

    Gerrit gives no ordering guarantee across changes or revisions, so every
    entry is scanned. Entries without a revisions map, and revisions without
    a ref, are skipped.
    """
    for change in changes:
        revisions = change.get("revisions") if isinstance(change, dict) else None
        if not isinstance(revisions, dict):
            continue
        for revision in revisions.values():
            if not isinstance(revision, dict) or not isinstance(revision.get("ref"), str):
                continue
            if revision.get("_number") == patchset_number:
                return revision["ref"]
    return None


class RefResolver:
    """Resolves a (change id, patchset number) pair into a fetchable git ref."""

    def __init__(
        self,
        gerrit_prefix: str,
        timeout: float = 10,
        transport: httpx.BaseTransport | None = None,
    ):
        self.gerrit_prefix = gerrit_prefix.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def query_url(self) -> str:
        return f"{self.gerrit_prefix}/changes/"

    def query_params(self, change_id: str) -> list[tuple[str, str]]:
        return [("q", change_id)] + [("o", option) for option in QUERY_OPTIONS]

    def query(self, change_id: str) -> list[dict]:
        """Run the changes query for change_id and return the decoded entries."""
        url = self.query_url()
        logger.debug("Querying Gerrit %s for change %s", url, change_id)
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.get(url, params=self.query_params(change_id))
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise GerritQueryError(f"Gerrit query for change {change_id} failed: {e}") from e

        changes = decode_gerrit_json(response.text)
        if not isinstance(changes, list):
            raise GerritQueryError(f"Gerrit query returned {type(changes).__name__}, expected a list of changes")
        return changes

    def resolve(self, change_id: str, patchset_number: int) -> str:
        """Return the ref for patchset_number of change_id.

        Raises MissingPatchset when no revision matches, GerritQueryError when
        the query itself fails.
        """
        ref = find_revision_ref(self.query(change_id), patchset_number)
        if ref is None:
            raise MissingPatchset(change_id, patchset_number)
        logger.debug("Resolved change %s patchset %d to %s", change_id, patchset_number, ref)
        return ref
