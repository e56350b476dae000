"""Error taxonomy for the resolve-and-dispatch pipeline.

Resolution errors (GerritQueryError, MissingPatchset, InvalidRef) are fatal
to an event: without a ref there is nothing to send. DeliveryError only
ever describes a single failed endpoint and is captured in a
DeliveryOutcome rather than raised, so one bad endpoint never blocks the
others.
"""

from __future__ import annotations


class SolanoHookError(Exception):
    """Base class for every error raised by solanohook_core."""


class ConfigError(SolanoHookError):
    """The configuration file or an override holds an unusable value."""


class GerritQueryError(SolanoHookError):
    """The Gerrit changes query failed, timed out, or returned an unreadable body."""


class MissingPatchset(SolanoHookError):
    """No revision of the queried change carries the requested patchset number."""

    def __init__(self, change_id: str, patchset_number: int):
        self.change_id = change_id
        self.patchset_number = patchset_number
        super().__init__(f"No patchset {patchset_number} found for change {change_id}")


class InvalidRef(SolanoHookError):
    """A ref outside refs/ cannot be mapped onto a Solano branch."""

    def __init__(self, ref: str):
        self.ref = ref
        super().__init__(f"Ref {ref!r} does not start with 'refs/'")


class DeliveryError(SolanoHookError):
    """A POST to one Solano endpoint failed, timed out, or returned non-2xx."""

    def __init__(self, endpoint: str, reason: str):
        self.endpoint = endpoint
        self.reason = reason
        super().__init__(f"Delivery to {endpoint} failed: {reason}")
