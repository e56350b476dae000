"""patchset-created pipeline: resolve the change ref, then trigger Solano."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from solanohook_core.config import HookConfig
from solanohook_core.gerrit.changes import RefResolver
from solanohook_core.solano.dispatcher import DeliveryOutcome, Dispatcher
from solanohook_core.solano.payload import SolanoPayload, build_payload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatchsetEvent:
    """The parts of a Gerrit patchset-created event the pipeline needs."""

    change_id: str
    patchset_number: int
    commit_sha: str
    repository_name: str


@dataclass
class HookSummary:
    """Result of handle_patchset_created, one per event.

    ref and payload stay None when no endpoint is configured for the
    repository, since the pipeline stops before querying Gerrit.
    """

    event: PatchsetEvent
    endpoints: tuple[str, ...] = ()
    ref: str | None = None
    payload: SolanoPayload | None = None
    outcomes: list[DeliveryOutcome] = field(default_factory=list)

    @property
    def delivered(self) -> list[DeliveryOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[DeliveryOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def all_failed(self) -> bool:
        return bool(self.outcomes) and not self.delivered


def handle_patchset_created(
    event: PatchsetEvent,
    config: HookConfig,
    resolver: RefResolver | None = None,
    dispatcher: Dispatcher | None = None,
    dry_run: bool = False,
) -> HookSummary:
    """Resolve the event's patchset ref and post the Solano payload to every endpoint.

    ConfigError (unreadable ca_bundle), MissingPatchset, GerritQueryError and
    InvalidRef propagate: with no ref there is nothing to deliver. Delivery failures are reported per endpoint
    in the returned summary. With dry_run the payload is built but not sent.
    """
    endpoints = config.endpoints_for(event.repository_name)
    summary = HookSummary(event=event, endpoints=endpoints)
    if not endpoints:
        logger.info("No Solano endpoints for %s; ignoring change %s", event.repository_name, event.change_id)
        return summary

    # Built before the Gerrit query so an unreadable ca_bundle fails fast.
    if not dry_run:
        dispatcher = dispatcher or Dispatcher(timeout=config.timeout, ca_bundle=config.ca_bundle)
    resolver = resolver or RefResolver(config.gerrit_prefix, timeout=config.timeout)
    summary.ref = resolver.resolve(event.change_id, event.patchset_number)
    summary.payload = build_payload(summary.ref, event.commit_sha)

    if dry_run:
        logger.info("Dry run: not posting %s to %d endpoint(s)", summary.payload.branch, len(endpoints))
        return summary

    summary.outcomes = dispatcher.dispatch(endpoints, summary.ref, event.commit_sha)

    if summary.all_failed:
        logger.error("Solano delivery failed for all %d endpoint(s) of %s", len(endpoints), event.repository_name)
    elif summary.failed:
        logger.warning(
            "Solano delivery failed for %d of %d endpoint(s) of %s",
            len(summary.failed),
            len(endpoints),
            event.repository_name,
        )
    return summary
