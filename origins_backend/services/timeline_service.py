import logging
from typing import Iterable, List, Optional, Tuple

from ..models.provenance_models import ChainIntegrity, ProvenanceEvent, ProvenanceTimeline
from .ledger_service import LedgerClient

logger = logging.getLogger(__name__)


def order_events(events: Iterable[ProvenanceEvent]) -> List[ProvenanceEvent]:
    """Stable sort by sequenceNumber. createdAt is reporting metadata only and never orders events."""
    return sorted(events, key=lambda event: event.sequenceNumber)


def distinct_sources(events: Iterable[ProvenanceEvent]) -> List[str]:
    """Distinct source values, in order of first appearance."""
    return list(dict.fromkeys(event.source for event in events))


def walk_chain(ordered: List[ProvenanceEvent]) -> Tuple[ChainIntegrity, Optional[int]]:
    """
    Checks each back-link against its predecessor in sequence order.

    Returns the integrity state and, when broken, the sequenceNumber of the
    first event whose previousHash does not match. The walk stops at the first
    break. An event without previousHash is accepted as consistent.
    """
    if not ordered:
        return ChainIntegrity.UNVERIFIED, None

    for previous, current in zip(ordered, ordered[1:]):
        if current.previousHash and current.previousHash != previous.entryHash:
            return ChainIntegrity.BROKEN, current.sequenceNumber
    return ChainIntegrity.VERIFIED, None


def assemble_timeline(asset_id: str, events: List[ProvenanceEvent]) -> ProvenanceTimeline:
    """Builds a timeline from already-fetched events. Pure; no I/O."""
    if not events:
        return ProvenanceTimeline(assetId=asset_id)

    ordered = order_events(events)
    integrity, broken_at = walk_chain(ordered)

    if integrity is ChainIntegrity.BROKEN:
        logger.warning(f"Chain break detected for asset {asset_id} at sequence {broken_at}")

    return ProvenanceTimeline(
        assetId=asset_id,
        totalEvents=len(ordered),
        firstSeen=ordered[0].createdAt or "",
        lastSeen=ordered[-1].createdAt or "",
        sources=distinct_sources(ordered),
        chainIntegrity=integrity,
        brokenAtSequence=broken_at,
        events=ordered,
    )


class TimelineBuilder:
    def __init__(self, ledger_client: LedgerClient):
        self.ledger_client = ledger_client

    def build_timeline(self, asset_id: str) -> ProvenanceTimeline:
        """Fetches an asset's events once and reconstructs its provenance timeline."""
        logger.info(f"Building provenance timeline for asset {asset_id}")
        events = self.ledger_client.get_asset_events(asset_id)
        timeline = assemble_timeline(asset_id, events)
        logger.info(
            f"Timeline for asset {asset_id}: {timeline.totalEvents} events, "
            f"chain {timeline.chainIntegrity.value}"
        )
        return timeline
