from concurrent.futures import ThreadPoolExecutor
from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Optional
import logging

from ..dependencies import (
    get_integrity_prober,
    get_ledger_client,
    get_registry_client,
    get_timeline_builder,
)
from ..models.provenance_models import (
    AnchorEventsResponse,
    AnchorSummary,
    AssetProvenanceResponse,
    ErrorResponse,
    EventFilters,
    EventView,
    IntegrityResponse,
    OwnerAssetSummary,
    OwnerProvenanceResponse,
    ProvenanceEvent,
    ProvenanceTimeline,
    SearchResponse,
    SourceEventsResponse,
    TimelineView,
)
from ..services.event_summaries import summarize_event
from ..services.integrity_service import IntegrityProber
from ..services.ledger_service import LedgerClient
from ..services.registry_service import RegistryClient
from ..services.timeline_service import TimelineBuilder, order_events

router = APIRouter(
    prefix="/provenance",
    tags=["Provenance Querying"],
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}},
)

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
ANCHOR_PREVIEW_SIZE = 20
OWNER_FANOUT_WORKERS = 8


def _summarized(event: ProvenanceEvent) -> EventView:
    return EventView(
        eventId=event.eventId,
        source=event.source,
        eventType=event.eventType,
        assetId=event.assetId,
        anchorId=event.anchorId,
        actorId=event.actorId,
        timestamp=event.createdAt,
        summary=summarize_event(event.source, event.eventType, event.payload),
    )


def _timeline_view(timeline: ProvenanceTimeline, include_events: bool) -> TimelineView:
    return TimelineView(
        totalEvents=timeline.totalEvents,
        firstSeen=timeline.firstSeen,
        lastSeen=timeline.lastSeen,
        sources=timeline.sources,
        chainIntegrity=timeline.chainIntegrity,
        brokenAtSequence=timeline.brokenAtSequence,
        events=[_summarized(e) for e in timeline.events] if include_events else None,
    )


def _internal_error(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


@router.get("/assets/{paid}", response_model=AssetProvenanceResponse)
def get_asset_provenance(
    paid: str,
    registry: RegistryClient = Depends(get_registry_client),
    ledger: LedgerClient = Depends(get_ledger_client),
    builder: TimelineBuilder = Depends(get_timeline_builder),
):
    """
    Complete provenance timeline for a PROVENIQ Asset ID, with the asset's
    Registry record and, when it has one, a preview of its anchor's events.
    """
    logger.info(f"Received request for asset provenance: {paid}")
    try:
        asset = registry.get_asset(paid)
        timeline = builder.build_timeline(paid)

        anchor = None
        if asset and asset.anchorId:
            anchor_events = order_events(ledger.get_anchor_events(asset.anchorId))
            anchor = AnchorSummary(
                anchorId=asset.anchorId,
                eventCount=len(anchor_events),
                events=[
                    EventView(eventId=e.eventId, eventType=e.eventType, timestamp=e.createdAt)
                    for e in anchor_events[:ANCHOR_PREVIEW_SIZE]
                ],
            )

        return AssetProvenanceResponse(
            asset=asset,
            provenance=_timeline_view(timeline, include_events=True),
            anchor=anchor,
        )
    except Exception as e:
        logger.error(f"Failed to build provenance timeline for {paid}: {e}", exc_info=True)
        raise _internal_error("Failed to build provenance timeline")


@router.get("/owner/{owner_id}", response_model=OwnerProvenanceResponse)
def get_owner_provenance(
    owner_id: str,
    registry: RegistryClient = Depends(get_registry_client),
    builder: TimelineBuilder = Depends(get_timeline_builder),
):
    """All assets held by an owner, each with a provenance summary (no events)."""
    logger.info(f"Received request for owner provenance: {owner_id}")
    try:
        assets = registry.get_assets_by_owner(owner_id)
        timelines = []
        if assets:
            # One Ledger fetch per asset, run concurrently; map() keeps the Registry order
            with ThreadPoolExecutor(max_workers=min(OWNER_FANOUT_WORKERS, len(assets))) as executor:
                timelines = list(executor.map(builder.build_timeline, [asset.paid for asset in assets]))

        summaries = [
            OwnerAssetSummary(
                paid=asset.paid,
                name=asset.name,
                category=asset.category,
                sourceApp=asset.sourceApp,
                anchorId=asset.anchorId,
                currentValueMicros=asset.currentValueMicros,
                provenance=_timeline_view(timeline, include_events=False),
            )
            for asset, timeline in zip(assets, timelines)
        ]
        return OwnerProvenanceResponse(ownerId=owner_id, totalAssets=len(assets), assets=summaries)
    except Exception as e:
        logger.error(f"Failed to get owner assets for {owner_id}: {e}", exc_info=True)
        raise _internal_error("Failed to get owner assets")


@router.get("/source/{source_app}", response_model=SourceEventsResponse)
def get_source_events(
    source_app: str,
    limit: int = Query(DEFAULT_LIMIT, ge=1),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    ledger: LedgerClient = Depends(get_ledger_client),
):
    """Events emitted by one source app."""
    logger.info(f"Received request for source events: {source_app} (limit={limit})")
    try:
        events = ledger.query_events(EventFilters(
            source=source_app,
            limit=limit,
            startDate=start_date,
            endDate=end_date,
        ))
        return SourceEventsResponse(
            source=source_app,
            totalEvents=len(events),
            events=[_summarized(e) for e in events],
        )
    except Exception as e:
        logger.error(f"Failed to get source events for {source_app}: {e}", exc_info=True)
        raise _internal_error("Failed to get source events")


@router.get("/anchor/{anchor_id}", response_model=AnchorEventsResponse)
def get_anchor_provenance(
    anchor_id: str,
    ledger: LedgerClient = Depends(get_ledger_client),
):
    """Events recorded against an anchor device, in Ledger sequence order."""
    logger.info(f"Received request for anchor events: {anchor_id}")
    try:
        events = order_events(ledger.get_anchor_events(anchor_id))
        tracked_assets = list(dict.fromkeys(e.assetId for e in events if e.assetId))
        return AnchorEventsResponse(
            anchorId=anchor_id,
            totalEvents=len(events),
            firstSeen=events[0].createdAt if events else None,
            lastSeen=events[-1].createdAt if events else None,
            trackedAssets=tracked_assets,
            events=[
                EventView(
                    eventId=e.eventId,
                    eventType=e.eventType,
                    assetId=e.assetId,
                    timestamp=e.createdAt,
                    payload=e.payload,
                )
                for e in events
            ],
        )
    except Exception as e:
        logger.error(f"Failed to get anchor events for {anchor_id}: {e}", exc_info=True)
        raise _internal_error("Failed to get anchor events")


@router.get("/integrity", response_model=IntegrityResponse)
def get_ledger_integrity(prober: IntegrityProber = Depends(get_integrity_prober)):
    """Ledger-wide integrity status. Reports invalid whenever the Ledger cannot confirm it."""
    logger.info("Received request for ledger integrity")
    try:
        return IntegrityResponse(ledgerIntegrity=prober.check())
    except Exception as e:
        logger.error(f"Ledger integrity check failed: {e}", exc_info=True)
        raise _internal_error("Failed to check integrity")


@router.get("/search", response_model=SearchResponse)
def search_events(
    source: Optional[str] = None,
    event_type: Optional[str] = Query(None, alias="eventType"),
    asset_id: Optional[str] = Query(None, alias="assetId"),
    anchor_id: Optional[str] = Query(None, alias="anchorId"),
    actor_id: Optional[str] = Query(None, alias="actorId"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    limit: int = Query(DEFAULT_LIMIT, ge=1),
    ledger: LedgerClient = Depends(get_ledger_client),
):
    """Event search across any combination of filters."""
    filters = EventFilters(
        source=source,
        eventType=event_type,
        assetId=asset_id,
        anchorId=anchor_id,
        actorId=actor_id,
        startDate=start_date,
        endDate=end_date,
        limit=limit,
    )
    logger.info(f"Received event search: {filters.model_dump(exclude_none=True)}")
    try:
        events = ledger.query_events(filters)
        return SearchResponse(
            filters=filters,
            totalResults=len(events),
            events=[_summarized(e) for e in events],
        )
    except Exception as e:
        logger.error(f"Event search failed: {e}", exc_info=True)
        raise _internal_error("Failed to search events")
