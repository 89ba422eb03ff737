from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional

from .asset_models import Asset


class ChainIntegrity(str, Enum):
    VERIFIED = "verified"
    BROKEN = "broken"
    UNVERIFIED = "unverified"


class ProvenanceEvent(BaseModel):
    # Some Ledger builds emit numeric IDs
    model_config = ConfigDict(coerce_numbers_to_str=True)

    eventId: str = Field(..., description="Unique ID of the Ledger entry.")
    source: str = Field(..., description="App or service that emitted the event.")
    eventType: str
    assetId: Optional[str] = None
    anchorId: Optional[str] = None
    actorId: Optional[str] = Field(None, description="Who or what caused the event.")
    correlationId: Optional[str] = Field(None, description="Links events from one logical operation.")
    payload: Dict[str, Any] = Field({}, description="Opaque source-defined data.")
    payloadHash: Optional[str] = None
    entryHash: Optional[str] = Field(None, description="Hash binding this entry to its chain position.")
    previousHash: Optional[str] = Field(None, description="entryHash of the preceding entry, absent for a chain's first link.")
    sequenceNumber: int = Field(..., description="Ledger-assigned position; defines total order.")
    createdAt: Optional[str] = None


class ProvenanceTimeline(BaseModel):
    # Built per request, never persisted
    assetId: str
    totalEvents: int = 0
    firstSeen: str = ""
    lastSeen: str = ""
    sources: List[str] = []
    chainIntegrity: ChainIntegrity = ChainIntegrity.UNVERIFIED
    brokenAtSequence: Optional[int] = Field(None, description="sequenceNumber of the first link whose previousHash mismatched.")
    events: List[ProvenanceEvent] = []


class IntegrityReport(BaseModel):
    valid: bool = False
    totalEntries: int = 0
    lastVerified: str


class EventFilters(BaseModel):
    source: Optional[str] = None
    eventType: Optional[str] = None
    assetId: Optional[str] = None
    anchorId: Optional[str] = None
    actorId: Optional[str] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    limit: Optional[int] = Field(None, ge=1)


# --- API response models ---

class ErrorResponse(BaseModel):
    detail: str


class EventView(BaseModel):
    eventId: str
    source: Optional[str] = None
    eventType: str
    assetId: Optional[str] = None
    anchorId: Optional[str] = None
    actorId: Optional[str] = None
    timestamp: Optional[str] = None
    summary: Optional[str] = None
    payload: Optional[Dict[str, Any]] = None


class TimelineView(BaseModel):
    totalEvents: int
    firstSeen: str
    lastSeen: str
    sources: List[str]
    chainIntegrity: ChainIntegrity
    brokenAtSequence: Optional[int] = None
    events: Optional[List[EventView]] = None


class AnchorSummary(BaseModel):
    anchorId: str
    eventCount: int
    events: List[EventView] = []


class AssetProvenanceResponse(BaseModel):
    asset: Optional[Asset] = None
    provenance: TimelineView
    anchor: Optional[AnchorSummary] = None


class OwnerAssetSummary(BaseModel):
    paid: str
    name: Optional[str] = None
    category: Optional[str] = None
    sourceApp: Optional[str] = None
    anchorId: Optional[str] = None
    currentValueMicros: Optional[int] = None
    provenance: TimelineView


class OwnerProvenanceResponse(BaseModel):
    ownerId: str
    totalAssets: int
    assets: List[OwnerAssetSummary] = []


class SourceEventsResponse(BaseModel):
    source: str
    totalEvents: int
    events: List[EventView] = []


class AnchorEventsResponse(BaseModel):
    anchorId: str
    totalEvents: int
    firstSeen: Optional[str] = None
    lastSeen: Optional[str] = None
    trackedAssets: List[str] = []
    events: List[EventView] = []


class IntegrityResponse(BaseModel):
    ledgerIntegrity: IntegrityReport


class SearchResponse(BaseModel):
    filters: EventFilters
    totalResults: int
    events: List[EventView] = []
