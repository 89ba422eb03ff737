import logging
from datetime import datetime, timezone
from typing import Any, Dict, List
from urllib.parse import quote

import requests
from pydantic import ValidationError

from ..models.provenance_models import EventFilters, IntegrityReport, ProvenanceEvent
from .upstream import fetch_json

logger = logging.getLogger(__name__)

SERVICE_NAME = "LEDGER"

# EventFilters field -> Ledger query parameter
FILTER_PARAMS = {
    "source": "source",
    "eventType": "event_type",
    "assetId": "asset_id",
    "anchorId": "anchor_id",
    "actorId": "actor_id",
    "startDate": "start_date",
    "endDate": "end_date",
    "limit": "limit",
}


class LedgerResponseError(ValueError):
    """Raised when a Ledger body matches none of the known response shapes."""


def _pick(raw: Dict[str, Any], snake: str, camel: str) -> Any:
    value = raw.get(snake)
    return value if value is not None else raw.get(camel)


def normalize_event(raw: Dict[str, Any]) -> ProvenanceEvent:
    """Maps a Ledger wire event onto ProvenanceEvent. Both snake_case and camelCase keys are accepted."""
    if not isinstance(raw, dict):
        raise LedgerResponseError(f"event entry is {type(raw).__name__}, expected an object")
    return ProvenanceEvent(
        eventId=_pick(raw, "event_id", "eventId"),
        source=raw.get("source"),
        eventType=_pick(raw, "event_type", "eventType"),
        assetId=_pick(raw, "asset_id", "assetId"),
        anchorId=_pick(raw, "anchor_id", "anchorId"),
        actorId=_pick(raw, "actor_id", "actorId"),
        correlationId=_pick(raw, "correlation_id", "correlationId"),
        payload=raw.get("payload") or {},
        payloadHash=_pick(raw, "payload_hash", "payloadHash"),
        entryHash=_pick(raw, "entry_hash", "entryHash"),
        previousHash=_pick(raw, "previous_hash", "previousHash"),
        sequenceNumber=_pick(raw, "sequence_number", "sequenceNumber"),
        createdAt=_pick(raw, "created_at", "createdAt"),
    )


def parse_events_body(body: Any) -> List[ProvenanceEvent]:
    """
    Extracts the event list from a Ledger response.

    The documented shape is {"data": {"events": [...]}}; older Ledger builds
    return a flat {"events": [...]}. Anything else raises LedgerResponseError.
    """
    if not isinstance(body, dict):
        raise LedgerResponseError(f"expected an object, got {type(body).__name__}")

    data = body.get("data")
    if isinstance(data, dict) and isinstance(data.get("events"), list):
        raw_events = data["events"]
    elif isinstance(body.get("events"), list):
        raw_events = body["events"]
    else:
        raise LedgerResponseError("no events list under 'data.events' or 'events'")

    try:
        return [normalize_event(raw) for raw in raw_events]
    except ValidationError as e:
        raise LedgerResponseError(f"invalid event entry: {e}") from e


def encode_filters(filters: EventFilters) -> Dict[str, str]:
    """One query parameter per present filter; absent or empty fields are left out."""
    params = {}
    for field_name, param in FILTER_PARAMS.items():
        value = getattr(filters, field_name)
        if value is None or value == "":
            continue
        params[param] = str(value)
    return params


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class LedgerClient:
    """Read-only client for the Ledger's event and integrity endpoints."""

    def __init__(self, base_url: str, session: requests.Session | None = None, timeout: float | None = None):
        self.base_url = base_url.rstrip("/")
        # Module-level requests.get by default: no cookie jar or other state carried between calls
        self.session = session or requests
        self.timeout = timeout

    def get_asset_events(self, asset_id: str) -> List[ProvenanceEvent]:
        """All events recorded for an asset, in the order the Ledger returned them."""
        if not asset_id:
            logger.warning("Asset events called with an empty asset ID.")
            return []
        return self._fetch_events(
            f"{self.base_url}/assets/{quote(asset_id, safe='')}/events",
            lookup="Asset events",
            identifier=asset_id,
        )

    def get_anchor_events(self, anchor_id: str) -> List[ProvenanceEvent]:
        """All events recorded against an anchor."""
        if not anchor_id:
            logger.warning("Anchor events called with an empty anchor ID.")
            return []
        return self._fetch_events(
            f"{self.base_url}/anchors/{quote(anchor_id, safe='')}/events",
            lookup="Anchor events",
            identifier=anchor_id,
        )

    def query_events(self, filters: EventFilters) -> List[ProvenanceEvent]:
        """Arbitrary event query; see FILTER_PARAMS for the parameter encoding."""
        params = encode_filters(filters)
        return self._fetch_events(
            f"{self.base_url}/events",
            lookup="Query events",
            identifier=str(params),
            params=params,
        )

    def verify_integrity(self) -> IntegrityReport:
        """
        Asks the Ledger to verify its own global chain.

        Fails closed: any failure reports valid=False with zero entries, since an
        unreachable integrity service must never read as healthy.
        """
        body = fetch_json(
            self.session,
            f"{self.base_url}/integrity/verify",
            service=SERVICE_NAME,
            lookup="Integrity check",
            identifier="ledger",
            timeout=self.timeout,
        )
        failed = IntegrityReport(valid=False, totalEntries=0, lastVerified=_now_iso())
        if not isinstance(body, dict):
            if body is not None:
                logger.error(f"[{SERVICE_NAME}] Integrity check returned a non-object body: {type(body).__name__}")
            return failed

        data = body.get("data")
        if isinstance(data, dict) and "valid" in data:
            valid = data.get("valid")
            total = data.get("totalEntries", data.get("total_entries"))
            verified_at = data.get("verifiedAt", data.get("verified_at"))
        elif "valid" in body:
            valid = body.get("valid")
            total = _pick(body, "total_entries", "totalEntries")
            verified_at = _pick(body, "verified_at", "verifiedAt")
        else:
            logger.error(f"[{SERVICE_NAME}] Integrity check body has no 'valid' flag; reporting invalid.")
            return failed

        try:
            report = IntegrityReport(
                valid=valid is True,
                totalEntries=int(total or 0),
                lastVerified=str(verified_at) if verified_at else _now_iso(),
            )
        except (TypeError, ValueError, OverflowError) as e:
            logger.error(f"[{SERVICE_NAME}] Integrity check body is malformed: {e}")
            return failed

        logger.info(f"[{SERVICE_NAME}] Integrity check: valid={report.valid}, totalEntries={report.totalEntries}")
        return report

    def _fetch_events(self, url: str, lookup: str, identifier: str, params: Dict[str, str] | None = None) -> List[ProvenanceEvent]:
        body = fetch_json(
            self.session,
            url,
            service=SERVICE_NAME,
            lookup=lookup,
            identifier=identifier,
            params=params,
            timeout=self.timeout,
        )
        if body is None:
            return []

        try:
            events = parse_events_body(body)
        except LedgerResponseError as e:
            logger.error(f"[{SERVICE_NAME}] {lookup} returned a malformed body for {identifier}: {e}")
            return []

        logger.info(f"[{SERVICE_NAME}] {lookup} returned {len(events)} events for {identifier}")
        return events
