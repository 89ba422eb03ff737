from typing import Any, Callable, Dict


def _payout(payload: Dict[str, Any]) -> str:
    amount_micros = payload.get("amount_micros")
    if not amount_micros:
        return "Payout: processed"
    try:
        return f"Payout: ${int(amount_micros) / 1_000_000:.2f}"
    except (TypeError, ValueError):
        return "Payout: processed"


# eventType -> summary text, or a callable taking the payload
EVENT_SUMMARIES: Dict[str, str | Callable[[Dict[str, Any]], str]] = {
    # Home
    "HOME_ITEM_ADDED": "Item added to inventory",
    "HOME_ITEM_UPDATED": "Item details updated",
    "HOME_VALUATION_CREATED": "Valuation generated",
    "HOME_CLAIM_INITIATED": "Insurance claim started",
    # Bids
    "BIDS_AUCTION_LISTED": "Listed for auction",
    "BIDS_BID_PLACED": lambda p: f"Bid placed: {p.get('amount') or 'unknown'}",
    "BIDS_AUCTION_SETTLED": lambda p: f"Auction {p.get('outcome') or 'completed'}",
    # ClaimsIQ
    "CLAIMSIQ_CLAIM_CREATED": "Claim submitted",
    "CLAIMSIQ_CLAIM_SETTLED": lambda p: f"Claim {p.get('decision') or 'processed'}",
    # Transit
    "TRANSIT_SHIPMENT_CREATED": "Shipment created",
    "TRANSIT_CUSTODY_TRANSFERRED": "Custody transferred",
    "TRANSIT_DELIVERED": "Delivered",
    # Protect
    "PROTECT_POLICY_CREATED": "Insurance policy created",
    "PROTECT_CLAIM_FILED": "Insurance claim filed",
    # Anchor
    "ANCHOR_REGISTERED": "Anchor device registered",
    "ANCHOR_HEARTBEAT": "Anchor check-in",
    "ANCHOR_TAMPER_DETECTED": "⚠️ Tamper detected",
    "ANCHOR_GEOFENCE_EXIT": "⚠️ Left geofence",
    # Capital
    "CAPITAL_CLAIM_PAYOUT": _payout,
    "CAPITAL_LOAN_ORIGINATED": "Loan originated",
    "CAPITAL_COLLATERAL_LOCKED": "Collateral locked",
    # Service
    "SERVICE_WORK_ORDER_CREATED": "Service requested",
    "SERVICE_WORK_COMPLETED": "Service completed",
}


def summarize_event(source: str | None, event_type: str, payload: Dict[str, Any] | None = None) -> str:
    """Human-readable one-liner for an event; unknown types fall back to 'source: TYPE'."""
    summary = EVENT_SUMMARIES.get(event_type)
    if summary is None:
        return f"{source}: {event_type}"
    if callable(summary):
        return summary(payload or {})
    return summary
