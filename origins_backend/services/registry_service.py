import logging
from typing import Any, Dict, List
from urllib.parse import quote

import requests
from pydantic import ValidationError

from ..models.asset_models import Asset
from .upstream import fetch_json

logger = logging.getLogger(__name__)

SERVICE_NAME = "REGISTRY"


def normalize_asset(raw: Dict[str, Any]) -> Asset:
    """Maps a Registry wire record (snake_case) onto the Asset model, field by field."""
    return Asset(
        paid=raw.get("paid"),
        sourceApp=raw.get("source_app"),
        sourceAssetId=raw.get("source_asset_id"),
        assetType=raw.get("asset_type"),
        category=raw.get("category"),
        name=raw.get("name"),
        description=raw.get("description"),
        ownerId=raw.get("owner_id"),
        currentValueMicros=raw.get("current_value_micros"),
        anchorId=raw.get("anchor_id"),
        createdAt=raw.get("created_at"),
        updatedAt=raw.get("updated_at"),
    )


class RegistryClient:
    """Read-only client for the Registry's asset endpoints."""

    def __init__(self, base_url: str, session: requests.Session | None = None, timeout: float | None = None):
        self.base_url = base_url.rstrip("/")
        # Module-level requests.get by default: no cookie jar or other state carried between calls
        self.session = session or requests
        self.timeout = timeout

    def get_asset(self, paid: str) -> Asset | None:
        """Looks up a single asset by PAID. Returns None when absent or on any failure."""
        if not paid:
            logger.warning("Asset lookup called with an empty PAID.")
            return None

        body = fetch_json(
            self.session,
            f"{self.base_url}/v1/assets/{quote(paid, safe='')}",
            service=SERVICE_NAME,
            lookup="Asset lookup",
            identifier=paid,
            timeout=self.timeout,
        )
        if body is None:
            return None
        if not isinstance(body, dict):
            logger.error(f"[{SERVICE_NAME}] Asset lookup returned an unexpected body for {paid}: {type(body).__name__}")
            return None

        try:
            return normalize_asset(body)
        except ValidationError as e:
            logger.error(f"[{SERVICE_NAME}] Asset lookup returned an invalid record for {paid}: {e}")
            return None

    def get_assets_by_owner(self, owner_id: str) -> List[Asset]:
        """Lists assets held by an owner. Empty list when none or on any failure."""
        if not owner_id:
            logger.warning("Assets by owner called with an empty owner ID.")
            return []
        return self._search(
            {"owner_id": owner_id},
            lookup="Assets by owner",
            identifier=owner_id,
        )

    def get_assets_by_source(self, source_app: str, source_asset_id: str | None = None) -> List[Asset]:
        """Lists assets registered by a source app, optionally narrowed to one source-side ID."""
        if not source_app:
            logger.warning("Assets by source called with an empty source app.")
            return []
        params = {"source_app": source_app}
        if source_asset_id:
            params["source_id"] = source_asset_id
        return self._search(
            params,
            lookup="Assets by source",
            identifier=f"{source_app}/{source_asset_id}" if source_asset_id else source_app,
        )

    def _search(self, params: Dict[str, str], lookup: str, identifier: str) -> List[Asset]:
        body = fetch_json(
            self.session,
            f"{self.base_url}/v1/assets",
            service=SERVICE_NAME,
            lookup=lookup,
            identifier=identifier,
            params=params,
            timeout=self.timeout,
        )
        if body is None:
            return []

        # Current Registry wraps results in {"assets": [...]}; older builds return a bare array
        if isinstance(body, dict) and isinstance(body.get("assets"), list):
            records = body["assets"]
        elif isinstance(body, list):
            records = body
        else:
            logger.error(f"[{SERVICE_NAME}] {lookup} returned an unexpected body shape for {identifier}")
            return []

        try:
            assets = [normalize_asset(record) for record in records]
        except (ValidationError, AttributeError) as e:
            logger.error(f"[{SERVICE_NAME}] {lookup} returned invalid records for {identifier}: {e}")
            return []

        logger.info(f"[{SERVICE_NAME}] {lookup} found {len(assets)} assets for {identifier}")
        return assets
