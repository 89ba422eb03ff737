import requests

from origins_backend.services.registry_service import RegistryClient, normalize_asset

from fakes import StubResponse, StubSession

REGISTRY_URL = "http://registry.test"

WIRE_ASSET = {
    "paid": "PAID-1",
    "source_app": "home",
    "source_asset_id": "item-42",
    "asset_type": "physical",
    "category": "jewelry",
    "name": "Grandmother's ring",
    "description": "Gold band",
    "owner_id": "user-1",
    "current_value_micros": 1250000000,
    "anchor_id": "anchor-9",
    "created_at": "2024-01-01T00:00:00Z",
    "updated_at": "2024-02-01T00:00:00Z",
}


def test_normalize_asset_maps_every_field():
    asset = normalize_asset(WIRE_ASSET)

    assert asset.paid == "PAID-1"
    assert asset.sourceApp == "home"
    assert asset.sourceAssetId == "item-42"
    assert asset.assetType == "physical"
    assert asset.category == "jewelry"
    assert asset.name == "Grandmother's ring"
    assert asset.description == "Gold band"
    assert asset.ownerId == "user-1"
    assert asset.currentValueMicros == 1250000000
    assert asset.anchorId == "anchor-9"
    assert asset.createdAt == "2024-01-01T00:00:00Z"
    assert asset.updatedAt == "2024-02-01T00:00:00Z"


def test_get_asset_returns_normalized_record():
    session = StubSession({"/v1/assets/PAID-1": StubResponse(200, WIRE_ASSET)})
    client = RegistryClient(REGISTRY_URL, session=session, timeout=5)

    asset = client.get_asset("PAID-1")

    assert asset.paid == "PAID-1"
    assert session.calls[0]["url"] == f"{REGISTRY_URL}/v1/assets/PAID-1"
    assert session.calls[0]["timeout"] == 5


def test_get_asset_not_found_returns_none():
    client = RegistryClient(REGISTRY_URL, session=StubSession())

    assert client.get_asset("does-not-exist") is None


def test_get_asset_degrades_on_upstream_error():
    session = StubSession({"/v1/assets/PAID-1": StubResponse(503, {"error": "down"})})

    assert RegistryClient(REGISTRY_URL, session=session).get_asset("PAID-1") is None


def test_get_asset_degrades_when_unreachable(unreachable_session):
    assert RegistryClient(REGISTRY_URL, session=unreachable_session).get_asset("PAID-1") is None


def test_get_asset_degrades_on_malformed_body():
    session = StubSession({"/v1/assets/PAID-1": StubResponse(200, raw_text="<html>")})

    assert RegistryClient(REGISTRY_URL, session=session).get_asset("PAID-1") is None


def test_get_asset_record_without_paid_is_rejected():
    session = StubSession({"/v1/assets/PAID-1": StubResponse(200, {"name": "orphan"})})

    assert RegistryClient(REGISTRY_URL, session=session).get_asset("PAID-1") is None


def test_empty_identifiers_skip_the_request():
    session = StubSession()
    client = RegistryClient(REGISTRY_URL, session=session)

    assert client.get_asset("") is None
    assert client.get_assets_by_owner("") == []
    assert client.get_assets_by_source("") == []
    assert session.calls == []


def test_get_assets_by_owner_accepts_wrapped_list():
    session = StubSession({"/v1/assets": StubResponse(200, {"assets": [WIRE_ASSET]})})
    client = RegistryClient(REGISTRY_URL, session=session)

    assets = client.get_assets_by_owner("user-1")

    assert [a.paid for a in assets] == ["PAID-1"]
    assert session.calls[0]["params"] == {"owner_id": "user-1"}


def test_get_assets_by_source_accepts_bare_list():
    session = StubSession({"/v1/assets": StubResponse(200, [WIRE_ASSET])})
    client = RegistryClient(REGISTRY_URL, session=session)

    assets = client.get_assets_by_source("home", "item-42")

    assert assets[0].sourceAssetId == "item-42"
    assert session.calls[0]["params"] == {"source_app": "home", "source_id": "item-42"}


def test_get_assets_by_source_without_source_id_omits_param():
    session = StubSession({"/v1/assets": StubResponse(200, [])})

    RegistryClient(REGISTRY_URL, session=session).get_assets_by_source("home")

    assert session.calls[0]["params"] == {"source_app": "home"}


def test_search_with_empty_upstream_array_returns_empty_list():
    session = StubSession({"/v1/assets": StubResponse(200, [])})

    result = RegistryClient(REGISTRY_URL, session=session).get_assets_by_source("origins", "missing")

    assert result == []
    assert result is not None


def test_search_degrades_on_unexpected_shape():
    session = StubSession({"/v1/assets": StubResponse(200, {"items": [WIRE_ASSET]})})

    assert RegistryClient(REGISTRY_URL, session=session).get_assets_by_owner("user-1") == []


def test_search_degrades_on_timeout():
    session = StubSession(error=requests.exceptions.Timeout("read timed out"))

    assert RegistryClient(REGISTRY_URL, session=session).get_assets_by_owner("user-1") == []


def test_default_transport_keeps_no_session():
    assert RegistryClient(REGISTRY_URL).session is requests


def test_cookies_from_one_response_are_not_replayed(cookie_server, cookie_server_url):
    client = RegistryClient(cookie_server_url, timeout=5)

    assert client.get_assets_by_owner("user-1") == []
    assert client.get_assets_by_source("origins", "missing") == []

    assert cookie_server.received_cookies == [None, None]
