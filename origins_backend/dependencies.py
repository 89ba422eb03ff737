from fastapi import Request

from . import config
from .services.integrity_service import IntegrityProber
from .services.ledger_service import LedgerClient
from .services.registry_service import RegistryClient
from .services.timeline_service import TimelineBuilder


def build_ledger_client() -> LedgerClient:
    return LedgerClient(config.LEDGER_API_URL, timeout=config.REQUEST_TIMEOUT_SECONDS)


def build_registry_client() -> RegistryClient:
    return RegistryClient(config.REGISTRY_SERVICE_URL, timeout=config.REQUEST_TIMEOUT_SECONDS)


# --- FastAPI providers ---
# Clients are created once by create_app() and kept on app.state.

def get_ledger_client(request: Request) -> LedgerClient:
    return request.app.state.ledger_client


def get_registry_client(request: Request) -> RegistryClient:
    return request.app.state.registry_client


def get_timeline_builder(request: Request) -> TimelineBuilder:
    return TimelineBuilder(request.app.state.ledger_client)


def get_integrity_prober(request: Request) -> IntegrityProber:
    return IntegrityProber(request.app.state.ledger_client)
