from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from . import config

# Configure basic logging
logging.basicConfig(level=config.LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

from .dependencies import build_ledger_client, build_registry_client
from .routers import provenance
from .services.ledger_service import LedgerClient
from .services.registry_service import RegistryClient


def create_app(
    ledger_client: LedgerClient | None = None,
    registry_client: RegistryClient | None = None,
) -> FastAPI:
    """
    Builds the application. Upstream clients are constructed once here (or
    passed in) and shared read-only by all requests.
    """
    app = FastAPI(
        title="Origins Provenance Backend",
        description="Read-only provenance timelines aggregated from the PROVENIQ Ledger and Registry.",
        version="0.1.0",
    )

    app.state.ledger_client = ledger_client or build_ledger_client()
    app.state.registry_client = registry_client or build_registry_client()

    # --- CORS Configuration ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET"],  # Read-only surface
        allow_headers=["*"],
    )

    app.include_router(provenance.router)

    @app.get("/", tags=["Health Check"])
    def read_root():
        """Root endpoint for health check."""
        return {"status": "ok", "message": "Origins provenance backend is running."}

    return app


app = create_app()


# --- Server Startup (for local development) ---
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("origins_backend.main:app", host="0.0.0.0", port=8000, reload=True)
