import os
from dotenv import load_dotenv

load_dotenv()

# Upstream service base URLs
LEDGER_API_URL = os.getenv("LEDGER_API_URL", "http://localhost:8006/api/v1")
REGISTRY_SERVICE_URL = os.getenv("REGISTRY_SERVICE_URL", "http://localhost:8000")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Comma separated list of allowed frontend origins
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

# --- Outbound request timeout (seconds) ---
# Unset means the transport default (requests applies no timeout).
REQUEST_TIMEOUT_SECONDS: float | None = None
_raw_timeout = os.getenv("REQUEST_TIMEOUT_SECONDS")
if _raw_timeout:
    try:
        REQUEST_TIMEOUT_SECONDS = float(_raw_timeout)
    except ValueError:
        print(f"Warning: Invalid REQUEST_TIMEOUT_SECONDS in .env file ({_raw_timeout!r}). Using transport default.")
        REQUEST_TIMEOUT_SECONDS = None

# Basic validation
if not os.getenv("LEDGER_API_URL"):
    print(f"Warning: LEDGER_API_URL not found in .env file. Defaulting to {LEDGER_API_URL}.")
if not os.getenv("REGISTRY_SERVICE_URL"):
    print(f"Warning: REGISTRY_SERVICE_URL not found in .env file. Defaulting to {REGISTRY_SERVICE_URL}.")
