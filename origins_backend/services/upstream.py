import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)


def fetch_json(
    session: Any,
    url: str,
    *,
    service: str,
    lookup: str,
    identifier: str,
    params: Optional[Dict[str, Any]] = None,
    timeout: Optional[float] = None,
) -> Any | None:
    """
    Performs a single GET against an upstream service and returns the decoded
    JSON body, or None when there is nothing usable. `session` is the
    requests module itself or anything exposing the same get() signature.

    Not-found, error statuses, network failures and undecodable bodies all
    return None; each case is logged differently so operators can tell
    "nothing exists" apart from "something is broken". No retries.
    """
    try:
        response = session.get(url, params=params, timeout=timeout)
    except requests.exceptions.Timeout as e:
        logger.error(f"[{service}] {lookup} timed out for {identifier} ({url}): {e}", exc_info=True)
        return None
    except requests.exceptions.ConnectionError as e:
        logger.error(f"[{service}] {lookup} unreachable for {identifier} ({url}): {e}", exc_info=True)
        return None
    except requests.exceptions.RequestException as e:
        logger.error(f"[{service}] {lookup} request error for {identifier} ({url}): {type(e).__name__} - {e}", exc_info=True)
        return None

    if response.status_code == 404:
        logger.info(f"[{service}] {lookup}: nothing found for {identifier}")
        return None
    if not 200 <= response.status_code < 300:
        logger.warning(f"[{service}] {lookup} failed for {identifier}: upstream status {response.status_code}")
        return None

    try:
        return response.json()
    except ValueError as e:
        logger.error(f"[{service}] {lookup} returned a malformed body for {identifier}: {e}")
        return None
