"""Stand-ins for requests.Session used across the test suite."""


class StubResponse:
    def __init__(self, status_code=200, body=None, raw_text=None):
        self.status_code = status_code
        self._body = body
        self._raw_text = raw_text

    def json(self):
        if self._raw_text is not None:
            raise ValueError(f"Expecting value: {self._raw_text!r}")
        return self._body


class StubSession:
    """Routes are keyed by URL suffix; unknown URLs answer 404."""

    def __init__(self, routes=None, error=None):
        self.routes = routes or {}
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        for suffix, response in self.routes.items():
            if url.endswith(suffix):
                return response
        return StubResponse(404, {"error": "not found"})


def make_event(seq, entry_hash, previous_hash=None, source="home", created_at=None, **extra):
    """A Ledger wire event in snake_case."""
    event = {
        "event_id": f"evt-{seq}",
        "source": source,
        "event_type": "HOME_ITEM_UPDATED",
        "asset_id": "PAID-1",
        "actor_id": "user-1",
        "payload": {},
        "payload_hash": f"p{seq}",
        "entry_hash": entry_hash,
        "sequence_number": seq,
        "created_at": created_at or f"2024-01-0{seq}T00:00:00Z",
    }
    if previous_hash is not None:
        event["previous_hash"] = previous_hash
    event.update(extra)
    return event
