"""Error taxonomy for the sync layer."""


class CyberPulseError(Exception):
    """Base class for every error the sync layer reports."""


class NetworkError(CyberPulseError):
    """Timeout, connection failure or non-2xx response from a remote API."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ParseError(CyberPulseError):
    """A remote payload could not be decoded into the expected shape."""


class NotFoundError(CyberPulseError):
    """Lookup or toggle on an id that is not present."""

    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} '{record_id}' not found")
        self.kind = kind
        self.record_id = record_id


class StoreError(CyberPulseError):
    """Local persistence failure. Not retried."""
