"""Custom exception hierarchy for pyfleet."""

from __future__ import annotations


class FleetError(Exception):
    """Base exception for all pyfleet errors."""


class FleetConfigError(FleetError):
    """Invalid or missing configuration."""


class FleetTransportError(FleetError):
    """HTTP-level failure (network error, non-200 status)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class FleetTimeoutError(FleetTransportError, TimeoutError):
    """The status endpoint did not answer within the fetch timeout."""


class FleetProtocolError(FleetError):
    """The status endpoint answered with a payload that is not a snapshot.

    Raised for invalid JSON and for JSON whose top level is not an object
    keyed by vehicle id.
    """

    def __init__(self, message: str, *, url: str = "") -> None:
        self.url = url
        super().__init__(message)
