"""Error taxonomy for lead extraction.

Callers can tell the three failure kinds apart; the HTTP layer collapses
them into one generic message but logs which one occurred.
"""

from __future__ import annotations


class LeadCleanerError(Exception):
    """Base exception for lead extraction errors."""

    pass


class ConfigurationError(LeadCleanerError):
    """No usable credential or provider is configured. Not retryable."""

    pass


class TransportError(LeadCleanerError):
    """The inference call could not complete (network, non-2xx, timeout)."""

    def __init__(self, message: str, *, provider: str | None = None) -> None:
        super().__init__(message)
        self.provider = provider


class ResponseFormatError(LeadCleanerError):
    """The provider returned text that does not decode to an ExtractedLead."""

    def __init__(self, message: str, *, raw_payload: str | None = None) -> None:
        super().__init__(message)
        self.raw_payload = raw_payload
