"""Port for credential providers used by the ingestion client."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class AuthProvider(Protocol):
    """Provide the ``Authorization`` header value for an outbound request.

    Collectors embedding the sink hand over their own provider so the client
    signs requests with credentials it derived elsewhere.
    """

    def get_credentials(self, method: str, uri: str, body: bytes) -> str:
        """Return the header value authorising ``method uri`` with ``body``."""


__all__ = ["AuthProvider"]
