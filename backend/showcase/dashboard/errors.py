"""Dashboard error taxonomy."""
from typing import Optional


class DashboardError(Exception):
    """Base class for errors surfaced to dashboard screens."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class SelectionError(DashboardError):
    """A file was rejected before any network call."""


class TransportError(DashboardError):
    """Presign, binary upload or storage transfer failed."""


class EntityMutationError(DashboardError):
    """Entity create or patch was rejected."""


class ReorderError(DashboardError):
    """Bulk reorder request failed."""


class ReorderInFlightError(ReorderError):
    """A reorder commit is already running for this surface."""
