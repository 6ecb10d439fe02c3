"""Dashboard client: staged asset uploads and list reordering."""
from showcase.dashboard.api_client import AdminApiClient, ReorderItem, UploadTarget
from showcase.dashboard.errors import (
    DashboardError,
    EntityMutationError,
    ReorderError,
    ReorderInFlightError,
    SelectionError,
    TransportError,
)
from showcase.dashboard.forms import SITE_SETTINGS_SLOTS, AssetForm, AssetSlot, FormState, SubmitOutcome
from showcase.dashboard.notifications import Notifier
from showcase.dashboard.previews import PreviewRegistry
from showcase.dashboard.reorder import OrderableItem, ReorderCoordinator
from showcase.dashboard.session import UploadSession, UploadStatus
from showcase.dashboard.transport import DirectUploadTransport, LocalFile

__all__ = [
    "AdminApiClient",
    "AssetForm",
    "AssetSlot",
    "DashboardError",
    "DirectUploadTransport",
    "EntityMutationError",
    "FormState",
    "LocalFile",
    "Notifier",
    "OrderableItem",
    "PreviewRegistry",
    "ReorderCoordinator",
    "ReorderError",
    "ReorderInFlightError",
    "ReorderItem",
    "SITE_SETTINGS_SLOTS",
    "SelectionError",
    "SubmitOutcome",
    "TransportError",
    "UploadSession",
    "UploadStatus",
    "UploadTarget",
]
