"""Upload session: one file slot on a dashboard form.

A session stages a local file behind a preview, uploads it through the
presigned gateway when asked, and records the durable URL. Selecting a new
file or clearing the slot invalidates any upload still in flight: only the
latest selection may complete.
"""
import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Union

from showcase.dashboard.api_client import UploadGateway
from showcase.dashboard.errors import DashboardError, EntityMutationError, SelectionError, TransportError
from showcase.dashboard.previews import PreviewRegistry
from showcase.dashboard.transport import DirectUploadTransport, LocalFile

logger = logging.getLogger("showcase.dashboard.upload")


class UploadStatus(str, Enum):
    IDLE = "idle"
    STAGED = "staged"
    UPLOADING = "uploading"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass(frozen=True)
class UploadResult:
    url: str
    key: str
    file_name: str
    file_size: int
    intent: str
    document_id: Optional[str] = None


@dataclass(frozen=True)
class PendingUpload:
    """A staged file waiting for its entity to exist."""
    file: LocalFile
    preview_url: str
    intent: str


CompletionCallback = Callable[[str, UploadResult], Union[None, Awaitable[None]]]
FileValidator = Callable[[LocalFile], Optional[str]]


class UploadSession:
    def __init__(
        self,
        entity_type: str,
        *,
        gateway: UploadGateway,
        transport: DirectUploadTransport,
        previews: PreviewRegistry,
        entity_id: str = "",
        intent: str = "image",
        on_complete: Optional[CompletionCallback] = None,
        validator: Optional[FileValidator] = None,
        initial_url: Optional[str] = None,
    ):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.intent = intent
        self.gateway = gateway
        self.transport = transport
        self.previews = previews
        self.on_complete = on_complete
        self.validator = validator

        self.file: Optional[LocalFile] = None
        self.preview_url: Optional[str] = None
        self.remote_url: Optional[str] = initial_url
        self.status = UploadStatus.IDLE
        self.progress = 0
        self.error: Optional[DashboardError] = None

        self._generation = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def display_url(self) -> Optional[str]:
        """Preview while a local file is pending, otherwise the stored URL."""
        if self.status in (UploadStatus.STAGED, UploadStatus.UPLOADING) and self.preview_url:
            return self.preview_url
        return self.remote_url

    def _release_preview(self) -> None:
        if self.preview_url is not None:
            self.previews.release(self.preview_url)
            self.preview_url = None

    def select(self, file: Optional[LocalFile]) -> None:
        """Stage a file. Raises SelectionError when the file is rejected."""
        if self._closed:
            raise SelectionError("Upload session is closed")
        if file is None:
            raise SelectionError("Please select a file first")
        if self.validator is not None:
            problem = self.validator(file)
            if problem:
                raise SelectionError(problem)

        self._release_preview()
        self._generation += 1
        self.file = file
        self.preview_url = self.previews.create(file)
        self.status = UploadStatus.STAGED
        self.progress = 0
        self.error = None

    def pending(self) -> Optional[PendingUpload]:
        if self.file is None or self.status != UploadStatus.STAGED:
            return None
        return PendingUpload(file=self.file, preview_url=self.preview_url, intent=self.intent)

    def _fail(self, error: DashboardError) -> None:
        self.status = UploadStatus.ERROR
        self.progress = 0
        self.error = error
        logger.error(f"Upload error ({self.entity_type}/{self.intent}): {error}")

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    async def upload(
        self,
        file: Optional[LocalFile] = None,
        entity_id: Optional[str] = None,
        intent: Optional[str] = None,
    ) -> Optional[str]:
        """Upload the staged (or given) file. Returns the asset URL, or None on failure."""
        if self._closed:
            logger.info(f"Ignored upload on closed session ({self.entity_type}/{self.intent})")
            return None

        file = file or self.file
        entity_id = entity_id or self.entity_id
        intent = intent or self.intent

        if file is None:
            self._fail(SelectionError("Please select a file first"))
            return None
        if not entity_id:
            self._fail(TransportError("Missing entity ID for upload"))
            return None

        if file is not self.file:
            try:
                self.select(file)
            except SelectionError as e:
                self._fail(e)
                return None
        generation = self._generation
        self.entity_id = str(entity_id)
        self.status = UploadStatus.UPLOADING
        self.progress = 0
        self.error = None

        def on_progress(percent: int) -> None:
            if self._is_current(generation):
                self.progress = percent

        try:
            target = await self.gateway.issue_upload_target(self.entity_type, self.entity_id, intent, file)
            await self.transport.put(target.upload_url, file, on_progress=on_progress)
        except DashboardError as e:
            if self._is_current(generation):
                self._fail(e)
            else:
                logger.info(f"Discarded failed upload superseded by a newer selection: {e}")
            return None
        except Exception as e:
            if self._is_current(generation):
                self._fail(TransportError(f"Upload failed: {e}"))
            else:
                logger.info(f"Discarded failed upload superseded by a newer selection: {e}")
            return None

        if not self._is_current(generation):
            logger.info(f"Discarded upload of {file.name}: superseded or closed")
            return None

        self.remote_url = target.final_asset_url
        self.status = UploadStatus.COMPLETE
        self.progress = 100
        self._release_preview()
        self.file = None

        result = UploadResult(
            url=target.final_asset_url,
            key=target.key,
            file_name=file.name,
            file_size=file.size,
            intent=intent,
            document_id=target.document_id,
        )
        logger.info(f"Uploaded {file.name} for {self.entity_type}/{self.entity_id} ({intent})")

        if self.on_complete is not None:
            try:
                outcome = self.on_complete(result.url, result)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception as e:
                # The file is stored; only recording its URL failed
                logger.exception(f"Upload completion handler failed for {result.key}")
                self.error = e if isinstance(e, DashboardError) else EntityMutationError(
                    f"Failed to save uploaded file: {e}"
                )
        return result.url

    def clear(self) -> None:
        """Drop the staged file, preview and stored URL. Safe to call repeatedly."""
        self._release_preview()
        self._generation += 1
        self.file = None
        self.remote_url = None
        self.status = UploadStatus.IDLE
        self.progress = 0
        self.error = None

    def close(self) -> None:
        self.clear()
        self._closed = True
