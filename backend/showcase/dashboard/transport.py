"""Direct-to-storage binary upload over a presigned PUT URL."""
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Callable, Optional

import httpx

from showcase.config import get_settings
from showcase.dashboard.errors import TransportError
from showcase.utils.content_types import DEFAULT_CONTENT_TYPE, get_file_extension

settings = get_settings()
logger = logging.getLogger("showcase.dashboard.transport")

ProgressCallback = Callable[[int], None]


@dataclass
class LocalFile:
    """A file picked by the user, held in memory until it is uploaded."""
    name: str
    content: bytes
    content_type: str = DEFAULT_CONTENT_TYPE

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        return get_file_extension(self.name)

    @classmethod
    def from_path(cls, path, content_type: Optional[str] = None) -> "LocalFile":
        path = Path(path)
        if content_type is None:
            content_type = mimetypes.guess_type(path.name)[0] or DEFAULT_CONTENT_TYPE
        return cls(name=path.name, content=path.read_bytes(), content_type=content_type)


class DirectUploadTransport:
    """PUTs file bytes to a presigned URL, reporting progress per chunk.

    Storage never sees an Authorization header: the presigned query string is
    the credential.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        chunk_size: Optional[int] = None,
        timeout: Optional[float] = None,
    ):
        self._client = client
        self.chunk_size = chunk_size or settings.UPLOAD_CHUNK_SIZE
        self.timeout = timeout or settings.UPLOAD_TIMEOUT_SECONDS

    async def _chunks(
        self, file: LocalFile, on_progress: Optional[ProgressCallback]
    ) -> AsyncIterator[bytes]:
        total = file.size
        sent = 0
        last_percent = -1
        for offset in range(0, total, self.chunk_size):
            chunk = file.content[offset:offset + self.chunk_size]
            yield chunk
            sent += len(chunk)
            percent = int(sent * 100 / total)
            if on_progress and percent != last_percent:
                last_percent = percent
                on_progress(percent)

    async def put(
        self,
        upload_url: str,
        file: LocalFile,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        headers = {
            "Content-Type": file.content_type,
            "Content-Length": str(file.size),
        }
        if file.size:
            content = self._chunks(file, on_progress)
        else:
            content = b""

        try:
            if self._client is not None:
                response = await self._client.put(upload_url, content=content, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.put(upload_url, content=content, headers=headers)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.error(f"Upload of {file.name} timed out: {e}")
            raise TransportError("Upload timed out") from e
        except httpx.HTTPStatusError as e:
            code = e.response.status_code
            logger.error(f"Storage rejected upload of {file.name}: HTTP {code}")
            raise TransportError(f"Upload failed with status: {code}", status_code=code) from e
        except httpx.HTTPError as e:
            logger.error(f"Upload of {file.name} failed: {e}")
            raise TransportError("Network error during upload") from e

        if not file.size and on_progress:
            on_progress(100)
        logger.debug(f"Uploaded {file.name} ({file.size} bytes)")
