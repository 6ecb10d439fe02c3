"""Local preview references for staged files.

A preview stands in for a file that has not reached storage yet. Every
reference handed out must be released exactly once; releasing twice is a
no-op.
"""
import itertools
import logging
from typing import Optional

logger = logging.getLogger("showcase.dashboard.previews")


class PreviewRegistry:
    """Issues and tracks preview references (``preview://<n>/<name>``)."""

    def __init__(self):
        self._counter = itertools.count(1)
        self._live: dict[str, object] = {}

    def create(self, file) -> str:
        ref = f"preview://{next(self._counter)}/{file.name}"
        self._live[ref] = file
        return ref

    def release(self, ref: Optional[str]) -> None:
        if ref is None:
            return
        if self._live.pop(ref, None) is not None:
            logger.debug(f"Released preview {ref}")

    def resolve(self, ref: str):
        """Return the staged file behind a live preview, or None."""
        return self._live.get(ref)

    @property
    def live(self) -> frozenset[str]:
        return frozenset(self._live)

    def __len__(self) -> int:
        return len(self._live)
