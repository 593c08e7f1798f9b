"""Local filesystem blob store for chunk text.

Storage layout:
    <blob_dir>/chunks/<doc_id>::<index>.txt
"""

import logging
from pathlib import Path

from gateway.application.interfaces.blob_store import BlobStore
from gateway.domain.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)


class LocalBlobStore(BlobStore):
    """Infrastructure adapter for key-addressed text blobs on local disk."""

    def __init__(self, blob_dir: str):
        self._root = Path(blob_dir).resolve()
        self._root.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        """Map a blob key to a path, refusing keys that escape the root."""
        if not key or key.startswith("/"):
            raise ValueError(f"Invalid blob key: {key!r}")
        path = (self._root / key).resolve()
        if not path.is_relative_to(self._root):
            raise ValueError(f"Blob key escapes the store root: {key!r}")
        return path

    async def put_text(self, key: str, text: str) -> None:
        path = self._path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise UpstreamServiceError(
                provider="blob-store", status_code=503, message=str(exc)
            ) from exc
        logger.debug("Stored blob %s (%d chars)", key, len(text))

    async def get_text(self, key: str) -> str | None:
        try:
            path = self._path_for(key)
        except ValueError:
            logger.warning("Ignoring invalid blob key %r", key)
            return None
        if not path.is_file():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise UpstreamServiceError(
                provider="blob-store", status_code=503, message=str(exc)
            ) from exc
