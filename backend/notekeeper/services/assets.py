"""Image asset manager: durable copies of picked images and their cleanup."""
import asyncio
import logging
from pathlib import Path
import shutil
from urllib.parse import unquote, urlparse
import uuid

from notekeeper.errors import AssetError, attempt
from notekeeper.schemas.base import now_ms
from notekeeper.schemas.capture import CaptureResponse

logger = logging.getLogger(__name__)

DEFAULT_SUFFIX = ".jpg"


def source_path(uri: str) -> Path:
    """Local path for a ``file://`` URI or a plain path."""
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(uri)


class ImageAssetManager:
    """Copies images into ``assets_dir`` and removes them when no longer used.

    Copy failures come back as ``None`` and delete failures are only logged;
    neither raises to the caller.
    """

    def __init__(self, assets_dir: Path):
        self._assets_dir = Path(assets_dir)

    @property
    def assets_dir(self) -> Path:
        return self._assets_dir

    async def ensure_asset_directory(self) -> Path | None:
        """Create the asset directory if missing and return it; None on failure."""
        outcome = await attempt("ensure asset directory", self._ensure())
        return outcome.value if outcome.ok else None

    async def _ensure(self) -> Path:
        try:
            await asyncio.to_thread(self._assets_dir.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise AssetError(f"Cannot create asset directory {self._assets_dir}: {exc}", "mkdir") from exc
        return self._assets_dir

    def _asset_name(self, source: Path) -> str:
        suffix = source.suffix.lower() or DEFAULT_SUFFIX
        return f"note_{now_ms()}_{uuid.uuid4().hex[:8]}{suffix}"

    async def import_asset(self, source_uri: str) -> str | None:
        """Copy ``source_uri`` into the asset directory; the new path or None."""
        outcome = await attempt("import asset", self._copy(source_uri))
        return outcome.value if outcome.ok else None

    async def _copy(self, source_uri: str) -> str:
        source = source_path(source_uri)
        directory = await self._ensure()
        destination = directory / self._asset_name(source)
        try:
            await asyncio.to_thread(shutil.copyfile, source, destination)
        except OSError as exc:
            raise AssetError(f"Cannot copy {source} to {destination}: {exc}", "copy") from exc
        logger.info(f"Imported image {source.name} as {destination.name}")
        return str(destination)

    async def import_capture(self, response: CaptureResponse) -> str | None:
        """Import the first asset of a picker response.

        Cancelled and failed picks both give None.
        """
        if response.error_code:
            logger.warning(f"Image capture failed: {response.error_code} {response.error_message or ''}".rstrip())
        uri = response.source_uri
        if uri is None:
            return None
        return await self.import_asset(uri)

    async def delete_asset(self, path: str | None) -> None:
        """Remove the file at ``path``; missing files and errors are ignored."""
        if not path:
            return
        await attempt("delete asset", self._unlink(source_path(path)))

    async def _unlink(self, path: Path) -> None:
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as exc:
            raise AssetError(f"Cannot delete {path}: {exc}", "unlink") from exc
        logger.debug(f"Deleted image {path}")

    async def asset_exists(self, path: str | None) -> bool:
        if not path:
            return False
        try:
            return await asyncio.to_thread(source_path(path).is_file)
        except OSError:
            return False
