import asyncio
import logging
from pathlib import Path
from typing import Any

from box import Box

from common.errors import TransportError
from connectors.catalog_interface import CatalogConnector, CatalogEntry
from modelview.index import DOCUMENT_SUFFIX
from modelview.models import load_text_payload

logger = logging.getLogger(__name__)


class LocalCatalogConnector(CatalogConnector):
    """ Catalog connector for a directory of model documents on disk.
    Files are read in a worker thread; .json files are parsed as JSON first.

    Args:
        directory (str | Path): Directory holding the model_*.json files.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory).expanduser()

    @property
    def info(self) -> Box:
        return Box({"type": "local", "directory": str(self.directory)})

    async def list_catalog(self) -> list[CatalogEntry]:
        if not self.directory.is_dir():
            raise TransportError(f"Catalog directory not found: {self.directory}", kind=TransportError.NOT_FOUND)
        paths = sorted(p for p in self.directory.iterdir() if p.is_file() and p.name.endswith(DOCUMENT_SUFFIX))
        return [CatalogEntry(name=p.name, path=str(p), download_url=p.as_uri()) for p in paths]

    async def fetch_document(self, name: str) -> Any:
        path = self.directory / name
        if path.parent != self.directory or not path.is_file():
            raise TransportError(f"Model document not found: {name}", kind=TransportError.NOT_FOUND)
        try:
            raw = await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise TransportError(f"Cannot read {path}: {exc}", kind=TransportError.NETWORK) from exc
        logger.debug("Read %d bytes from %s", len(raw), path)
        return load_text_payload(raw, json_first=name.endswith(DOCUMENT_SUFFIX))

    async def aclose(self) -> None:
        """Nothing to release for local files."""
