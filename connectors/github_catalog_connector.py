import json
import logging
from typing import Any

import httpx
from box import Box

from common.config import Settings
from common.errors import ModelValidationError, TransportError
from connectors.catalog_interface import CatalogConnector, CatalogEntry
from modelview.index import DOCUMENT_SUFFIX

logger = logging.getLogger(__name__)


class GitHubCatalogConnector(CatalogConnector):
    """
    Catalog connector for a models repository hosted on GitHub.
    Uses the contents REST API for the listing and raw file URLs for documents.

    Args:
        repo (str): "owner/name" of the repository. Example: "sunspec/models"
        branch (str): Branch to read from.
        models_path (str): Directory of the model documents inside the repository.
        api_base_url (str): Base URL of the contents API.
            Examples: "https://api.github.com", "http://127.0.0.1:8000" (mock catalog)
        raw_base_url (str): Base URL for raw file downloads.
            Examples: "https://raw.githubusercontent.com", "http://127.0.0.1:8000/raw"
        timeout (float): Request timeout in seconds.
        client (httpx.AsyncClient | None): Client to use instead of a new one.
            The connector closes only clients it created.
    """
    def __init__(self, repo: str = "sunspec/models", branch: str = "master", models_path: str = "json",
                 api_base_url: str = "https://api.github.com",
                 raw_base_url: str = "https://raw.githubusercontent.com",
                 timeout: float = 10.0, client: httpx.AsyncClient | None = None):
        self.repo = repo
        self.branch = branch
        self.models_path = models_path.strip("/")
        self.api_base_url = api_base_url.rstrip("/")
        self.raw_base_url = raw_base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    @classmethod
    def from_settings(cls, settings: Settings, client: httpx.AsyncClient | None = None) -> "GitHubCatalogConnector":
        return cls(repo=settings.repo, branch=settings.branch, models_path=settings.models_path,
                   api_base_url=settings.api_base_url, raw_base_url=settings.raw_base_url,
                   timeout=settings.request_timeout, client=client)

    async def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """
        Make an HTTP request and check its status.

        Args:
            method (str): The HTTP method.
            url (str): Absolute URL to call.
            **kwargs: Additional arguments to pass to httpx request.

        Returns:
            httpx.Response: The successful response.

        Raises:
            TransportError: kind "not_found" on 404, "http" on other error
                statuses, "network" when the server cannot be reached.
        """
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            kind = TransportError.NOT_FOUND if status == 404 else TransportError.HTTP
            raise TransportError(f"{method} {url} failed: {status} {exc.response.reason_phrase}", kind=kind) from exc
        except httpx.RequestError as exc:
            raise TransportError(f"{method} {url} failed: {exc}", kind=TransportError.NETWORK) from exc
        return response

    @property
    def info(self) -> Box:
        return Box({
            "type": "github",
            "repo": self.repo,
            "branch": self.branch,
            "models_path": self.models_path,
            "api_base_url": self.api_base_url,
        })

    @property
    def listing_url(self) -> str:
        return f"{self.api_base_url}/repos/{self.repo}/contents/{self.models_path}"

    def document_url(self, name: str) -> str:
        return f"{self.raw_base_url}/{self.repo}/{self.branch}/{self.models_path}/{name}"

    async def list_catalog(self) -> list[CatalogEntry]:
        r = await self.request("GET", self.listing_url, params={"ref": self.branch})
        try:
            files = r.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise TransportError(f"Catalog listing at {self.listing_url} is not JSON") from exc
        if not isinstance(files, list):
            raise TransportError(f"Catalog listing at {self.listing_url} is not a list of files")
        entries = [
            CatalogEntry(name=f["name"], path=f.get("path", f["name"]), download_url=f.get("download_url"))
            for f in files
            if isinstance(f, dict) and isinstance(f.get("name"), str) and f["name"].endswith(DOCUMENT_SUFFIX)
        ]
        logger.info("Listed %d model documents from %s", len(entries), self.repo)
        return entries

    async def fetch_document(self, name: str) -> Any:
        r = await self.request("GET", self.document_url(name))
        try:
            return r.json()
        except UnicodeDecodeError as exc:
            raise ModelValidationError(f"Document {name} is not valid UTF-8 text: {exc.reason}") from exc
        except json.JSONDecodeError as exc:
            # not a record; callers reject it during validation
            logger.debug("Document %s is not JSON: %s", name, exc)
            return r.text

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
