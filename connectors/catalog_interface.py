from typing import Any, Protocol
from box import Box


class CatalogEntry(Box):
    """
    One document in a catalog listing. Dot-access dict (Box) with at least
    ``name``, ``path`` and ``download_url``.
    Examples:
        entry = CatalogEntry(name='model_1.json', path='json/model_1.json', download_url='https://...')
        print(entry.name)         # model_1.json
        print(entry['path'])      # json/model_1.json
    """


class CatalogConnector(Protocol):
    """
    Interface Protocol for model catalog sources.
    Implementations list the available model documents and fetch one raw
    document by name. Failures are raised as common.errors.TransportError.
    """

    @property
    def info(self) -> Box:
        """
        Returns information about the connector,
          such as type and location, as a Box.
        """
        ...

    async def list_catalog(self) -> list[CatalogEntry]:
        """
        List the model documents, already filtered to names ending in '.json'.
        """
        ...

    async def fetch_document(self, name: str) -> Any:
        """
        Fetch and decode one raw model document by name.
        The result is whatever the document holds; callers validate it.
        """
        ...

    async def aclose(self) -> None: ...
