# connections_manager.py
"""
connections_manager.py
----------------------
Manages catalog connectors

Holds in-memory connectors to the configured catalog sources.

Creates connectors as needed and reuses an existing one
    when the same source is requested again.

"""

from common.config import Settings, get_settings
from connectors.catalog_interface import CatalogConnector
from connectors.github_catalog_connector import GitHubCatalogConnector
from connectors.local_catalog_connector import LocalCatalogConnector


######################### Connectors #########################


## the manager is this module itself

# variable to hold active connectors:

_active_connectors: dict[tuple[str, str], CatalogConnector] = {}
# key: (source, location) tuple
# value: CatalogConnector instance
# location is "repo@branch/path" for github and the directory for local.

def get_connector(source: str | None = None, settings: Settings | None = None) -> CatalogConnector:
    """
    Get or create a catalog connector for the given source.
    Reuses an existing connector if one matches the (source, location) pair.
    """
    settings = settings or get_settings()
    source = source or settings.source
    if source == "github":
        location = f"{settings.api_base_url}/{settings.repo}@{settings.branch}/{settings.models_path}"
    elif source == "local":
        if not settings.local_dir:
            raise ValueError("The local source needs a directory (SUNVIEW_LOCAL_DIR or --models-dir)")
        location = settings.local_dir
    else:
        raise ValueError(f"Unsupported catalog source: {source}")

    key = (source, location)
    if key in _active_connectors:
        return _active_connectors[key]

    # else:
    connector: CatalogConnector
    if source == "github":
        connector = GitHubCatalogConnector.from_settings(settings)
    else:
        connector = LocalCatalogConnector(settings.local_dir)
    _active_connectors[key] = connector
    return connector


async def close_all() -> None:
    """Close and forget every cached connector."""
    while _active_connectors:
        _, connector = _active_connectors.popitem()
        await connector.aclose()
