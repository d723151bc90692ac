"""Selection flow for viewing one model at a time."""

from __future__ import annotations

import enum
import logging
from typing import Optional

from connectors.catalog_interface import CatalogConnector

from .models import Model, ModelDescriptor, coerce_model
from .tree import ExpansionState, TreeNode, build_tree, filter_tree

logger = logging.getLogger(__name__)


class ViewState(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    VIEWING = "viewing"
    ERROR = "error"


async def load_model(connector: CatalogConnector, descriptor: ModelDescriptor) -> Model:
    """Fetch and validate the full model behind a catalog entry.

    Raises TransportError when the document cannot be fetched and
    ModelValidationError when it is not a record or lacks ``id``/``group``.
    """
    raw = await connector.fetch_document(descriptor.source_name)
    return coerce_model(raw)


class ModelViewSession:
    """Current model view: selected model, expansion state and search term.

    Only the most recent selection may change the session. A fetch that
    resolves after a newer ``select`` started is discarded, whether it
    succeeded or failed.
    """

    def __init__(self, connector: Optional[CatalogConnector] = None):
        self.connector = connector
        self.state = ViewState.IDLE
        self.descriptor: Optional[ModelDescriptor] = None
        self.model: Optional[Model] = None
        self.expansion = ExpansionState()
        self.search_term = ""
        self.error: Optional[Exception] = None
        self._generation = 0

    async def select(self, descriptor: ModelDescriptor) -> Optional[Model]:
        """Load ``descriptor`` and show it.

        Returns the model, or None when a newer selection superseded this
        one. Load errors move the session to ERROR and are re-raised; the
        previously shown model stays in place.
        """
        if self.connector is None:
            raise RuntimeError("No catalog connector to load models from")
        self._generation += 1
        generation = self._generation
        self.state = ViewState.LOADING
        self.error = None
        try:
            model = await load_model(self.connector, descriptor)
        except Exception as exc:
            if generation != self._generation:
                logger.debug("Discarding failed stale load of %s: %s", descriptor.source_name, exc)
                return None
            self.state = ViewState.ERROR
            self.error = exc
            raise
        if generation != self._generation:
            logger.debug("Discarding stale load of %s", descriptor.source_name)
            return None
        self.show(model, descriptor)
        return model

    def show(self, model: Model, descriptor: Optional[ModelDescriptor] = None) -> None:
        """Display an already validated model with a fresh view state."""
        self.model = model
        self.descriptor = descriptor
        self.expansion = ExpansionState()
        self.search_term = ""
        self.state = ViewState.VIEWING

    def retry(self) -> None:
        """Leave ERROR for IDLE so a new selection can be made."""
        if self.state is ViewState.ERROR:
            self.error = None
            self.state = ViewState.IDLE

    def reset(self) -> None:
        """Drop the current model and view state. Pending loads are superseded."""
        self._generation += 1
        self.state = ViewState.IDLE
        self.descriptor = None
        self.model = None
        self.expansion = ExpansionState()
        self.search_term = ""
        self.error = None

    def toggle(self, node_id: str) -> None:
        self.expansion = self.expansion.toggle(node_id)

    def expand_all(self) -> None:
        if self.model is not None:
            self.expansion = ExpansionState.expand_all(build_tree(self.model, self.expansion))

    def collapse_all(self) -> None:
        self.expansion = ExpansionState.collapse_all()

    def search(self, term: str) -> None:
        self.search_term = term

    @property
    def tree(self) -> Optional[TreeNode]:
        if self.model is None:
            return None
        return build_tree(self.model, self.expansion)

    @property
    def visible_tree(self) -> Optional[TreeNode]:
        """The tree reduced by the current search term, None when nothing matches."""
        tree = self.tree
        if tree is None:
            return None
        return filter_tree(tree, self.search_term)


__all__ = ["ModelViewSession", "ViewState", "load_model"]
