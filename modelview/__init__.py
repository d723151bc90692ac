"""Core model viewer package exposing catalog indexing, tree and view services."""

from .catalog import build_catalog, gather_settled
from .index import categorize, extract_descriptor, search_descriptors
from .models import Category, Group, Model, ModelDescriptor, Point, Symbol, coerce_model
from .session import ModelViewSession, ViewState, load_model
from .summary import summarize
from .tree import ExpansionState, TreeNode, build_tree, filter_tree, toggle

__all__ = [
    "Category",
    "ExpansionState",
    "Group",
    "Model",
    "ModelDescriptor",
    "ModelViewSession",
    "Point",
    "Symbol",
    "TreeNode",
    "ViewState",
    "build_catalog",
    "build_tree",
    "categorize",
    "coerce_model",
    "extract_descriptor",
    "filter_tree",
    "gather_settled",
    "load_model",
    "search_descriptors",
    "summarize",
    "toggle",
]
