"""In-memory tree structures used to browse one model definition."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator, Literal, Optional, Union

from .models import Group, Model, Point

ROOT_ID = "root"

NodeKind = Literal["model", "group", "point"]


@dataclass(frozen=True)
class TreeNode:
    """Node of the browsable tree.

    ``id`` is derived from the structural path only, so rebuilding with a
    different expansion state keeps every id and changes ``expanded`` alone.
    """

    id: str
    name: str
    kind: NodeKind
    source: Union[Model, Group, Point] = field(repr=False, compare=False)
    label: Optional[str] = None
    expanded: bool = False
    children: tuple[TreeNode, ...] = ()
    depth: int = 0

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    def walk(self) -> Iterator[TreeNode]:
        """Yield this node and its descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class ExpansionState:
    """Set of node ids shown expanded. Immutable, toggling returns a new state."""

    node_ids: frozenset[str] = frozenset({ROOT_ID})

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.node_ids

    def __len__(self) -> int:
        return len(self.node_ids)

    def toggle(self, node_id: str) -> ExpansionState:
        return ExpansionState(self.node_ids ^ {node_id})

    @classmethod
    def of(cls, node_ids: Iterable[str]) -> ExpansionState:
        return cls(frozenset(node_ids))

    @classmethod
    def expand_all(cls, tree: TreeNode) -> ExpansionState:
        """State with every node that has children expanded."""
        return cls(frozenset(node.id for node in tree.walk() if node.children))

    @classmethod
    def collapse_all(cls) -> ExpansionState:
        return cls()


def toggle(state: ExpansionState, node_id: str) -> ExpansionState:
    return state.toggle(node_id)


# ---------------------------------------------------------------------------
# building


def build_tree(model: Model, expansion: ExpansionState = ExpansionState()) -> TreeNode:
    """Convert ``model`` into a TreeNode hierarchy.

    The root has id ``root``. Below a group with id ``P`` its points come
    first as ``P_point_<i>``, then its nested groups as ``P_group_<i>``.
    """
    children: tuple[TreeNode, ...] = ()
    if model.group is not None:
        children = (_build_group(model.group, f"{ROOT_ID}_group", 1, expansion),)
    return TreeNode(
        id=ROOT_ID,
        name=f"Model {model.id}",
        kind="model",
        source=model,
        label=model.label,
        expanded=ROOT_ID in expansion,
        children=children,
        depth=0,
    )


def _build_group(group: Group, node_id: str, depth: int, expansion: ExpansionState) -> TreeNode:
    if not isinstance(group, Group):
        raise TypeError(f"Expected a Group at {node_id}, got {type(group).__name__}")
    points = [
        TreeNode(
            id=f"{node_id}_point_{index}",
            name=point.name,
            kind="point",
            source=point,
            label=point.label,
            expanded=f"{node_id}_point_{index}" in expansion,
            depth=depth + 1,
        )
        for index, point in enumerate(group.points)
    ]
    groups = [
        _build_group(sub_group, f"{node_id}_group_{index}", depth + 1, expansion)
        for index, sub_group in enumerate(group.groups)
    ]
    return TreeNode(
        id=node_id,
        name=group.name,
        kind="group",
        source=group,
        label=group.label,
        expanded=node_id in expansion,
        children=tuple(points + groups),
        depth=depth,
    )


# ---------------------------------------------------------------------------
# filtering


def filter_tree(node: TreeNode, term: str) -> Optional[TreeNode]:
    """Reduce ``node`` to the parts matching ``term``.

    A node survives when it matches itself or any descendant survives.
    Survivors with surviving children are forced expanded so every match
    is reachable. Returns None when nothing matches, and ``node`` itself
    for an empty term.
    """
    if not term:
        return node
    return _filter_node(node, term.lower())


def _filter_node(node: TreeNode, needle: str) -> Optional[TreeNode]:
    kept = tuple(
        result
        for result in (_filter_node(child, needle) for child in node.children)
        if result is not None
    )
    if not kept and not _matches(node, needle):
        return None
    return replace(node, children=kept, expanded=True if kept else node.expanded)


def _matches(node: TreeNode, needle: str) -> bool:
    if needle in node.name.lower():
        return True
    if node.label and needle in node.label.lower():
        return True
    if node.kind == "point":
        desc = node.source.desc
        return bool(desc) and needle in desc.lower()
    return False


__all__ = [
    "ExpansionState",
    "ROOT_ID",
    "TreeNode",
    "build_tree",
    "filter_tree",
    "toggle",
]
