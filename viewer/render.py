"""Rich renderables for catalogs and model trees."""

from __future__ import annotations

from typing import Iterable

from rich.markup import escape
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from modelview.models import Category, ModelDescriptor, Point
from modelview.summary import ModelSummary
from modelview.tree import TreeNode

_KIND_STYLE = {"model": "bold blue", "group": "bold yellow", "point": "green"}


def descriptor_table(descriptors: Iterable[ModelDescriptor], title: str | None = None) -> Table:
    table = Table(title=title, expand=True)
    table.add_column("ID", justify="right", style="cyan", no_wrap=True)
    table.add_column("Name", no_wrap=True)
    table.add_column("Label")
    table.add_column("Description", overflow="fold")
    for d in descriptors:
        table.add_row(str(d.id), d.name, d.label or "", d.desc or "")
    return table


def category_tables(categories: dict[str, Category]) -> list[Table]:
    return [
        descriptor_table(
            category.members,
            title=f"{category.range_label}: {category.description} ({len(category.members)} models)",
        )
        for category in categories.values()
    ]


def point_details(point: Point) -> str:
    parts = [f"[blue]{escape(point.type)}[/blue]"]
    if point.access:
        parts.append(f"[green]{point.access}[/green]" if point.access == "RW" else point.access)
    if point.mandatory:
        parts.append("[red]Mandatory[/red]" if point.mandatory == "M" else "Optional")
    if point.units:
        parts.append(f"[dark_orange]{escape(point.units)}[/dark_orange]")
    return " ".join(parts)


def _node_label(node: TreeNode) -> Text:
    marker = ""
    if node.children:
        marker = "▾ " if node.expanded else "▸ "
    text = Text(marker)
    text.append(node.name, style=_KIND_STYLE[node.kind])
    if node.label:
        text.append(f" ({node.label})", style="dim")
    if node.children and not node.expanded:
        text.append(f"  [{len(node.children)}]", style="dim")
    text.append(f"  #{node.id}", style="dim italic")
    if node.kind == "point":
        text.append("  ")
        text.append_text(Text.from_markup(point_details(node.source)))
        if node.source.desc:
            text.append(f"\n{node.source.desc}", style="italic")
    return text


def model_tree(node: TreeNode) -> Tree:
    """Rich tree of ``node`` descending only into expanded nodes."""
    tree = Tree(_node_label(node), guide_style="dim")
    _add_children(tree, node)
    return tree


def _add_children(branch: Tree, node: TreeNode) -> None:
    if not node.expanded:
        return
    for child in node.children:
        _add_children(branch.add(_node_label(child)), child)


def summary_table(summary: ModelSummary) -> Table:
    table = Table(title="Model Summary", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value", overflow="fold")
    table.add_row("Model ID", str(summary.id))
    table.add_row("Groups", str(summary.groups))
    table.add_row("Points", str(summary.points))
    for name, value in (("Label", summary.label), ("Description", summary.desc),
                        ("Group description", summary.group_desc)):
        if value:
            table.add_row(name, value)
    return table
