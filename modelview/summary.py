"""Aggregate counts shown above a model tree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .models import Group, Model


@dataclass(frozen=True)
class ModelSummary:
    id: int
    label: Optional[str]
    desc: Optional[str]
    group_desc: Optional[str]
    points: int
    groups: int


def count_points(group: Group) -> int:
    return len(group.points) + sum(count_points(sub) for sub in group.groups)


def count_groups(group: Group) -> int:
    """Count ``group`` and every group nested below it."""
    return 1 + sum(count_groups(sub) for sub in group.groups)


def summarize(model: Model) -> ModelSummary:
    # the root group is the model itself, so it is not counted
    return ModelSummary(
        id=model.id,
        label=model.label,
        desc=model.desc,
        group_desc=model.group.desc,
        points=count_points(model.group),
        groups=count_groups(model.group) - 1,
    )


__all__ = ["ModelSummary", "count_groups", "count_points", "summarize"]
