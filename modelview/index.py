"""Catalog indexing: descriptor extraction, id-range categories and search."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from box import Box

from common.errors import ModelValidationError
from .models import Category, ModelDescriptor

DOCUMENT_SUFFIX = ".json"

_MODEL_NUMBER = re.compile(r"model_(\d+)")


@dataclass(frozen=True)
class CategoryRange:
    key: str
    lower: int
    upper: Optional[int]
    description: str

    def contains(self, model_id: int) -> bool:
        return self.lower <= model_id and (self.upper is None or model_id < self.upper)


CATEGORY_TABLE: tuple[CategoryRange, ...] = (
    CategoryRange("1-99", 0, 100, "Common & Basic Models"),
    CategoryRange("100-199", 100, 200, "Inverter Models"),
    CategoryRange("200-299", 200, 300, "Meter Models"),
    CategoryRange("300-399", 300, 400, "Environmental Models"),
    CategoryRange("400-499", 400, 500, "String Combiner Models"),
    CategoryRange("500-599", 500, 600, "Panel Models"),
    CategoryRange("600-699", 600, 700, "Tracker Models"),
    CategoryRange("700-799", 700, 800, "DER Control Models"),
    CategoryRange("800-899", 800, 900, "Storage Models"),
    CategoryRange("900+", 900, None, "Extended & Custom Models"),
)


def extract_descriptor(source_name: str, raw_document: Any) -> ModelDescriptor:
    """Build the catalog entry for one raw model document.

    The id comes from a ``model_<digits>`` pattern in ``source_name`` when
    there is one, then from the document's own ``id``, else 0. Label and
    description fall back to the root group's.
    """
    if not isinstance(raw_document, Mapping):
        raise ModelValidationError(f"{source_name}: document is not a record")
    if raw_document.get("group") is None:
        raise ModelValidationError(f"{source_name}: document has no 'group'")

    doc = Box(raw_document, default_box=True)
    group = doc.group if isinstance(doc.group, Mapping) else Box(default_box=True)
    return ModelDescriptor(
        id=_resolve_id(source_name, doc),
        name=source_name[: -len(DOCUMENT_SUFFIX)] if source_name.endswith(DOCUMENT_SUFFIX) else source_name,
        label=_text(doc.label) or _text(group.label),
        desc=_text(doc.desc) or _text(group.desc),
        source_name=source_name,
    )


def _resolve_id(source_name: str, doc: Box) -> int:
    match = _MODEL_NUMBER.search(source_name)
    if match:
        return int(match.group(1))
    payload_id = doc.id
    if isinstance(payload_id, int) and not isinstance(payload_id, bool):
        return payload_id
    if isinstance(payload_id, str) and payload_id.isdigit():
        return int(payload_id)
    return 0


def _text(value: Any) -> Optional[str]:
    # missing keys come back as empty Boxes
    return value if isinstance(value, str) and value else None


def categorize(descriptors: Iterable[ModelDescriptor]) -> dict[str, Category]:
    """Bucket id-sorted descriptors into the fixed id ranges.

    Empty ranges are left out; the rest keep table order and members keep
    input order.
    """
    buckets = {
        r.key: Category(range_key=r.key, range_label=f"Models {r.key}", description=r.description)
        for r in CATEGORY_TABLE
    }
    for descriptor in descriptors:
        buckets[category_for(descriptor.id).key].members.append(descriptor)
    return {key: category for key, category in buckets.items() if category.members}


def category_for(model_id: int) -> CategoryRange:
    if model_id < CATEGORY_TABLE[0].lower:
        # negative ids have no range of their own
        return CATEGORY_TABLE[0]
    return next(r for r in CATEGORY_TABLE if r.contains(model_id))


def search_descriptors(descriptors: Iterable[ModelDescriptor], term: str) -> list[ModelDescriptor]:
    """Catalog entries whose name, label, description or id contain ``term``."""
    if not term:
        return list(descriptors)
    needle = term.lower()
    return [
        d for d in descriptors
        if needle in d.name.lower()
        or (d.label is not None and needle in d.label.lower())
        or (d.desc is not None and needle in d.desc.lower())
        or term in str(d.id)
    ]


__all__ = [
    "CATEGORY_TABLE",
    "CategoryRange",
    "DOCUMENT_SUFFIX",
    "categorize",
    "category_for",
    "extract_descriptor",
    "search_descriptors",
]
