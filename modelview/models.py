"""Pydantic models for model definitions and catalog entries."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Mapping, Optional, Union

import json
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from common.errors import ModelValidationError


class _Documented(BaseModel):
    """Free-text fields shared by every element of a model document."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    label: Optional[str] = None
    desc: Optional[str] = None
    detail: Optional[str] = None
    notes: Optional[str] = None
    comments: list[str] = Field(default_factory=list)


class Symbol(_Documented):
    """One enumerated value or bit meaning of a point."""

    name: str
    value: Union[int, str]


class Point(_Documented):
    """One typed data field within a group."""

    name: str
    type: str = Field(..., description="Data type tag, e.g. uint16, enum16, bitfield32, sunssf")
    size: int = Field(..., ge=0, description="Size in registers")
    access: Optional[Literal["R", "RW"]] = None
    mandatory: Optional[Literal["M", "O"]] = None
    static: Optional[Literal["D", "S"]] = None
    units: Optional[str] = None
    scale_factor_ref: Optional[Union[int, str]] = Field(default=None, alias="sf")
    value: Optional[Union[int, str]] = None
    count: Optional[int] = None
    symbols: list[Symbol] = Field(default_factory=list)
    standards: list[str] = Field(default_factory=list)


class Group(_Documented):
    """Named container of points and nested groups."""

    name: str
    kind: Literal["group", "sync"] = Field(default="group", alias="type")
    count: Optional[Union[int, str]] = None
    points: list[Point] = Field(default_factory=list)
    groups: list[Group] = Field(default_factory=list)


class Model(_Documented):
    """A complete model definition rooted at a single group."""

    id: int = Field(..., ge=0)
    group: Group

    @field_validator("id", mode="before")
    @classmethod
    def _reject_bool_id(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("id must be an integer, not a boolean")
        return value


class ModelDescriptor(BaseModel):
    """Catalog entry for one model document."""

    id: int
    name: str
    label: Optional[str] = None
    desc: Optional[str] = None
    source_name: str = Field(..., description="Document name used to fetch the full model")


class Category(BaseModel):
    """Fixed id-range bucket of catalog entries."""

    range_key: str
    range_label: str
    description: str
    members: list[ModelDescriptor] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# helpers


def coerce_model(value: Any) -> Model:
    """Normalize supported inputs into a validated Model.

    Accepts a Model, a mapping, JSON/YAML text or a Path to such a file.
    Raises ModelValidationError when the document is not a record, lacks
    ``id`` or ``group``, or does not match the model structure.
    """
    if isinstance(value, Model):
        return value
    payload: Any
    if isinstance(value, Mapping):
        payload = value
    elif isinstance(value, (str, bytes)):
        payload = load_text_payload(value)
    elif isinstance(value, Path):
        payload = load_text_payload(value.read_bytes())
    else:
        payload = value
    if not isinstance(payload, Mapping):
        raise ModelValidationError("Invalid model format: document is not a record")
    missing = [key for key in ("id", "group") if payload.get(key) is None]
    if missing:
        raise ModelValidationError(
            f"Invalid model format. Missing required {' and '.join(repr(k) for k in missing)} properties."
        )
    try:
        return Model.model_validate(payload)
    except ValidationError as exc:
        raise ModelValidationError(f"Invalid model document: {exc.error_count()} validation error(s)") from exc


def load_text_payload(raw: str | bytes, json_first: bool = False) -> Any:
    """Interpret raw text as YAML first, falling back to JSON.

    With ``json_first`` the text is decoded as JSON and YAML is only the
    fallback, so ``.json`` documents keep their exact JSON values.
    """
    if isinstance(raw, bytes):
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ModelValidationError(f"Document is not valid UTF-8 text: {exc.reason}") from exc
    else:
        text = raw
    if json_first:
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            pass
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError:
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ModelValidationError(f"Document is neither YAML nor JSON: {exc.msg}") from exc


__all__ = [
    "Category",
    "Group",
    "Model",
    "ModelDescriptor",
    "Point",
    "Symbol",
    "coerce_model",
    "load_text_payload",
]
