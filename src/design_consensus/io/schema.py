"""Structural validation of DTCG token files."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

DTCGType = Literal[
    "color",
    "dimension",
    "fontFamily",
    "fontWeight",
    "duration",
    "cubicBezier",
    "number",
    "strokeStyle",
    "border",
    "transition",
    "shadow",
    "gradient",
    "typography",
]


class DTCGTokenModel(BaseModel):
    """A single token node: ``$type`` and ``$value`` plus optional metadata."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    type: DTCGType = Field(alias="$type")
    value: Any = Field(alias="$value")
    description: Optional[str] = Field(default=None, alias="$description")
    extensions: Optional[Dict[str, Any]] = Field(default=None, alias="$extensions")


@dataclass(slots=True)
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)


def validate_dtcg_output(tokens: Mapping[str, Any]) -> ValidationResult:
    """Check that *tokens* is a well-formed tree of DTCG groups and tokens.

    Nodes carrying ``$type`` are tokens and must match ``DTCGTokenModel`` with
    a non-empty ``$value``; every other node is a group and may only contain
    tokens or further groups.
    """
    errors: List[str] = []
    _validate_node(tokens, "root", errors)
    return ValidationResult(valid=not errors, errors=errors)


def _validate_node(node: Any, path: str, errors: List[str]) -> None:
    if not isinstance(node, Mapping):
        errors.append(f"{path}: Expected object, got {type(node).__name__}")
        return

    if "$type" in node:
        try:
            DTCGTokenModel.model_validate(dict(node))
        except ValidationError as exc:
            for error in exc.errors():
                location = ".".join(str(part) for part in error["loc"])
                errors.append(f"{path}.{location}: {error['msg']}")
        if node.get("$value") in (None, "", [], {}):
            errors.append(f"{path}: Token has $type but missing $value")
        return

    for key, value in node.items():
        if str(key).startswith("$"):
            errors.append(f"{path}.{key}: Group nodes should not have $ properties (only tokens)")
            continue
        _validate_node(value, f"{path}.{key}", errors)
