"""Schema nodes produced by the type mapper, plus mapping diagnostics."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class SchemaKind(str, Enum):
    INTEGER = "integer"
    BOOLEAN = "boolean"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


class SchemaNode(BaseModel):
    """An OpenAPI schema object restricted to what Solidity types need."""

    model_config = ConfigDict(frozen=True)

    kind: SchemaKind
    format: str | None = None
    max_length: int | None = None
    min_items: int | None = None
    max_items: int | None = None
    items: SchemaNode | None = None
    properties: dict[str, SchemaNode] | None = None
    required: tuple[str, ...] = ()
    description: str | None = None
    example: Any = None

    def to_openapi(self) -> dict[str, Any]:
        """Render as a plain OpenAPI 3.0 schema dict."""
        out: dict[str, Any] = {"type": self.kind.value}
        if self.format is not None:
            out["format"] = self.format
        if self.max_length is not None:
            out["maxLength"] = self.max_length
        if self.items is not None:
            out["items"] = self.items.to_openapi()
        if self.min_items is not None:
            out["minItems"] = self.min_items
        if self.max_items is not None:
            out["maxItems"] = self.max_items
        if self.properties is not None:
            out["properties"] = {k: v.to_openapi() for k, v in self.properties.items()}
        # OpenAPI 3.0 forbids an empty required list.
        if self.required:
            out["required"] = list(self.required)
        if self.description is not None:
            out["description"] = self.description
        if self.example is not None:
            out["example"] = self.example
        return out


class Diagnostic(BaseModel):
    """A non-fatal irregularity found while mapping or assembling."""

    model_config = ConfigDict(frozen=True)

    code: str  # unrecognized-type / duplicate-field / path-collision
    message: str
    raw_type: str | None = None
    location: str = ""

    def __str__(self) -> str:
        where = f"{self.location}: " if self.location else ""
        return f"{where}{self.message}"


class MappingResult(BaseModel):
    """A mapped schema together with the diagnostics raised producing it."""

    model_config = ConfigDict(frozen=True)

    schema_node: SchemaNode
    diagnostics: tuple[Diagnostic, ...] = ()
