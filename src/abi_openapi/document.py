"""OpenAPI document models built by the assembler."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from abi_openapi.schema import SchemaNode

OPENAPI_VERSION = "3.0.0"
API_VERSION = "1.0.0"
DEFAULT_DESCRIPTION = "Generated API docs from Solidity ABI"

HttpVerb = Literal["get", "post"]


class Info(BaseModel):
    title: str
    version: str = API_VERSION
    description: str = DEFAULT_DESCRIPTION


class QueryParameter(BaseModel):
    """A required query-string argument of a read-only call."""

    name: str
    schema_node: SchemaNode
    description: str = ""
    required: bool = True

    def to_openapi(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "in": "query",
            "required": self.required,
            "schema": self.schema_node.to_openapi(),
            "description": self.description,
        }


class ResponseSpec(BaseModel):
    description: str
    schema_node: SchemaNode | None = None

    def to_openapi(self) -> dict[str, Any]:
        out: dict[str, Any] = {"description": self.description}
        if self.schema_node is not None:
            out["content"] = {"application/json": {"schema": self.schema_node.to_openapi()}}
        return out


class Operation(BaseModel):
    """One HTTP operation standing in for a contract function."""

    summary: str
    operation_id: str
    tags: list[str] = []
    signature: str = ""
    parameters: list[QueryParameter] = []
    request_body: SchemaNode | None = None
    responses: dict[str, ResponseSpec] = {}

    def to_openapi(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "summary": self.summary,
            "operationId": self.operation_id,
            "tags": list(self.tags),
            "parameters": [p.to_openapi() for p in self.parameters],
        }
        if self.signature:
            out["description"] = f"Solidity signature: `{self.signature}`"
        if self.request_body is not None:
            out["requestBody"] = {
                "required": True,
                "content": {"application/json": {"schema": self.request_body.to_openapi()}},
            }
        out["responses"] = {code: r.to_openapi() for code, r in self.responses.items()}
        return out


class ApiDocument(BaseModel):
    """The generated API document, keyed by path then HTTP verb."""

    openapi: str = OPENAPI_VERSION
    info: Info
    paths: dict[str, dict[str, Operation]] = Field(default_factory=dict)

    def operation(self, path: str, verb: HttpVerb) -> Operation | None:
        return self.paths.get(path, {}).get(verb)

    def to_openapi(self) -> dict[str, Any]:
        """Render as a plain dict ready for JSON or YAML serialization."""
        return {
            "openapi": self.openapi,
            "info": self.info.model_dump(),
            "paths": {
                path: {verb: op.to_openapi() for verb, op in verbs.items()}
                for path, verbs in self.paths.items()
            },
            "components": {"schemas": {}},
        }
