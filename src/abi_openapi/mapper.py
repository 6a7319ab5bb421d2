"""Solidity type -> OpenAPI schema mapping.

Rules are tried in order and the first match wins:

1. dynamic array     ``T[]``
2. fixed array       ``T[N]``
3. tuple / struct
4. integers          ``uint*``, ``int*``, ``fixed*``, ``ufixed*``
5. ``bool``
6. ``string``
7. ``address``
8. ``bytes`` / ``bytesN``
9. anything else falls back to a plain string and yields a diagnostic.

Fixed-point types are coarsened to integers. For ``bytesN`` the schema's
``maxLength`` is the byte count N.
"""

from __future__ import annotations

import re

from abi_openapi.errors import TypeDepthError
from abi_openapi.logging import get_logger
from abi_openapi.parser.base import TypeDescriptor
from abi_openapi.schema import Diagnostic, MappingResult, SchemaKind, SchemaNode

logger = get_logger("mapper")

DEFAULT_MAX_DEPTH = 32

_FIXED_ARRAY = re.compile(r"^(.+?)\[(\d+)\]$")
_NUMERIC = re.compile(r"^(uint|int|fixed|ufixed)[0-9]*$")
_FIXED_BYTES = re.compile(r"^bytes(\d+)$")

ADDRESS_FORMAT = "ethereum-address"


def map_type(descriptor: TypeDescriptor | str, *, max_depth: int = DEFAULT_MAX_DEPTH) -> MappingResult:
    """Map one type descriptor (or bare type string) to a schema node.

    Never fails on unknown types; raises TypeDepthError only when nesting
    exceeds ``max_depth``.
    """
    if isinstance(descriptor, str):
        return _map(descriptor, None, 0, max_depth)
    return _map(descriptor.raw_type, descriptor.components, 0, max_depth)


def _map(raw_type: str, components: list[TypeDescriptor] | None, depth: int, max_depth: int) -> MappingResult:
    if depth > max_depth:
        raise TypeDepthError(f"type {raw_type!r} nests deeper than {max_depth} levels")

    if raw_type.endswith("[]"):
        inner = _map(raw_type[:-2], components, depth + 1, max_depth)
        return MappingResult(
            schema_node=SchemaNode(kind=SchemaKind.ARRAY, items=inner.schema_node),
            diagnostics=inner.diagnostics,
        )

    match = _FIXED_ARRAY.match(raw_type)
    if match:
        size = int(match.group(2))
        inner = _map(match.group(1), components, depth + 1, max_depth)
        return MappingResult(
            schema_node=SchemaNode(
                kind=SchemaKind.ARRAY,
                items=inner.schema_node,
                min_items=size,
                max_items=size,
            ),
            diagnostics=inner.diagnostics,
        )

    if raw_type == "tuple" or raw_type.startswith("struct"):
        return _map_struct(raw_type, components or [], depth, max_depth)

    if _NUMERIC.match(raw_type):
        return _leaf(SchemaNode(kind=SchemaKind.INTEGER))
    if raw_type == "bool":
        return _leaf(SchemaNode(kind=SchemaKind.BOOLEAN))
    if raw_type == "string":
        return _leaf(SchemaNode(kind=SchemaKind.STRING))
    if raw_type == "address":
        return _leaf(SchemaNode(kind=SchemaKind.STRING, format=ADDRESS_FORMAT))

    if raw_type == "bytes":
        return _leaf(SchemaNode(kind=SchemaKind.STRING, format="byte"))
    match = _FIXED_BYTES.match(raw_type)
    if match:
        return _leaf(SchemaNode(kind=SchemaKind.STRING, max_length=int(match.group(1))))

    logger.debug("unknown Solidity type %r, falling back to string", raw_type)
    return MappingResult(
        schema_node=SchemaNode(kind=SchemaKind.STRING),
        diagnostics=(
            Diagnostic(
                code="unrecognized-type",
                message=f"Unknown Solidity type: {raw_type}, falling back to string",
                raw_type=raw_type,
            ),
        ),
    )


def _map_struct(raw_type: str, components: list[TypeDescriptor], depth: int, max_depth: int) -> MappingResult:
    properties: dict[str, SchemaNode] = {}
    required: list[str] = []
    diagnostics: list[Diagnostic] = []

    for component in components:
        key = component.field_key("unnamed")
        result = _map(component.raw_type, component.components, depth + 1, max_depth)
        diagnostics.extend(result.diagnostics)
        if key in properties:
            diagnostics.append(duplicate_field(key, raw_type))
        properties[key] = result.schema_node
        if not component.optional and key not in required:
            required.append(key)

    return MappingResult(
        schema_node=SchemaNode(kind=SchemaKind.OBJECT, properties=properties, required=tuple(required)),
        diagnostics=tuple(diagnostics),
    )


def duplicate_field(key: str, owner: str) -> Diagnostic:
    return Diagnostic(
        code="duplicate-field",
        message=f"Field {key!r} of {owner} is declared more than once; the last one wins",
    )


def _leaf(node: SchemaNode) -> MappingResult:
    return MappingResult(schema_node=node)
