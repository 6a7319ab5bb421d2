"""Assembles an OpenAPI document from a contract ABI.

Every ``function`` entry becomes one operation at
``/api/{contract}/{function}``: ``get`` with query parameters for
pure/view functions, ``post`` with a JSON body for everything else.
Events, errors and the constructor are skipped.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel

from abi_openapi.document import ApiDocument, HttpVerb, Info, Operation, QueryParameter, ResponseSpec
from abi_openapi.errors import InputAbsentError, PathCollisionError
from abi_openapi.logging import get_logger
from abi_openapi.mapper import DEFAULT_MAX_DEPTH, duplicate_field, map_type
from abi_openapi.parser.base import AbiEntry, CallableEntry, EntryKind, Mutability, TypeDescriptor
from abi_openapi.schema import Diagnostic, SchemaKind, SchemaNode

logger = get_logger("assembler")

DEFAULT_TITLE = "Smart Contract API"

VALUE_FIELD = "value"
VALUE_DESCRIPTION = "amount transferred with the call"
EMPTY_RESULT_EXAMPLE = "Transaction hash or success"


class OverloadPolicy(str, Enum):
    """How functions sharing a name (and so a path) are handled."""

    LAST_WINS = "last-wins"
    SIGNATURE = "signature"
    REJECT = "reject"


class AssemblyResult(BaseModel):
    document: ApiDocument
    diagnostics: list[Diagnostic] = []


def select_verb(mutability: Mutability) -> HttpVerb:
    return "get" if mutability.is_read_only else "post"


def function_path(contract_name: str, fn: CallableEntry, disambiguate: bool = False) -> str:
    path = f"/api/{contract_name}/{fn.name}"
    if disambiguate:
        path += f"~{signature_hash(fn.signature)}"
    return path


def signature_hash(signature: str) -> str:
    return hashlib.sha256(signature.encode("utf-8")).hexdigest()[:8]


def assemble(
    entries: Iterable[AbiEntry | Mapping[str, Any]],
    contract_name: str,
    title: str | None = None,
    *,
    overloads: OverloadPolicy = OverloadPolicy.LAST_WINS,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> AssemblyResult:
    """Build the API document for ``contract_name`` from its ABI entries.

    Raises InputAbsentError when the ABI declares no functions, and
    PathCollisionError when ``overloads`` is REJECT and two functions
    share a path and verb.
    """
    overloads = OverloadPolicy(overloads)
    abi = [e if isinstance(e, AbiEntry) else AbiEntry.model_validate(e) for e in entries]
    if not abi:
        raise InputAbsentError(f"No functions found in ABI for {contract_name}")

    functions = [CallableEntry.from_abi(e) for e in abi if e.type is EntryKind.FUNCTION]
    if not functions:
        raise InputAbsentError(f"No functions found in ABI for {contract_name}")
    logger.debug("assembling %d of %d ABI entries for %s", len(functions), len(abi), contract_name)

    overloaded = _overloaded_names(functions) if overloads is OverloadPolicy.SIGNATURE else set()
    document = ApiDocument(info=Info(title=f"{contract_name} {title or DEFAULT_TITLE}"))
    diagnostics: list[Diagnostic] = []
    claimed: dict[tuple[str, str], str] = {}

    for fn in functions:
        disambiguate = fn.name in overloaded
        path = function_path(contract_name, fn, disambiguate)
        verb = select_verb(fn.mutability)

        previous = claimed.get((path, verb))
        if previous is not None:
            if overloads is OverloadPolicy.REJECT:
                raise PathCollisionError(path, verb, [previous, fn.signature])
            diagnostics.append(
                Diagnostic(
                    code="path-collision",
                    message=f"{fn.signature} replaces {previous} at {verb.upper()} {path}",
                    location=fn.signature,
                )
            )
        claimed[(path, verb)] = fn.signature

        replaced = document.operation(path, verb)
        if replaced is not None:
            # The replaced operation's id is unique already; the newcomer takes it over.
            operation_id = replaced.operation_id
        else:
            operation_id = f"{contract_name}_{fn.name}"
            if disambiguate or operation_id in _operation_ids(document):
                operation_id += f"_{signature_hash(fn.signature)}"
        operation, found = build_operation(fn, verb, operation_id, tags=[contract_name], max_depth=max_depth)
        diagnostics.extend(found)
        document.paths.setdefault(path, {})[verb] = operation

    return AssemblyResult(document=document, diagnostics=diagnostics)


def build_operation(
    fn: CallableEntry,
    verb: HttpVerb,
    operation_id: str,
    *,
    tags: list[str] | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> tuple[Operation, list[Diagnostic]]:
    """Build the operation for one function along with its diagnostics."""
    diagnostics: list[Diagnostic] = []
    parameters: list[QueryParameter] = []
    request_body: SchemaNode | None = None

    if verb == "get":
        taken: set[str] = set()
        for index, arg in enumerate(fn.inputs):
            positional = f"param{index}"
            name = arg.field_key(positional)
            if name in taken:
                diagnostics.append(
                    Diagnostic(
                        code="duplicate-field",
                        message=f"Query parameter {name!r} of {fn.signature} is declared more than once; "
                        f"renamed to {positional!r}",
                        location=f"{fn.name}.inputs[{index}]",
                    )
                )
                name = positional
            taken.add(name)
            schema = _map(arg, f"{fn.name}.inputs[{index}]", diagnostics, max_depth)
            parameters.append(QueryParameter(name=name, schema_node=schema, description=arg.raw_type))
    else:
        request_body = _request_body(fn, diagnostics, max_depth)

    return (
        Operation(
            summary=f"Call {fn.name} function",
            operation_id=operation_id,
            tags=tags or [],
            signature=fn.signature,
            parameters=parameters,
            request_body=request_body,
            responses={
                "200": ResponseSpec(description="Success", schema_node=_response_schema(fn, diagnostics, max_depth)),
                "400": ResponseSpec(description="Invalid input"),
                "500": ResponseSpec(description="Contract error"),
            },
        ),
        diagnostics,
    )


def _request_body(fn: CallableEntry, diagnostics: list[Diagnostic], max_depth: int) -> SchemaNode:
    properties = _keyed_schemas(fn, fn.inputs, "inputs", "param", diagnostics, max_depth)
    required = list(properties)
    if fn.mutability.accepts_value:
        if VALUE_FIELD in properties:
            diagnostics.append(duplicate_field(VALUE_FIELD, fn.signature))
        properties[VALUE_FIELD] = SchemaNode(kind=SchemaKind.INTEGER, description=VALUE_DESCRIPTION)
        if VALUE_FIELD not in required:
            required.append(VALUE_FIELD)
    return SchemaNode(kind=SchemaKind.OBJECT, properties=properties, required=tuple(required))


def _response_schema(fn: CallableEntry, diagnostics: list[Diagnostic], max_depth: int) -> SchemaNode:
    if not fn.outputs:
        return SchemaNode(kind=SchemaKind.STRING, example=EMPTY_RESULT_EXAMPLE)
    if len(fn.outputs) == 1:
        return _map(fn.outputs[0], f"{fn.name}.outputs[0]", diagnostics, max_depth)
    properties = _keyed_schemas(fn, fn.outputs, "outputs", "return", diagnostics, max_depth)
    return SchemaNode(kind=SchemaKind.OBJECT, properties=properties)


def _keyed_schemas(
    fn: CallableEntry,
    args: list[TypeDescriptor],
    side: str,
    placeholder: str,
    diagnostics: list[Diagnostic],
    max_depth: int,
) -> dict[str, SchemaNode]:
    schemas: dict[str, SchemaNode] = {}
    for index, arg in enumerate(args):
        positional = f"{placeholder}{index}"
        # Return values carry compiler-generated internal types; key them by position.
        key = (arg.name or positional) if side == "outputs" else arg.field_key(positional)
        if key in schemas:
            diagnostics.append(duplicate_field(key, fn.signature))
        schemas[key] = _map(arg, f"{fn.name}.{side}[{index}]", diagnostics, max_depth)
    return schemas


def _map(arg: TypeDescriptor, location: str, diagnostics: list[Diagnostic], max_depth: int) -> SchemaNode:
    result = map_type(arg, max_depth=max_depth)
    diagnostics.extend(d.model_copy(update={"location": location}) for d in result.diagnostics)
    return result.schema_node


def _operation_ids(document: ApiDocument) -> set[str]:
    return {op.operation_id for verbs in document.paths.values() for op in verbs.values()}


def _overloaded_names(functions: list[CallableEntry]) -> set[str]:
    signatures: dict[str, set[str]] = {}
    for fn in functions:
        signatures.setdefault(fn.name, set()).add(fn.signature)
    return {name for name, sigs in signatures.items() if len(sigs) > 1}
