"""Data models for parsed contract ABIs.

Artifact and ABI loaders convert their input into these models; the type
mapper and document assembler operate only on them.
"""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

_ARRAY_SUFFIX = re.compile(r"(\[\d*\])+$")


def base_type(raw_type: str) -> str:
    """Strip every trailing array dimension: ``tuple[2][]`` -> ``tuple``."""
    return _ARRAY_SUFFIX.sub("", raw_type)


def is_structured(raw_type: str) -> bool:
    base = base_type(raw_type)
    return base == "tuple" or base.startswith("struct")


class Mutability(str, Enum):
    """Declared side-effect classification of a contract function."""

    PURE = "pure"
    VIEW = "view"
    NONPAYABLE = "nonpayable"
    PAYABLE = "payable"

    @property
    def is_read_only(self) -> bool:
        return self in (Mutability.PURE, Mutability.VIEW)

    @property
    def accepts_value(self) -> bool:
        return self is Mutability.PAYABLE


class EntryKind(str, Enum):
    """Tag carried by every ABI entry."""

    FUNCTION = "function"
    EVENT = "event"
    CONSTRUCTOR = "constructor"
    ERROR = "error"
    FALLBACK = "fallback"
    RECEIVE = "receive"


class TypeDescriptor(BaseModel):
    """One declared Solidity type, possibly nested through ``components``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    raw_type: str = Field(alias="type")
    name: str = ""
    internal_type: str | None = Field(default=None, alias="internalType")
    components: list[TypeDescriptor] | None = None
    optional: bool = False

    @model_validator(mode="after")
    def _check_components(self) -> TypeDescriptor:
        structured = is_structured(self.raw_type)
        if self.components is not None and not structured:
            raise ValueError(f"type {self.raw_type!r} cannot declare components")
        if self.components is None and base_type(self.raw_type) == "tuple":
            raise ValueError(f"type {self.raw_type!r} requires components")
        return self

    def field_key(self, placeholder: str) -> str:
        """Key used for this value inside an object schema."""
        return self.name or self.internal_type or placeholder

    @property
    def canonical(self) -> str:
        """Canonical ABI text, with tuples expanded: ``(uint256,bool)[]``."""
        if self.components is None or base_type(self.raw_type) != "tuple":
            return self.raw_type
        inner = ",".join(c.canonical for c in self.components)
        return f"({inner}){self.raw_type[len('tuple'):]}"


class AbiEntry(BaseModel):
    """A single raw ABI record as emitted by the Solidity compiler."""

    model_config = ConfigDict(populate_by_name=True)

    type: EntryKind = EntryKind.FUNCTION
    name: str = ""
    inputs: list[TypeDescriptor] = []
    outputs: list[TypeDescriptor] = []
    state_mutability: Mutability | None = Field(default=None, alias="stateMutability")

    @model_validator(mode="before")
    @classmethod
    def _legacy_mutability(cls, data):
        # Pre-0.5 compilers emitted constant/payable flags instead.
        if not isinstance(data, dict) or data.get("stateMutability"):
            return data
        if data.get("type", "function") != "function":
            return data
        data = dict(data)
        if data.get("payable"):
            data["stateMutability"] = Mutability.PAYABLE.value
        elif data.get("constant"):
            data["stateMutability"] = Mutability.VIEW.value
        else:
            data["stateMutability"] = Mutability.NONPAYABLE.value
        return data


class CallableEntry(BaseModel):
    """One contract function, the unit the assembler turns into an operation."""

    model_config = ConfigDict(frozen=True)

    name: str
    inputs: list[TypeDescriptor]
    outputs: list[TypeDescriptor]
    mutability: Mutability

    @classmethod
    def from_abi(cls, entry: AbiEntry) -> CallableEntry:
        return cls(
            name=entry.name,
            inputs=entry.inputs,
            outputs=entry.outputs,
            mutability=entry.state_mutability or Mutability.NONPAYABLE,
        )

    @property
    def signature(self) -> str:
        """Canonical signature, e.g. ``transfer(address,uint256)``."""
        return f"{self.name}({','.join(i.canonical for i in self.inputs)})"
