import pytest
from pydantic import ValidationError

from abi_openapi.parser.base import (
    AbiEntry,
    CallableEntry,
    EntryKind,
    Mutability,
    TypeDescriptor,
    base_type,
)


class TestTypeDescriptor:
    def test_create_from_abi_keys(self):
        d = TypeDescriptor.model_validate({"name": "owner", "type": "address", "internalType": "address"})
        assert d.raw_type == "address"
        assert d.name == "owner"
        assert d.internal_type == "address"
        assert d.components is None

    def test_nested_tuple(self):
        d = TypeDescriptor.model_validate({
            "name": "order",
            "type": "tuple",
            "components": [
                {"name": "maker", "type": "address"},
                {"name": "legs", "type": "tuple[]", "components": [{"name": "qty", "type": "uint128"}]},
            ],
        })
        assert d.components[1].components[0].raw_type == "uint128"

    def test_tuple_requires_components(self):
        with pytest.raises(ValidationError):
            TypeDescriptor(type="tuple[2]")

    def test_primitive_rejects_components(self):
        with pytest.raises(ValidationError):
            TypeDescriptor(type="uint256", components=[])

    def test_field_key_fallback_chain(self):
        assert TypeDescriptor(type="bool", name="ok").field_key("x") == "ok"
        assert TypeDescriptor(type="bool", internalType="bool").field_key("x") == "bool"
        assert TypeDescriptor(type="bool").field_key("x") == "x"

    def test_canonical_expands_tuples(self):
        d = TypeDescriptor.model_validate({
            "type": "tuple[]",
            "components": [{"type": "address"}, {"type": "uint256"}],
        })
        assert d.canonical == "(address,uint256)[]"

    def test_base_type_strips_all_dimensions(self):
        assert base_type("uint256[2][]") == "uint256"
        assert base_type("tuple") == "tuple"


class TestMutability:
    def test_read_only(self):
        assert Mutability.PURE.is_read_only
        assert Mutability.VIEW.is_read_only
        assert not Mutability.NONPAYABLE.is_read_only
        assert not Mutability.PAYABLE.is_read_only

    def test_only_payable_accepts_value(self):
        assert [m for m in Mutability if m.accepts_value] == [Mutability.PAYABLE]

    def test_unknown_mutability_rejected(self):
        with pytest.raises(ValidationError):
            AbiEntry.model_validate({"type": "function", "name": "f", "stateMutability": "sometimes"})


class TestAbiEntry:
    def test_event_entry(self):
        e = AbiEntry.model_validate({
            "type": "event",
            "name": "Transfer",
            "anonymous": False,
            "inputs": [{"indexed": True, "name": "from", "type": "address"}],
        })
        assert e.type is EntryKind.EVENT
        assert e.outputs == []
        assert e.state_mutability is None

    def test_legacy_constant_is_view(self):
        e = AbiEntry.model_validate({"name": "totalSupply", "constant": True, "inputs": [], "outputs": []})
        assert e.type is EntryKind.FUNCTION
        assert e.state_mutability is Mutability.VIEW

    def test_legacy_payable(self):
        e = AbiEntry.model_validate({"type": "function", "name": "buy", "payable": True, "constant": False})
        assert e.state_mutability is Mutability.PAYABLE

    def test_legacy_default_nonpayable(self):
        e = AbiEntry.model_validate({"type": "function", "name": "set"})
        assert e.state_mutability is Mutability.NONPAYABLE

    def test_explicit_mutability_wins(self):
        e = AbiEntry.model_validate({"type": "function", "name": "f", "constant": True, "stateMutability": "pure"})
        assert e.state_mutability is Mutability.PURE


class TestCallableEntry:
    def test_from_abi_and_signature(self):
        entry = AbiEntry.model_validate({
            "type": "function",
            "name": "transfer",
            "inputs": [{"name": "to", "type": "address"}, {"name": "amount", "type": "uint256"}],
            "outputs": [{"name": "", "type": "bool"}],
            "stateMutability": "nonpayable",
        })
        fn = CallableEntry.from_abi(entry)
        assert fn.name == "transfer"
        assert fn.mutability is Mutability.NONPAYABLE
        assert fn.signature == "transfer(address,uint256)"
