"""
test_core_types.py - Unit tests for core data structures

Tests:
- Address and amount helpers
- TokenState: reads, zero-entry pruning, copy independence
- Event, Operation: immutability, intent ids, repr
- Receipt: status helpers and raise_for_error
- Error taxonomy
"""

import pytest
from dataclasses import FrozenInstanceError
from typing import Optional, get_type_hints

from tokenledger import (
    TokenState, TokenView, Event, Operation, Receipt, ReceiptStatus, ErrorKind,
    TokenError, Unauthorized, CapExceeded, InsufficientAllowance,
    ERRORS_BY_KIND, is_null_address, validate_amount,
    ZERO_ADDRESS, MAX_UINT256, EVENT_TRANSFER,
)
from tokenledger.core import transfer_event, approval_event


def _state(**kwargs) -> TokenState:
    defaults = dict(name="Token", symbol="TKN", cap_amount=1_000_000, owner_address="owner")
    defaults.update(kwargs)
    return TokenState(**defaults)


class TestAddressHelpers:
    """Tests for null identifier detection."""

    @pytest.mark.parametrize("address", [None, "", ZERO_ADDRESS])
    def test_null_addresses(self, address):
        assert is_null_address(address) is True

    @pytest.mark.parametrize("address", ["alice", "0x0000000000000000000000000000000000000001"])
    def test_non_null_addresses(self, address):
        assert is_null_address(address) is False


class TestValidateAmount:
    """Tests for amount validation."""

    def test_accepts_zero_and_max(self):
        assert validate_amount(0) == 0
        assert validate_amount(MAX_UINT256) == MAX_UINT256

    def test_rejects_negative(self):
        with pytest.raises(ValueError, match="non-negative"):
            validate_amount(-1)

    def test_rejects_above_max(self):
        with pytest.raises(ValueError, match="MAX_UINT256"):
            validate_amount(MAX_UINT256 + 1)

    @pytest.mark.parametrize("amount", [1.5, "10", None, True])
    def test_rejects_non_int(self, amount):
        with pytest.raises(ValueError, match="must be int"):
            validate_amount(amount)

    def test_label_in_message(self):
        with pytest.raises(ValueError, match="delta"):
            validate_amount(-5, "delta")


class TestTokenState:
    """Tests for the mutable store."""

    def test_implements_token_view(self):
        assert isinstance(_state(), TokenView)

    def test_missing_entries_read_as_zero(self):
        state = _state()
        assert state.balance_of("nobody") == 0
        assert state.allowance("a", "b") == 0

    def test_null_addresses_read_as_zero(self):
        state = _state()
        state.set_balance("alice", 10)
        for address in [None, "", ZERO_ADDRESS]:
            assert state.balance_of(address) == 0
            assert state.allowance(address, address) == 0

    @pytest.mark.parametrize("reader", [TokenView.balance_of, TokenState.balance_of])
    def test_balance_reader_accepts_none(self, reader):
        assert get_type_hints(reader)["address"] == Optional[str]

    @pytest.mark.parametrize("reader", [TokenView.allowance, TokenState.allowance])
    def test_allowance_reader_accepts_none(self, reader):
        hints = get_type_hints(reader)
        assert hints["owner"] == hints["spender"] == Optional[str]

    def test_set_balance_zero_removes_entry(self):
        state = _state()
        state.set_balance("alice", 10)
        assert state.balances == {"alice": 10}
        state.set_balance("alice", 0)
        assert "alice" not in state.balances

    def test_set_allowance_zero_removes_entry(self):
        state = _state()
        state.set_allowance("alice", "bob", 5)
        assert state.allowance("alice", "bob") == 5
        state.set_allowance("alice", "bob", 0)
        assert ("alice", "bob") not in state.allowances

    def test_copy_is_independent(self):
        state = _state()
        state.set_balance("alice", 10)
        state.set_allowance("alice", "bob", 3)
        copied = state.copy()
        copied.set_balance("alice", 99)
        copied.set_allowance("alice", "bob", 0)
        copied.is_paused = True
        assert state.balance_of("alice") == 10
        assert state.allowance("alice", "bob") == 3
        assert state.paused() is False


class TestEvent:
    """Tests for Event records."""

    def test_transfer_event_fields(self):
        event = transfer_event("alice", "bob", 5)
        assert event.name == EVENT_TRANSFER
        assert event.get("from") == "alice"
        assert event.get("to") == "bob"
        assert event.get("value") == 5
        assert event.get("missing", "default") == "default"

    def test_event_is_frozen(self):
        event = approval_event("alice", "bob", 5)
        with pytest.raises(FrozenInstanceError):
            event.name = "Other"

    def test_event_repr(self):
        assert repr(transfer_event("a", "b", 1)) == "Transfer(from='a', to='b', value=1)"


class TestOperation:
    """Tests for Operation records."""

    def test_intent_id_deterministic(self):
        op1 = Operation("transfer", "alice", ("bob", 5), 0, "exec:TKN:000000000000")
        op2 = Operation("transfer", "alice", ("bob", 5), 7, "exec:TKN:000000000007")
        assert op1.intent_id == op2.intent_id
        assert len(op1.intent_id) == 16

    def test_intent_id_depends_on_content(self):
        op1 = Operation("transfer", "alice", ("bob", 5), 0, "x")
        op2 = Operation("transfer", "alice", ("bob", 6), 0, "x")
        op3 = Operation("transfer", "carol", ("bob", 5), 0, "x")
        assert len({op1.intent_id, op2.intent_id, op3.intent_id}) == 3

    def test_empty_name_raises(self):
        with pytest.raises(ValueError, match="name cannot be empty"):
            Operation("", "alice", (), 0, "x")

    def test_operation_is_frozen(self):
        op = Operation("pause", "owner", (), 0, "x")
        with pytest.raises(FrozenInstanceError):
            op.caller = "mallory"

    def test_repr_contains_call_and_events(self):
        op = Operation("transfer", "alice", ("bob", 5), 3, "exec:TKN:000000000003",
                       events=(transfer_event("alice", "bob", 5),))
        text = repr(op)
        assert "exec:TKN:000000000003" in text
        assert "transfer('bob', 5)" in text
        assert "Events (1)" in text


class TestReceipt:
    """Tests for Receipt construction and helpers."""

    def test_applied_receipt(self):
        op = Operation("mint", "owner", ("alice", 5), 4, "x",
                       events=(transfer_event(ZERO_ADDRESS, "alice", 5),))
        receipt = Receipt.applied(op)
        assert receipt.ok
        assert receipt.status == ReceiptStatus.APPLIED
        assert receipt.sequence_number == 4
        assert receipt.error is None
        assert receipt.events == op.events
        receipt.raise_for_error()  # no-op

    def test_rejected_receipt(self):
        receipt = Receipt.rejected("mint", CapExceeded("too much"))
        assert not receipt.ok
        assert receipt.error == ErrorKind.CAP_EXCEEDED
        assert receipt.reason == "too much"
        assert receipt.sequence_number is None

    def test_raise_for_error_uses_matching_exception(self):
        receipt = Receipt.rejected("transfer_from", InsufficientAllowance("short"))
        with pytest.raises(InsufficientAllowance, match="short"):
            receipt.raise_for_error()


class TestErrorTaxonomy:
    """Every ErrorKind maps to exactly one TokenError subclass."""

    def test_all_kinds_mapped(self):
        assert set(ERRORS_BY_KIND) == set(ErrorKind)

    def test_mapped_classes_are_token_errors(self):
        for kind, cls in ERRORS_BY_KIND.items():
            assert issubclass(cls, TokenError)
            assert cls.kind == kind

    def test_kind_values_use_error_names(self):
        assert Unauthorized.kind.value == "Unauthorized"
        assert ErrorKind.CONTRACT_PAUSED.value == "ContractPaused"
