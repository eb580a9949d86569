"""
Core types and pure functions for the token ledger.

This module provides the foundational data structures and protocols:
1. Protocols: TokenView for read-only access to token state
2. The mutable store: TokenState, owned by exactly one TokenLedger
3. Immutable records: Event, Operation, Receipt
4. Exceptions: TokenError and the rejection taxonomy
5. Address and amount helpers

Nothing in this module mutates a TokenState. Mutation happens only inside
TokenLedger, after every guard for the operation has passed.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import hashlib
from typing import (
    Dict, Optional, Any, Protocol, Tuple, Type, runtime_checkable
)


# ============================================================================
# CONSTANTS
# ============================================================================

# Reserved null identifier. Used as the counterparty of mint/burn Transfer
# events and as the new owner in the renounce event.
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Upper bound for any amount, allowance or supply.
MAX_UINT256 = 2 ** 256 - 1

# Deployment defaults.
DEFAULT_NAME = "Token"
DEFAULT_SYMBOL = "TKN"
DEFAULT_CAP = 1_000_000
INITIAL_SUPPLY = 1000

# Event names
EVENT_TRANSFER = "Transfer"
EVENT_APPROVAL = "Approval"
EVENT_OWNERSHIP_TRANSFERRED = "OwnershipTransferred"
EVENT_PAUSED = "Paused"
EVENT_UNPAUSED = "Unpaused"


# ============================================================================
# TYPE ALIASES
# ============================================================================

# Opaque account identifier.
Address = str

# Mapping from account to balance. Absent entries are zero.
BalanceMap = Dict[Address, int]

# Mapping from (owner, spender) to allowance. Absent entries are zero.
AllowanceMap = Dict[Tuple[Address, Address], int]


# ============================================================================
# ADDRESS AND AMOUNT HELPERS
# ============================================================================

def is_null_address(address: Optional[Address]) -> bool:
    """Return True for None, the empty string, or ZERO_ADDRESS."""
    return not address or address == ZERO_ADDRESS


def validate_amount(amount: Any, label: str = "amount") -> int:
    """
    Check that an amount is a plain integer in [0, MAX_UINT256].

    Malformed amounts are programming errors, not ledger rejections, so this
    raises ValueError instead of a TokenError.
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"{label} must be int, got {type(amount).__name__}")
    if amount < 0:
        raise ValueError(f"{label} must be non-negative, got {amount}")
    if amount > MAX_UINT256:
        raise ValueError(f"{label} exceeds MAX_UINT256")
    return amount


# ============================================================================
# PROTOCOLS
# ============================================================================

@runtime_checkable
class TokenView(Protocol):
    """
    Read-only interface to token state.

    Guard functions accept a TokenView to declare that they only inspect
    state. TokenState and TokenLedger both implement this protocol; tests
    use FakeView.
    """

    def balance_of(self, address: Optional[Address]) -> int:
        """Return the balance held by an account (0 if unknown or null)."""
        ...

    def allowance(self, owner: Optional[Address], spender: Optional[Address]) -> int:
        """Return how much spender may move on behalf of owner."""
        ...

    def total_supply(self) -> int:
        ...

    def owner(self) -> Optional[Address]:
        """Return the current owner, or None once ownership is renounced."""
        ...

    def paused(self) -> bool:
        ...

    def cap(self) -> int:
        ...


# ============================================================================
# ENUMS
# ============================================================================

class ReceiptStatus(Enum):
    """
    Outcome of a mutating call.

    APPLIED: All guards passed and the effects were committed.
    REJECTED: A guard failed; no state was changed.
    """
    APPLIED = "applied"
    REJECTED = "rejected"


class ErrorKind(Enum):
    """Tag identifying why an operation was rejected."""
    UNAUTHORIZED = "Unauthorized"
    INVALID_OWNER = "InvalidOwner"
    INVALID_RECEIVER = "InvalidReceiver"
    INVALID_SPENDER = "InvalidSpender"
    INVALID_SENDER = "InvalidSender"
    INVALID_APPROVER = "InvalidApprover"
    CONTRACT_PAUSED = "ContractPaused"
    CAP_EXCEEDED = "CapExceeded"
    INSUFFICIENT_BALANCE = "InsufficientBalance"
    INSUFFICIENT_ALLOWANCE = "InsufficientAllowance"
    ALLOWANCE_UNDERFLOW = "AllowanceUnderflow"
    ALLOWANCE_OVERFLOW = "AllowanceOverflow"


# ============================================================================
# EXCEPTIONS
# ============================================================================

class TokenError(Exception):
    """Base exception for all token ledger errors."""
    kind: Optional[ErrorKind] = None


class Unauthorized(TokenError):
    """Raised when a caller other than the owner attempts an owner-gated operation."""
    kind = ErrorKind.UNAUTHORIZED


class InvalidOwner(TokenError):
    """Raised when ownership would be transferred to the null address."""
    kind = ErrorKind.INVALID_OWNER


class InvalidReceiver(TokenError):
    """Raised when tokens would be credited to the null address."""
    kind = ErrorKind.INVALID_RECEIVER


class InvalidSpender(TokenError):
    """Raised when an allowance would be granted to the null address."""
    kind = ErrorKind.INVALID_SPENDER


class InvalidSender(TokenError):
    """Raised when tokens would be debited from the null address."""
    kind = ErrorKind.INVALID_SENDER


class InvalidApprover(TokenError):
    """Raised when the null address tries to grant an allowance."""
    kind = ErrorKind.INVALID_APPROVER


class ContractPaused(TokenError):
    """Raised when a pausable operation is attempted while the ledger is paused."""
    kind = ErrorKind.CONTRACT_PAUSED


class CapExceeded(TokenError):
    """Raised when a mint would push total supply above the cap."""
    kind = ErrorKind.CAP_EXCEEDED


class InsufficientBalance(TokenError):
    """Raised when an account holds less than the amount being moved or burned."""
    kind = ErrorKind.INSUFFICIENT_BALANCE


class InsufficientAllowance(TokenError):
    """Raised when a spender's allowance is smaller than the amount requested."""
    kind = ErrorKind.INSUFFICIENT_ALLOWANCE


class AllowanceUnderflow(TokenError):
    """Raised when decrease_allowance would take an allowance below zero."""
    kind = ErrorKind.ALLOWANCE_UNDERFLOW


class AllowanceOverflow(TokenError):
    """Raised when increase_allowance would take an allowance above MAX_UINT256."""
    kind = ErrorKind.ALLOWANCE_OVERFLOW


ERRORS_BY_KIND: Dict[ErrorKind, Type[TokenError]] = {
    cls.kind: cls for cls in (
        Unauthorized, InvalidOwner, InvalidReceiver, InvalidSpender,
        InvalidSender, InvalidApprover, ContractPaused, CapExceeded,
        InsufficientBalance, InsufficientAllowance,
        AllowanceUnderflow, AllowanceOverflow,
    )
}


# ============================================================================
# STORE
# ============================================================================

@dataclass
class TokenState:
    """
    Mutable store holding the complete state of one token.

    Attributes:
        name: Human-readable token name.
        symbol: Ticker symbol.
        cap_amount: Maximum total supply, fixed at construction.
        owner_address: Current owner, or None once renounced.
        is_paused: Whether transfer and transfer_from are blocked.
        supply: Current total supply (always equals the sum of balances).
        balances: Non-zero balances by account.
        allowances: Non-zero allowances by (owner, spender).

    Implements TokenView. Only TokenLedger writes to these fields.
    """
    name: str
    symbol: str
    cap_amount: int
    owner_address: Optional[Address]
    is_paused: bool = False
    supply: int = 0
    balances: BalanceMap = field(default_factory=dict)
    allowances: AllowanceMap = field(default_factory=dict)

    def balance_of(self, address: Optional[Address]) -> int:
        return self.balances.get(address, 0)

    def allowance(self, owner: Optional[Address], spender: Optional[Address]) -> int:
        return self.allowances.get((owner, spender), 0)

    def total_supply(self) -> int:
        return self.supply

    def owner(self) -> Optional[Address]:
        return self.owner_address

    def paused(self) -> bool:
        return self.is_paused

    def cap(self) -> int:
        return self.cap_amount

    def set_balance(self, address: Address, amount: int) -> None:
        """Write a balance, dropping the entry when it reaches zero."""
        if amount:
            self.balances[address] = amount
        else:
            self.balances.pop(address, None)

    def set_allowance(self, owner: Address, spender: Address, amount: int) -> None:
        """Write an allowance, dropping the entry when it reaches zero."""
        if amount:
            self.allowances[(owner, spender)] = amount
        else:
            self.allowances.pop((owner, spender), None)

    def copy(self) -> TokenState:
        """Return an independent copy of this state."""
        return TokenState(
            name=self.name,
            symbol=self.symbol,
            cap_amount=self.cap_amount,
            owner_address=self.owner_address,
            is_paused=self.is_paused,
            supply=self.supply,
            balances=dict(self.balances),
            allowances=dict(self.allowances),
        )


# ============================================================================
# RECORDS
# ============================================================================

@dataclass(frozen=True, slots=True)
class Event:
    """
    A notification emitted by an applied operation.

    Attributes:
        name: One of Transfer, Approval, OwnershipTransferred, Paused, Unpaused.
        args: Ordered (field, value) pairs, e.g. (("from", a), ("to", b), ("value", 5)).
    """
    name: str
    args: Tuple[Tuple[str, Any], ...]

    def get(self, key: str, default: Any = None) -> Any:
        for k, v in self.args:
            if k == key:
                return v
        return default

    def __repr__(self) -> str:
        body = ", ".join(f"{k}={v!r}" for k, v in self.args)
        return f"{self.name}({body})"


def transfer_event(source: Address, dest: Address, value: int) -> Event:
    return Event(EVENT_TRANSFER, (("from", source), ("to", dest), ("value", value)))


def approval_event(owner: Address, spender: Address, value: int) -> Event:
    return Event(EVENT_APPROVAL, (("owner", owner), ("spender", spender), ("value", value)))


def _compute_intent_id(name: str, caller: Address, args: Tuple[Any, ...]) -> str:
    """
    Deterministic content hash of an operation's intent.

    Two operations with the same name, caller and arguments share an intent
    id; exec_id is what distinguishes repeated executions.
    """
    content = "|".join([f"op:{name}", f"caller:{caller}"] + [f"arg:{a!r}" for a in args])
    return hashlib.sha256(content.encode()).hexdigest()[:16]


@dataclass(frozen=True, slots=True)
class Operation:
    """
    An executed, immutable record of one applied mutating call.

    Attributes:
        name: Operation name (e.g. "transfer", "mint").
        caller: Identity the executing environment assigned to the call.
        args: Positional arguments after the caller, in call order.
        sequence_number: Monotonic position within the ledger's log.
        exec_id: Unique execution identifier (ledger + sequence).
        events: Events emitted by this operation, in order.
        intent_id: Content hash of (name, caller, args), auto-computed.
    """
    name: str
    caller: Address
    args: Tuple[Any, ...]
    sequence_number: int
    exec_id: str
    events: Tuple[Event, ...] = ()
    intent_id: str = field(default="")

    def __post_init__(self):
        if not self.name:
            raise ValueError("Operation name cannot be empty")
        if not self.intent_id:
            object.__setattr__(
                self, 'intent_id', _compute_intent_id(self.name, self.caller, self.args)
            )

    def __repr__(self) -> str:
        w = 80
        bar = "─" * w

        def pad(text: str) -> str:
            if len(text) > w:
                return text[:w-3] + "..."
            return text + " " * (w - len(text))

        call = f"{self.name}({', '.join(repr(a) for a in self.args)})"
        lines = [
            "",
            f"┌{bar}┐",
            f"│{pad(' Operation: ' + self.exec_id)}│",
            f"├{bar}┤",
            f"│{pad('   call      : ' + call)}│",
            f"│{pad('   caller    : ' + str(self.caller))}│",
            f"│{pad('   intent_id : ' + self.intent_id)}│",
            f"│{pad('   sequence  : ' + str(self.sequence_number))}│",
        ]
        if self.events:
            lines.append(f"├{bar}┤")
            lines.append(f"│{pad(' Events (' + str(len(self.events)) + '):')}│")
            for i, event in enumerate(self.events):
                lines.append(f"│{pad(f'   [{i}] {event!r}')}│")
        lines.append(f"└{bar}┘")
        return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class Receipt:
    """
    Result of a mutating call: success, or the specific rejection.

    Attributes:
        status: APPLIED or REJECTED.
        operation: Name of the attempted operation.
        error: ErrorKind when rejected, None when applied.
        reason: Human-readable rejection message ("" when applied).
        sequence_number: Log position of the applied operation (None when rejected).
        events: Events emitted (empty when rejected).
    """
    status: ReceiptStatus
    operation: str
    error: Optional[ErrorKind] = None
    reason: str = ""
    sequence_number: Optional[int] = None
    events: Tuple[Event, ...] = ()

    @property
    def ok(self) -> bool:
        return self.status == ReceiptStatus.APPLIED

    def raise_for_error(self) -> None:
        """Re-raise a rejection as its TokenError subclass. No-op when applied."""
        if self.ok:
            return
        exc_type = ERRORS_BY_KIND.get(self.error, TokenError)
        raise exc_type(self.reason)

    @classmethod
    def applied(cls, op: Operation) -> Receipt:
        return cls(
            status=ReceiptStatus.APPLIED,
            operation=op.name,
            sequence_number=op.sequence_number,
            events=op.events,
        )

    @classmethod
    def rejected(cls, operation: str, error: TokenError) -> Receipt:
        return cls(
            status=ReceiptStatus.REJECTED,
            operation=operation,
            error=error.kind,
            reason=str(error),
        )
