"""
guards.py - Composable pre-mutation checks

Each check is a pure function over a TokenView that raises a TokenError
subclass when the operation must be rejected. TokenLedger wraps checks in
Guard objects and evaluates them before touching state, so a rejected call
never leaves a partial mutation behind.

Guards are ordered by stage, not by the order they are listed in:

    STAGE_ACCESS     ownership (AccessControl)
    STAGE_PAUSE      pause switch (PauseGate)
    STAGE_ALLOWANCE  spending allowance
    STAGE_ADDRESS    null-address checks
    STAGE_LIMITS     cap (SupplyCap), balance, allowance adjustments

Within a stage, listing order is preserved.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Type

from .core import (
    Address, TokenView, MAX_UINT256, is_null_address,
    TokenError, Unauthorized, ContractPaused, CapExceeded,
    InsufficientBalance, InsufficientAllowance,
    AllowanceUnderflow, AllowanceOverflow,
)


STAGE_ACCESS = 0
STAGE_PAUSE = 1
STAGE_ALLOWANCE = 2
STAGE_ADDRESS = 3
STAGE_LIMITS = 4


# ============================================================================
# CHECKS
# ============================================================================

def require_owner(view: TokenView, caller: Optional[Address]) -> None:
    """
    Reject unless caller is the current owner.

    Once ownership is renounced the owner is None and no caller matches,
    so every owner-gated operation is permanently disabled.
    """
    owner = view.owner()
    if owner is None or is_null_address(caller) or caller != owner:
        raise Unauthorized("caller is not the owner")


def require_not_paused(view: TokenView) -> None:
    if view.paused():
        raise ContractPaused("token transfer while paused")


def require_non_null(address: Optional[Address], error: Type[TokenError], message: str) -> None:
    """Reject a null identifier with the given error type."""
    if is_null_address(address):
        raise error(message)


def check_mint(view: TokenView, amount: int) -> None:
    """Reject a mint that would push total supply above the cap."""
    if view.total_supply() + amount > view.cap():
        raise CapExceeded(
            f"mint of {amount} exceeds cap: supply {view.total_supply()}, cap {view.cap()}"
        )


def require_balance(view: TokenView, account: Address, amount: int) -> None:
    balance = view.balance_of(account)
    if balance < amount:
        raise InsufficientBalance(
            f"{account}: amount {amount} exceeds balance {balance}"
        )


def require_allowance(view: TokenView, owner: Address, spender: Address, amount: int) -> None:
    current = view.allowance(owner, spender)
    if current < amount:
        raise InsufficientAllowance(
            f"{spender} on behalf of {owner}: amount {amount} exceeds allowance {current}"
        )


def require_decrease_within(view: TokenView, owner: Address, spender: Address, delta: int) -> None:
    current = view.allowance(owner, spender)
    if delta > current:
        raise AllowanceUnderflow(
            f"decreased allowance below zero: {current} - {delta}"
        )


def require_increase_within(view: TokenView, owner: Address, spender: Address, delta: int) -> None:
    current = view.allowance(owner, spender)
    if current + delta > MAX_UINT256:
        raise AllowanceOverflow("increased allowance above MAX_UINT256")


# ============================================================================
# GUARDS
# ============================================================================

@dataclass(frozen=True, slots=True)
class Guard:
    """
    A named check bound to its arguments, tagged with an evaluation stage.

    Attributes:
        stage: One of the STAGE_* constants; lower stages run first.
        name: Short label used in verbose output.
        check: Callable taking a TokenView and raising TokenError on failure.
    """
    stage: int
    name: str
    check: Callable[[TokenView], None]

    def __call__(self, view: TokenView) -> None:
        self.check(view)


def only_owner(caller: Optional[Address]) -> Guard:
    return Guard(STAGE_ACCESS, "only_owner", lambda v: require_owner(v, caller))


def when_not_paused() -> Guard:
    return Guard(STAGE_PAUSE, "when_not_paused", require_not_paused)


def non_null(address: Optional[Address], error: Type[TokenError], message: str) -> Guard:
    return Guard(
        STAGE_ADDRESS, f"non_null:{error.__name__}",
        lambda v: require_non_null(address, error, message),
    )


def within_cap(amount: int) -> Guard:
    return Guard(STAGE_LIMITS, "within_cap", lambda v: check_mint(v, amount))


def has_balance(account: Address, amount: int) -> Guard:
    return Guard(STAGE_LIMITS, "has_balance", lambda v: require_balance(v, account, amount))


def has_allowance(owner: Address, spender: Address, amount: int) -> Guard:
    return Guard(
        STAGE_ALLOWANCE, "has_allowance",
        lambda v: require_allowance(v, owner, spender, amount),
    )


def can_decrease(owner: Address, spender: Address, delta: int) -> Guard:
    return Guard(
        STAGE_LIMITS, "can_decrease",
        lambda v: require_decrease_within(v, owner, spender, delta),
    )


def can_increase(owner: Address, spender: Address, delta: int) -> Guard:
    return Guard(
        STAGE_LIMITS, "can_increase",
        lambda v: require_increase_within(v, owner, spender, delta),
    )


def evaluate(view: TokenView, guards: Iterable[Guard]) -> None:
    """
    Run guards in stage order, stopping at the first failure.

    Raises:
        TokenError: The first rejection encountered.
    """
    ordered: List[Guard] = sorted(guards, key=lambda g: g.stage)
    for guard in ordered:
        guard(view)
