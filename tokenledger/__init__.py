"""
tokenledger - Capped, Pausable, Owned Token Ledger

A fungible token ledger with integer balances, delegated-spending allowances,
a hard supply cap, an owner-gated pause switch and single-owner administration.

Usage:
    from tokenledger import TokenLedger, ErrorKind

    token = TokenLedger("alice")              # alice owns 1000 of 1,000,000
    token.mint("alice", "alice", 999_000)
    token.mint("alice", "alice", 1).error     # ErrorKind.CAP_EXCEEDED

    token.approve("alice", "bob", 100)
    receipt = token.transfer_from("bob", "alice", "carol", 60)
    assert receipt.ok
    assert token.allowance("alice", "bob") == 40

    token.pause("alice")
    token.transfer("carol", "bob", 10).error  # ErrorKind.CONTRACT_PAUSED
"""

# Core types
from .core import (
    TokenView,
    TokenState,
    Event,
    Operation,
    Receipt,
    ReceiptStatus,
    ErrorKind,
    TokenError,
    Unauthorized,
    InvalidOwner,
    InvalidReceiver,
    InvalidSpender,
    InvalidSender,
    InvalidApprover,
    ContractPaused,
    CapExceeded,
    InsufficientBalance,
    InsufficientAllowance,
    AllowanceUnderflow,
    AllowanceOverflow,
    ERRORS_BY_KIND,
    is_null_address,
    validate_amount,
    ZERO_ADDRESS,
    MAX_UINT256,
    DEFAULT_NAME,
    DEFAULT_SYMBOL,
    DEFAULT_CAP,
    INITIAL_SUPPLY,
    EVENT_TRANSFER,
    EVENT_APPROVAL,
    EVENT_OWNERSHIP_TRANSFERRED,
    EVENT_PAUSED,
    EVENT_UNPAUSED,
)

# Guards
from .guards import (
    Guard,
    evaluate,
    require_owner,
    require_not_paused,
    require_non_null,
    check_mint,
    require_balance,
    require_allowance,
    require_decrease_within,
    require_increase_within,
    only_owner,
    when_not_paused,
    non_null,
    within_cap,
    has_balance,
    has_allowance,
    can_increase,
    can_decrease,
)

# Ledger
from .ledger import TokenLedger


__all__ = [
    # Core
    'TokenView', 'TokenState', 'Event', 'Operation', 'Receipt', 'ReceiptStatus',
    'ErrorKind', 'ERRORS_BY_KIND', 'is_null_address', 'validate_amount',
    # Errors
    'TokenError', 'Unauthorized', 'InvalidOwner', 'InvalidReceiver',
    'InvalidSpender', 'InvalidSender', 'InvalidApprover', 'ContractPaused',
    'CapExceeded', 'InsufficientBalance', 'InsufficientAllowance',
    'AllowanceUnderflow', 'AllowanceOverflow',
    # Constants
    'ZERO_ADDRESS', 'MAX_UINT256', 'DEFAULT_NAME', 'DEFAULT_SYMBOL',
    'DEFAULT_CAP', 'INITIAL_SUPPLY',
    'EVENT_TRANSFER', 'EVENT_APPROVAL', 'EVENT_OWNERSHIP_TRANSFERRED',
    'EVENT_PAUSED', 'EVENT_UNPAUSED',
    # Guards
    'Guard', 'evaluate',
    'require_owner', 'require_not_paused', 'require_non_null', 'check_mint',
    'require_balance', 'require_allowance',
    'require_decrease_within', 'require_increase_within',
    'only_owner', 'when_not_paused', 'non_null', 'within_cap',
    'has_balance', 'has_allowance', 'can_increase', 'can_decrease',
    # Ledger
    'TokenLedger',
]


__version__ = '1.0.0'
