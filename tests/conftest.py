"""
conftest.py - Shared pytest fixtures for TokenLedger tests

Provides common fixtures used across unit, functional and conformance tests:
- A freshly deployed token (owner holds the initial 1000)
- A token with an outstanding allowance
- A paused token
- Invariant helpers
"""

import pytest
from typing import Dict, Any

from tokenledger import TokenLedger, ReceiptStatus


OWNER = "owner"
ACCOUNT = "account"
SPENDER = "spender"
AMOUNT = 100


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def assert_invariants(token: TokenLedger) -> None:
    """Assert conservation, cap and non-negativity for a token."""
    result = token.verify_supply()
    assert result['valid'], result['discrepancies']
    assert token.total_supply() == sum(token.holders().values())
    assert token.total_supply() <= token.cap()


def state_of(token: TokenLedger) -> Dict[str, Any]:
    """Capture every observable piece of token state for comparison."""
    snap = token.snapshot()
    return {
        "balances": dict(snap.balances),
        "allowances": dict(snap.allowances),
        "supply": snap.supply,
        "owner": snap.owner_address,
        "paused": snap.is_paused,
        "cap": snap.cap_amount,
        "log_length": len(token.transaction_log),
        "event_count": len(token.events),
    }


def assert_rejected_without_change(token: TokenLedger, call, error_kind) -> None:
    """Run call, expect a rejection of the given kind and no state change."""
    before = state_of(token)
    receipt = call()
    assert receipt.status == ReceiptStatus.REJECTED
    assert receipt.error == error_kind
    assert receipt.sequence_number is None
    assert receipt.events == ()
    assert state_of(token) == before


# =============================================================================
# BASIC FIXTURES
# =============================================================================

@pytest.fixture
def token():
    """Freshly deployed token owned by OWNER with the default 1000 supply."""
    return TokenLedger(OWNER, verbose=False)


@pytest.fixture
def approved_token(token):
    """Token where OWNER has approved SPENDER for AMOUNT."""
    token.approve(OWNER, SPENDER, AMOUNT)
    return token


@pytest.fixture
def funded_token(token):
    """Token where OWNER has sent 300 to ACCOUNT."""
    token.transfer(OWNER, ACCOUNT, 300)
    return token


@pytest.fixture
def paused_token(funded_token):
    """Funded token with the pause switch on."""
    funded_token.pause(OWNER)
    return funded_token
