#!/usr/bin/env python3
"""
demo.py - Walk-through: Learn the Token Ledger Step by Step

Each step builds on the previous one. Press Enter to advance.

WHAT YOU'LL LEARN:
  1-3:  Foundation     - Deployment, transfers, rejections
  4-5:  Allowances     - approve, transfer_from, burn_from
  6-7:  Administration - The cap, the pause switch, ownership
  8:    Audit          - Transaction log, events, replay

Run:
    python demo.py           # Interactive mode (press Enter for each step)
    python demo.py --quick   # Run all steps without pausing
"""

from dataclasses import dataclass
import sys

from tokenledger import TokenLedger, ErrorKind


# ============================================================================
# CONFIGURATION
# ============================================================================

@dataclass
class DemoConfig:
    """Configuration for the walk-through. Modify these to experiment."""
    deployer: str = "0xA11CE00000000000000000000000000000000001"
    bob: str = "0xB0B0000000000000000000000000000000000002"
    carol: str = "0xCA20100000000000000000000000000000000003"
    cap: int = 1_000_000
    initial_supply: int = 1000
    allowance: int = 100


CONFIG = DemoConfig()

QUICK_MODE = "--quick" in sys.argv


def wait_for_enter():
    """Pause for user input unless in quick mode."""
    if not QUICK_MODE:
        input("\n[Press Enter to continue...]")


def step_header(number: int, title: str, objective: str):
    print(f"\n{'='*70}")
    print(f"STEP {number}: {title}")
    print(f"{'='*70}")
    print(f"\nObjective: {objective}\n")


def show_balances(token: TokenLedger):
    print(f"\n  total_supply = {token.total_supply():,} (cap {token.cap():,})")
    for account, balance in sorted(token.holders().items()):
        print(f"  {account}: {balance:,}")


# ============================================================================
# FOUNDATION
# ============================================================================

def step_01_deploy() -> TokenLedger:
    step_header(1, "Deployment",
        "The deployer becomes owner and receives the initial supply.")
    print(">>> token = TokenLedger(deployer)")
    token = TokenLedger(CONFIG.deployer, cap=CONFIG.cap,
                        initial_supply=CONFIG.initial_supply, verbose=True)
    print(f"\n  name={token.name()} symbol={token.symbol()} owner={token.owner()}")
    show_balances(token)
    wait_for_enter()
    return token


def step_02_transfer(token: TokenLedger):
    step_header(2, "Transfers",
        "Transfers move tokens between accounts without changing supply.")
    print(">>> token.transfer(deployer, bob, 250)")
    token.transfer(CONFIG.deployer, CONFIG.bob, 250)
    show_balances(token)
    wait_for_enter()


def step_03_rejection(token: TokenLedger):
    step_header(3, "Rejections",
        "A failing call returns a REJECTED receipt and changes nothing.")
    print(">>> receipt = token.transfer(carol, bob, 10)")
    receipt = token.transfer(CONFIG.carol, CONFIG.bob, 10)
    print(f"\n  status={receipt.status.value} error={receipt.error.value}")
    print(f"  reason={receipt.reason}")
    show_balances(token)
    wait_for_enter()


# ============================================================================
# ALLOWANCES
# ============================================================================

def step_04_allowance(token: TokenLedger):
    step_header(4, "Allowances",
        "An owner lets a spender move tokens on their behalf, up to a limit.")
    print(f">>> token.approve(deployer, carol, {CONFIG.allowance})")
    token.approve(CONFIG.deployer, CONFIG.carol, CONFIG.allowance)
    print(">>> token.transfer_from(carol, deployer, carol, 150)")
    receipt = token.transfer_from(CONFIG.carol, CONFIG.deployer, CONFIG.carol, 150)
    assert receipt.error == ErrorKind.INSUFFICIENT_ALLOWANCE
    print(f"\n  allowance still {token.allowance(CONFIG.deployer, CONFIG.carol)}")
    wait_for_enter()


def step_05_burn_from(token: TokenLedger):
    step_header(5, "Burning with an allowance",
        "burn_from spends allowance and shrinks total supply.")
    print(">>> token.burn_from(carol, deployer, 60)")
    token.burn_from(CONFIG.carol, CONFIG.deployer, 60)
    print(f"\n  allowance now {token.allowance(CONFIG.deployer, CONFIG.carol)}")
    show_balances(token)
    wait_for_enter()


# ============================================================================
# ADMINISTRATION
# ============================================================================

def step_06_cap(token: TokenLedger):
    step_header(6, "The supply cap",
        "Minting is owner-only and can never push supply above the cap.")
    headroom = token.cap() - token.total_supply()
    print(f">>> token.mint(deployer, deployer, {headroom})")
    token.mint(CONFIG.deployer, CONFIG.deployer, headroom)
    print(">>> token.mint(deployer, deployer, 1)")
    token.mint(CONFIG.deployer, CONFIG.deployer, 1)
    show_balances(token)
    wait_for_enter()


def step_07_pause_and_ownership(token: TokenLedger):
    step_header(7, "Pause and ownership",
        "The owner can freeze transfers; renouncing ownership is final.")
    token.pause(CONFIG.deployer)
    token.transfer(CONFIG.bob, CONFIG.carol, 10)
    token.unpause(CONFIG.deployer)
    token.transfer(CONFIG.bob, CONFIG.carol, 10)
    token.renounce_ownership(CONFIG.deployer)
    token.pause(CONFIG.deployer)
    print(f"\n  owner={token.owner()} paused={token.paused()}")
    wait_for_enter()


# ============================================================================
# AUDIT
# ============================================================================

def step_08_audit(token: TokenLedger):
    step_header(8, "Audit trail",
        "Every applied operation is logged; replaying the log rebuilds state.")
    print(f"  {len(token.transaction_log)} operations, {len(token.events)} events")
    for op in token.transaction_log:
        print(f"  [{op.sequence_number}] {op.name} by {op.caller} {op.args}")

    token.verbose = False
    replayed = token.replay()
    print(f"\n  replayed holders match: {replayed.holders() == token.holders()}")
    print(f"  supply invariants hold: {token.verify_supply()['valid']}")


def main():
    token = step_01_deploy()
    step_02_transfer(token)
    step_03_rejection(token)
    step_04_allowance(token)
    step_05_burn_from(token)
    step_06_cap(token)
    step_07_pause_and_ownership(token)
    step_08_audit(token)


if __name__ == "__main__":
    main()
