"""
ledger.py - Stateful Token Ledger

The TokenLedger class is the central state manager for a capped, pausable,
owned fungible token. It owns a single TokenState and is the only code that
mutates it, ensuring controlled and auditable changes.

Key responsibilities:
    - Implements TokenView for safe read-only access by guard functions
    - Executes operations atomically (every guard passes before any write)
    - Returns a Receipt for every mutating call instead of raising
    - Always logs applied operations and their events (clone, replay)
"""

from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .core import (
    # Types
    Address, TokenState, Operation, Receipt, Event,
    # Constants
    ZERO_ADDRESS, DEFAULT_CAP, INITIAL_SUPPLY, DEFAULT_NAME, DEFAULT_SYMBOL,
    MAX_UINT256, EVENT_OWNERSHIP_TRANSFERRED, EVENT_PAUSED, EVENT_UNPAUSED,
    # Exceptions
    TokenError, InvalidOwner, InvalidReceiver, InvalidSpender,
    InvalidSender, InvalidApprover,
    # Helpers
    is_null_address, validate_amount, transfer_event, approval_event,
)
from .guards import (
    Guard, evaluate,
    only_owner, when_not_paused, non_null, within_cap,
    has_balance, has_allowance, can_increase, can_decrease,
)


class TokenLedger:
    """
    Capped, pausable, owned fungible token ledger.

    Implements the TokenView protocol, so the ledger itself can be handed to
    any function that only needs to read balances, allowances or flags.

    Design Principles:
        - Check then act: guards run in a fixed stage order (ownership, pause,
          allowance, addresses, limits) and every one must pass before any write.
        - Always logs: every applied operation is recorded with its events,
          enabling clone() and replay().

    Thread Safety:
        Not thread-safe. The caller provides serialisation; each call observes
        the state left by the previous call.

    Example:
        token = TokenLedger("alice", verbose=False)
        token.approve("alice", "bob", 100)
        receipt = token.transfer_from("bob", "alice", "carol", 150)
        assert receipt.error == ErrorKind.INSUFFICIENT_ALLOWANCE
    """

    def __init__(
        self,
        deployer: Address,
        cap: int = DEFAULT_CAP,
        initial_supply: int = INITIAL_SUPPLY,
        name: str = DEFAULT_NAME,
        symbol: str = DEFAULT_SYMBOL,
        verbose: bool = True,
    ):
        """
        Deploy a token.

        The deployer becomes the owner and receives the initial supply.

        Args:
            deployer: Identity deploying the token
            cap: Maximum total supply, fixed for the ledger's lifetime
            initial_supply: Amount minted to the deployer at creation
            name: Token name
            symbol: Token symbol
            verbose: Enable console output (default: True)

        Raises:
            ValueError: If deployer is null, cap is not positive, or
                        initial_supply exceeds cap
        """
        if is_null_address(deployer):
            raise ValueError("Deployer cannot be the zero address")
        validate_amount(cap, "cap")
        validate_amount(initial_supply, "initial_supply")
        if cap == 0:
            raise ValueError("cap is 0")
        if initial_supply > cap:
            raise ValueError(f"initial_supply {initial_supply} exceeds cap {cap}")

        self._genesis: Dict[str, Any] = {
            'deployer': deployer,
            'cap': cap,
            'initial_supply': initial_supply,
            'name': name,
            'symbol': symbol,
        }
        self._state = TokenState(
            name=name,
            symbol=symbol,
            cap_amount=cap,
            owner_address=deployer,
        )
        self.verbose = verbose
        self.transaction_log: List[Operation] = []
        self.events: List[Event] = []
        # Monotonic sequence counter for execution ordering
        self._next_sequence: int = 0

        self.events.append(Event(
            EVENT_OWNERSHIP_TRANSFERRED,
            (("previous_owner", ZERO_ADDRESS), ("new_owner", deployer)),
        ))
        if initial_supply:
            self._credit(deployer, initial_supply)
            self._state.supply = initial_supply
            self.events.append(transfer_event(ZERO_ADDRESS, deployer, initial_supply))

        if self.verbose:
            print(f"📝 Deployed: {symbol} ({name}) owner={deployer} "
                  f"supply={initial_supply} cap={cap}")

    # ========================================================================
    # TokenView PROTOCOL IMPLEMENTATION (read-only methods)
    # ========================================================================

    def balance_of(self, address: Optional[Address]) -> int:
        """Balance held by an account (0 for unknown or null addresses)."""
        return self._state.balance_of(address)

    def allowance(self, owner: Optional[Address], spender: Optional[Address]) -> int:
        """Amount spender may still move or burn on behalf of owner."""
        return self._state.allowance(owner, spender)

    def total_supply(self) -> int:
        return self._state.total_supply()

    def owner(self) -> Optional[Address]:
        """Current owner, or None once ownership has been renounced."""
        return self._state.owner()

    def paused(self) -> bool:
        return self._state.paused()

    def cap(self) -> int:
        return self._state.cap()

    def name(self) -> str:
        return self._state.name

    def symbol(self) -> str:
        return self._state.symbol

    def holders(self) -> Dict[Address, int]:
        """Return all non-zero balances keyed by account."""
        return dict(self._state.balances)

    def snapshot(self) -> TokenState:
        """Return an independent copy of the current state."""
        return self._state.copy()

    def verify_supply(self) -> Dict[str, Any]:
        """
        Verify that the supply invariants hold.

        Checks that total supply equals the sum of all balances, that no
        balance or allowance is negative, and that total supply does not
        exceed the cap.

        Returns:
            Dict with keys:
            - 'valid': bool - True if every invariant holds
            - 'total_supply': int - Recorded total supply
            - 'sum_of_balances': int - Sum over all accounts
            - 'cap': int - Supply ceiling
            - 'discrepancies': List[str] - Description of each violation

        Example:
            result = token.verify_supply()
            assert result['valid'], result['discrepancies']
        """
        state = self._state
        discrepancies = []
        sum_of_balances = sum(state.balances.values())

        if sum_of_balances != state.supply:
            discrepancies.append(
                f"total supply {state.supply} != sum of balances {sum_of_balances}"
            )
        if state.supply > state.cap_amount:
            discrepancies.append(f"total supply {state.supply} > cap {state.cap_amount}")
        for address, balance in state.balances.items():
            if balance < 0:
                discrepancies.append(f"negative balance {balance} for {address}")
        for (owner, spender), amount in state.allowances.items():
            if amount < 0:
                discrepancies.append(f"negative allowance {amount} for {owner}->{spender}")

        return {
            'valid': len(discrepancies) == 0,
            'total_supply': state.supply,
            'sum_of_balances': sum_of_balances,
            'cap': state.cap_amount,
            'discrepancies': discrepancies,
        }

    # ========================================================================
    # SUPPLY OPERATIONS (Mutating)
    # ========================================================================

    def mint(self, caller: Address, to: Address, amount: int) -> Receipt:
        """
        Create new tokens and credit them to an account.

        Owner only. Not affected by the pause switch.

        Rejections: Unauthorized, InvalidReceiver, CapExceeded.
        """
        amount = validate_amount(amount)

        def effect() -> List[Event]:
            self._credit(to, amount)
            self._state.supply += amount
            return [transfer_event(ZERO_ADDRESS, to, amount)]

        return self._execute("mint", caller, (to, amount), [
            only_owner(caller),
            non_null(to, InvalidReceiver, "mint to the zero address"),
            within_cap(amount),
        ], effect)

    def burn(self, caller: Address, amount: int) -> Receipt:
        """
        Destroy tokens from the caller's own balance.

        Rejections: InvalidSender, InsufficientBalance.
        """
        amount = validate_amount(amount)

        def effect() -> List[Event]:
            self._debit(caller, amount)
            self._state.supply -= amount
            return [transfer_event(caller, ZERO_ADDRESS, amount)]

        return self._execute("burn", caller, (amount,), [
            non_null(caller, InvalidSender, "burn from the zero address"),
            has_balance(caller, amount),
        ], effect)

    def burn_from(self, caller: Address, owner: Address, amount: int) -> Receipt:
        """
        Destroy tokens from owner's balance, spending the caller's allowance.

        The allowance is checked before the owner address and the balance;
        all must pass before anything changes.

        Rejections: InsufficientAllowance, InvalidSender, InsufficientBalance.
        """
        amount = validate_amount(amount)

        def effect() -> List[Event]:
            events = self._spend_allowance(owner, caller, amount)
            self._debit(owner, amount)
            self._state.supply -= amount
            events.append(transfer_event(owner, ZERO_ADDRESS, amount))
            return events

        return self._execute("burn_from", caller, (owner, amount), [
            has_allowance(owner, caller, amount),
            non_null(owner, InvalidSender, "burn from the zero address"),
            has_balance(owner, amount),
        ], effect)

    # ========================================================================
    # ALLOWANCE OPERATIONS (Mutating)
    # ========================================================================

    def approve(self, caller: Address, spender: Address, amount: int) -> Receipt:
        """
        Set spender's allowance over the caller's tokens to exactly amount.

        Rejections: InvalidApprover, InvalidSpender.
        """
        amount = validate_amount(amount)
        return self._execute("approve", caller, (spender, amount),
                             self._approval_guards(caller, spender),
                             lambda: self._approve(caller, spender, amount))

    def increase_allowance(self, caller: Address, spender: Address, delta: int) -> Receipt:
        """
        Add delta to spender's allowance over the caller's tokens.

        Rejections: InvalidApprover, InvalidSpender, AllowanceOverflow.
        """
        delta = validate_amount(delta, "delta")
        guards = self._approval_guards(caller, spender)
        guards.append(can_increase(caller, spender, delta))
        return self._execute(
            "increase_allowance", caller, (spender, delta), guards,
            lambda: self._approve(caller, spender, self.allowance(caller, spender) + delta),
        )

    def decrease_allowance(self, caller: Address, spender: Address, delta: int) -> Receipt:
        """
        Subtract delta from spender's allowance over the caller's tokens.

        Rejections: InvalidApprover, InvalidSpender, AllowanceUnderflow.
        """
        delta = validate_amount(delta, "delta")
        guards = self._approval_guards(caller, spender)
        guards.append(can_decrease(caller, spender, delta))
        return self._execute(
            "decrease_allowance", caller, (spender, delta), guards,
            lambda: self._approve(caller, spender, self.allowance(caller, spender) - delta),
        )

    # ========================================================================
    # TRANSFER OPERATIONS (Mutating, pausable)
    # ========================================================================

    def transfer(self, caller: Address, to: Address, amount: int) -> Receipt:
        """
        Move tokens from the caller to another account.

        Rejections: ContractPaused, InvalidSender, InvalidReceiver,
        InsufficientBalance.
        """
        amount = validate_amount(amount)
        return self._execute("transfer", caller, (to, amount), [
            when_not_paused(),
            non_null(caller, InvalidSender, "transfer from the zero address"),
            non_null(to, InvalidReceiver, "transfer to the zero address"),
            has_balance(caller, amount),
        ], lambda: self._move(caller, to, amount))

    def transfer_from(self, caller: Address, from_: Address, to: Address, amount: int) -> Receipt:
        """
        Move tokens from one account to another, spending the caller's allowance.

        Rejections: ContractPaused, InsufficientAllowance, InvalidSender,
        InvalidReceiver, InsufficientBalance.
        """
        amount = validate_amount(amount)

        def effect() -> List[Event]:
            events = self._spend_allowance(from_, caller, amount)
            events.extend(self._move(from_, to, amount))
            return events

        return self._execute("transfer_from", caller, (from_, to, amount), [
            when_not_paused(),
            has_allowance(from_, caller, amount),
            non_null(from_, InvalidSender, "transfer from the zero address"),
            non_null(to, InvalidReceiver, "transfer to the zero address"),
            has_balance(from_, amount),
        ], effect)

    # ========================================================================
    # ADMINISTRATIVE OPERATIONS (Mutating, owner only)
    # ========================================================================

    def pause(self, caller: Address) -> Receipt:
        """
        Block transfer and transfer_from.

        Pausing an already paused ledger is applied as a re-affirmation and
        emits no event.
        """
        return self._execute("pause", caller, (), [only_owner(caller)],
                             lambda: self._set_paused(caller, True))

    def unpause(self, caller: Address) -> Receipt:
        """Re-enable transfer and transfer_from. Idempotent like pause()."""
        return self._execute("unpause", caller, (), [only_owner(caller)],
                             lambda: self._set_paused(caller, False))

    def transfer_ownership(self, caller: Address, new_owner: Address) -> Receipt:
        """
        Hand ownership to another account.

        Rejections: Unauthorized, InvalidOwner.
        """
        return self._execute("transfer_ownership", caller, (new_owner,), [
            only_owner(caller),
            non_null(new_owner, InvalidOwner, "new owner is the zero address"),
        ], lambda: self._set_owner(new_owner))

    def renounce_ownership(self, caller: Address) -> Receipt:
        """
        Give up ownership permanently.

        Afterwards owner() is None and mint, pause, unpause and ownership
        transfers are rejected with Unauthorized for every caller.
        """
        return self._execute("renounce_ownership", caller, (), [only_owner(caller)],
                             lambda: self._set_owner(None))

    # ========================================================================
    # EXECUTION
    # ========================================================================

    def _generate_exec_id(self, sequence: int) -> str:
        """
        Generate a unique execution ID.

        Format: exec:{symbol}:{sequence:012d}
        """
        return f"exec:{self._state.symbol}:{sequence:012d}"

    def _execute(
        self,
        name: str,
        caller: Address,
        args: Tuple[Any, ...],
        guards: Iterable[Guard],
        effect: Callable[[], List[Event]],
    ) -> Receipt:
        """
        Evaluate guards, then apply the effect and log the operation.

        The effect only runs once every guard has passed, so a rejection
        leaves state, log and events untouched.

        Returns:
            Receipt with status APPLIED, or REJECTED with the error kind
        """
        try:
            evaluate(self._state, guards)
        except TokenError as e:
            if self.verbose:
                print(f"✗ REJECTED: {name} by {caller}: {type(e).__name__}: {e}")
            return Receipt.rejected(name, e)

        events = tuple(effect())

        sequence = self._next_sequence
        self._next_sequence += 1
        op = Operation(
            name=name,
            caller=caller,
            args=args,
            sequence_number=sequence,
            exec_id=self._generate_exec_id(sequence),
            events=events,
        )
        self.transaction_log.append(op)
        self.events.extend(events)

        if self.verbose:
            self._print_op_result(op)
        return Receipt.applied(op)

    def _print_op_result(self, op: Operation) -> None:
        """Print the boxed operation summary with a result line appended."""
        lines = repr(op).split('\n')
        w = 80
        bar = "─" * w
        lines[-1] = f"├{bar}┤"
        lines.append(f"│{' ✓ APPLIED':<{w}}│")
        lines.append(f"└{bar}┘")
        print("\n".join(lines))

    # ========================================================================
    # EFFECTS (only called after guards pass)
    # ========================================================================

    @staticmethod
    def _approval_guards(caller: Address, spender: Address) -> List[Guard]:
        return [
            non_null(caller, InvalidApprover, "approve from the zero address"),
            non_null(spender, InvalidSpender, "approve to the zero address"),
        ]

    def _credit(self, address: Address, amount: int) -> None:
        self._state.set_balance(address, self._state.balance_of(address) + amount)

    def _debit(self, address: Address, amount: int) -> None:
        self._state.set_balance(address, self._state.balance_of(address) - amount)

    def _move(self, source: Address, dest: Address, amount: int) -> List[Event]:
        self._debit(source, amount)
        self._credit(dest, amount)
        return [transfer_event(source, dest, amount)]

    def _approve(self, owner: Address, spender: Address, amount: int) -> List[Event]:
        self._state.set_allowance(owner, spender, amount)
        return [approval_event(owner, spender, amount)]

    def _spend_allowance(self, owner: Address, spender: Address, amount: int) -> List[Event]:
        """Consume allowance; an allowance of MAX_UINT256 is never consumed."""
        current = self._state.allowance(owner, spender)
        if current == MAX_UINT256:
            return []
        return self._approve(owner, spender, current - amount)

    def _set_paused(self, account: Address, paused: bool) -> List[Event]:
        if self._state.is_paused == paused:
            return []
        self._state.is_paused = paused
        return [Event(EVENT_PAUSED if paused else EVENT_UNPAUSED, (("account", account),))]

    def _set_owner(self, new_owner: Optional[Address]) -> List[Event]:
        previous = self._state.owner_address
        self._state.owner_address = new_owner
        return [Event(
            EVENT_OWNERSHIP_TRANSFERRED,
            (("previous_owner", previous), ("new_owner", new_owner or ZERO_ADDRESS)),
        )]

    # ========================================================================
    # LEDGER OPERATIONS
    # ========================================================================

    def clone(self) -> TokenLedger:
        """
        Create a deep copy of this ledger.

        All state is fully independent: operations on the clone do not
        affect the original, and vice versa.

        Returns:
            A new TokenLedger with identical state, log and events
        """
        cloned = TokenLedger.__new__(TokenLedger)
        cloned._genesis = dict(self._genesis)
        cloned._state = self._state.copy()
        cloned.verbose = self.verbose
        # Operations and events are frozen, so shallow list copies suffice
        cloned.transaction_log = list(self.transaction_log)
        cloned.events = list(self.events)
        cloned._next_sequence = self._next_sequence
        return cloned

    def replay(self) -> TokenLedger:
        """
        Create a new ledger by redeploying and replaying the transaction log.

        Only applied operations are logged, so every one of them must apply
        again on the fresh ledger.

        Returns:
            New TokenLedger with replayed state

        Raises:
            TokenError: If an operation is rejected during replay
        """
        replayed = TokenLedger(verbose=self.verbose, **self._genesis)
        for op in self.transaction_log:
            receipt = getattr(replayed, op.name)(op.caller, *op.args)
            if not receipt.ok:
                raise TokenError(f"Replay failed at {op.exec_id}: {receipt.reason}")
        return replayed

