"""
ATM terminal driver.

Holds the current `Machine` of one physical terminal and feeds it actions
through the pure kernel. This is the imperative shell around `src.core.atm`:
it keeps the state between calls, records effects and logs what happened.
One terminal per physical ATM, driven by a single thread.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ..core.atm import (
    Action,
    AtmInvariantError,
    Effect,
    Event,
    Key,
    KeyHasher,
    Machine,
    PressKey,
    StepResult,
    SwipeCard,
    check_all,
    initial_state,
    keys_from_digits,
    state_to_dict,
    step,
)
from ..state.pin_hash import pin_hash
from .config import TerminalConfig


logger = logging.getLogger(__name__)

_SESSION_EVENTS = {
    Event.PIN_ACCEPTED,
    Event.PIN_REJECTED,
    Event.CASH_DISPENSED,
    Event.WITHDRAWAL_REJECTED,
}


class AtmTerminal:
    def __init__(self, config: Optional[TerminalConfig] = None, *, hasher: KeyHasher = pin_hash) -> None:
        self.config = config if config is not None else TerminalConfig()
        self.hasher = hasher
        self.state: Machine = initial_state(self.config.initial_cash)
        self.history: List[Effect] = []

    def submit(self, action: Action) -> StepResult:
        """Apply one action.

        With invariant checking on, a violating post-state raises
        `AtmInvariantError` and the held state is left as it was.
        """
        result = step(self.state, action, hasher=self.hasher)
        if self.config.check_invariants:
            violations = check_all(result.state)
            if violations:
                logger.error("rejecting post-state %s: %s", state_to_dict(result.state), violations)
                raise AtmInvariantError(violations)

        logger.debug(
            "%s -> %s (%s)",
            type(action).__name__,
            state_to_dict(result.state),
            result.effect.event.value,
        )
        if result.effect.event in _SESSION_EVENTS:
            logger.info(
                "%s: dispensed=%d cash_after=%d",
                result.effect.event.value,
                result.effect.dispensed,
                result.effect.cash_after,
            )

        self.state = result.state
        self.history.append(result.effect)
        return result

    def submit_all(self, actions: Iterable[Action]) -> Machine:
        for action in actions:
            self.submit(action)
        return self.state

    def swipe_card(self, pin_hash_value: int) -> StepResult:
        return self.submit(SwipeCard(pin_hash_value))

    def press_key(self, key: Key) -> StepResult:
        return self.submit(PressKey(key))

    def type_digits(self, digits: str) -> Machine:
        return self.submit_all(PressKey(k) for k in keys_from_digits(digits))

    def enter(self) -> StepResult:
        return self.submit(PressKey(Key.ENTER))

    @property
    def total_dispensed(self) -> int:
        return sum(e.dispensed for e in self.history)
