"""State transition functions for the `atm` kernel.

One pure function per (auth state, action kind) branch. The engine passes the
auth state and action already narrowed by its dispatch key. Each returns the new
`Machine` together with the `Event` naming the branch taken. None of them
raise: misuse in context resets to `Waiting` with an empty register.
"""

from __future__ import annotations

from .keypad import register_amount
from .types import (
    AuthState,
    Authenticated,
    Authenticating,
    Event,
    Key,
    KeyHasher,
    Machine,
    PressKey,
    SwipeCard,
    Waiting,
)

# Cash debited when a PIN is accepted. Capped at the cash inside.
AUTH_DEBIT: int = 1

_WAITING = Waiting()
_AUTHENTICATED = Authenticated()


def _reset(state: Machine, *, cash_inside: int | None = None) -> Machine:
    """Back to the main menu: card returned, register cleared."""
    return Machine(
        cash_inside=state.cash_inside if cash_inside is None else cash_inside,
        auth=_WAITING,
        register=(),
    )


def _append(state: Machine, key: Key) -> Machine:
    return Machine(
        cash_inside=state.cash_inside,
        auth=state.auth,
        register=state.register + (key,),
    )


# -- SwipeCard ---------------------------------------------------------------


def swipe_when_waiting(
    state: Machine, auth: Waiting, action: SwipeCard, hasher: KeyHasher
) -> tuple[Machine, Event]:
    new_state = Machine(
        cash_inside=state.cash_inside,
        auth=Authenticating(action.pin_hash),
        register=(),
    )
    return new_state, Event.CARD_ACCEPTED


def swipe_mid_session(
    state: Machine, auth: AuthState, action: SwipeCard, hasher: KeyHasher
) -> tuple[Machine, Event]:
    # A second card cannot go in while a session is open.
    return state, Event.CARD_IGNORED


# -- Digit keys --------------------------------------------------------------


def digit_when_waiting(
    state: Machine, auth: Waiting, action: PressKey, hasher: KeyHasher
) -> tuple[Machine, Event]:
    return _reset(state), Event.KEY_DISCARDED


def digit_buffered(
    state: Machine, auth: AuthState, action: PressKey, hasher: KeyHasher
) -> tuple[Machine, Event]:
    return _append(state, action.key), Event.KEY_BUFFERED


# -- Enter -------------------------------------------------------------------


def enter_when_waiting(
    state: Machine, auth: Waiting, action: PressKey, hasher: KeyHasher
) -> tuple[Machine, Event]:
    return _reset(state), Event.ENTER_IGNORED


def enter_pin(
    state: Machine, auth: Authenticating, action: PressKey, hasher: KeyHasher
) -> tuple[Machine, Event]:
    actual_hash = hasher(state.register)
    if actual_hash != auth.expected_hash:
        return _reset(state), Event.PIN_REJECTED

    debit = min(AUTH_DEBIT, state.cash_inside)
    new_state = Machine(
        cash_inside=state.cash_inside - debit,
        auth=_AUTHENTICATED,
        register=(),
    )
    return new_state, Event.PIN_ACCEPTED


def enter_amount(
    state: Machine, auth: Authenticated, action: PressKey, hasher: KeyHasher
) -> tuple[Machine, Event]:
    amount = register_amount(state.register)
    if amount > state.cash_inside:
        return _reset(state), Event.WITHDRAWAL_REJECTED
    return _reset(state, cash_inside=state.cash_inside - amount), Event.CASH_DISPENSED
