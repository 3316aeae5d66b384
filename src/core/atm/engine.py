"""Dispatch-table engine for the `atm` kernel.

``next_state(state, action)`` is the transition function. ``step(state, action)``
runs the same transition and also reports the branch taken as an ``Effect``.

Dispatch is keyed on ``(auth variant, action kind)``; the table covers every
pair, so both functions are total and never raise for a well-typed input.
The PIN hash is an injected dependency (``hasher``) defaulting to
``src.state.pin_hash.pin_hash``.
"""

from __future__ import annotations

from enum import Enum, unique
from typing import Callable

from ...state.pin_hash import pin_hash
from .types import (
    Action,
    Authenticated,
    Authenticating,
    Effect,
    Event,
    Key,
    KeyHasher,
    Machine,
    PressKey,
    StepResult,
    SwipeCard,
    Waiting,
)
from .updates import (
    digit_buffered,
    digit_when_waiting,
    enter_amount,
    enter_pin,
    enter_when_waiting,
    swipe_mid_session,
    swipe_when_waiting,
)


@unique
class ActionKind(Enum):
    SWIPE = "swipe"
    DIGIT = "digit"
    ENTER = "enter"


# (state, state.auth, action, hasher); each branch declares the narrowed
# auth and action types its dispatch key guarantees.
UpdateFn = Callable[..., tuple[Machine, Event]]

_DISPATCH: dict[tuple[type, ActionKind], UpdateFn] = {
    (Waiting, ActionKind.SWIPE): swipe_when_waiting,
    (Authenticating, ActionKind.SWIPE): swipe_mid_session,
    (Authenticated, ActionKind.SWIPE): swipe_mid_session,
    (Waiting, ActionKind.DIGIT): digit_when_waiting,
    (Authenticating, ActionKind.DIGIT): digit_buffered,
    (Authenticated, ActionKind.DIGIT): digit_buffered,
    (Waiting, ActionKind.ENTER): enter_when_waiting,
    (Authenticating, ActionKind.ENTER): enter_pin,
    (Authenticated, ActionKind.ENTER): enter_amount,
}


def action_kind(action: Action) -> ActionKind:
    if isinstance(action, SwipeCard):
        return ActionKind.SWIPE
    if isinstance(action, PressKey):
        return ActionKind.ENTER if action.key is Key.ENTER else ActionKind.DIGIT
    raise TypeError(f"unknown action type: {type(action).__name__}")


def step(state: Machine, action: Action, *, hasher: KeyHasher = pin_hash) -> StepResult:
    """Execute one action against the given state.

    Returns the next state and the ``Effect`` of the transition. ``dispensed``
    is the cash that left the machine, including the authentication debit.
    """
    update_fn = _DISPATCH[(type(state.auth), action_kind(action))]
    new_state, event = update_fn(state, state.auth, action, hasher)
    effect = Effect(
        event=event,
        dispensed=state.cash_inside - new_state.cash_inside,
        cash_after=new_state.cash_inside,
    )
    return StepResult(state=new_state, effect=effect)


def next_state(state: Machine, action: Action, *, hasher: KeyHasher = pin_hash) -> Machine:
    """Pure transition function: the machine after ``action``."""
    return step(state, action, hasher=hasher).state


class AtmStateMachine:
    """The ATM as a ``StateMachine[Machine, Action]`` for the generic harness.

    The state type and the machine type are the same here: a ``Machine`` value
    is the whole state.
    """

    def __init__(self, hasher: KeyHasher = pin_hash) -> None:
        self.hasher = hasher

    def next_state(self, state: Machine, transition: Action) -> Machine:
        return next_state(state, transition, hasher=self.hasher)
