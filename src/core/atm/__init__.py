"""`atm`: pure-Python ATM teller kernel.

- deterministic transitions over immutable state (frozen dataclasses),
- total: wrong PINs, over-withdrawals, stray keys and mid-session swipes all
  fail safe back to `Waiting` instead of raising,
- the PIN hash is injected (`hasher=`), defaulting to `src.state.pin_hash`.

Public API:
- `initial_state(cash) -> Machine`
- `next_state(state, action) -> Machine`
- `step(state, action) -> StepResult` (next state + effect)
"""

from .engine import ActionKind, AtmStateMachine, action_kind, next_state, step
from .errors import AtmInvariantError, ScriptError
from .invariants import INVARIANT_REGISTRY, check_all
from .keypad import DIGIT_VALUES, is_digit, keys_from_digits, register_amount
from .state import initial_state, state_from_dict, state_to_dict
from .types import (
    Action,
    Authenticated,
    Authenticating,
    AuthState,
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

__all__ = [
    "next_state",
    "step",
    "action_kind",
    "ActionKind",
    "AtmStateMachine",
    "initial_state",
    "state_from_dict",
    "state_to_dict",
    "check_all",
    "INVARIANT_REGISTRY",
    "DIGIT_VALUES",
    "is_digit",
    "keys_from_digits",
    "register_amount",
    "Action",
    "Authenticated",
    "Authenticating",
    "AuthState",
    "Effect",
    "Event",
    "Key",
    "KeyHasher",
    "Machine",
    "PressKey",
    "StepResult",
    "SwipeCard",
    "Waiting",
    "AtmInvariantError",
    "ScriptError",
]
