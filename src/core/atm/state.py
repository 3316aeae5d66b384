"""State construction and serialization for `atm`.

`initial_state(cash)` returns a fresh machine: `Waiting`, empty register.

Round-trip property (tested): `state_from_dict(state_to_dict(s)) == s` for all valid states.
The dict form is for display and trace tooling; machines are not persisted.
"""

from __future__ import annotations

from typing import Any, Mapping

from .types import Authenticated, Authenticating, AuthState, Key, Machine, Waiting

STATE_VAR_NAMES: tuple[str, ...] = ("cash_inside", "auth", "expected_pin_hash", "register")

AUTH_WAITING = "waiting"
AUTH_AUTHENTICATING = "authenticating"
AUTH_AUTHENTICATED = "authenticated"


def initial_state(cash_inside: int) -> Machine:
    """Return a machine holding `cash_inside` with no session open."""
    return Machine(cash_inside=cash_inside)


def _auth_name(auth: AuthState) -> str:
    if isinstance(auth, Waiting):
        return AUTH_WAITING
    if isinstance(auth, Authenticating):
        return AUTH_AUTHENTICATING
    return AUTH_AUTHENTICATED


def state_to_dict(state: Machine) -> dict[str, Any]:
    """Serialize a Machine to a plain JSON-compatible dict."""
    expected = state.auth.expected_hash if isinstance(state.auth, Authenticating) else None
    return {
        "cash_inside": state.cash_inside,
        "auth": _auth_name(state.auth),
        "expected_pin_hash": expected,
        "register": [key.value for key in state.register],
    }


def _require_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"state var {name!r} must be int, got {type(value).__name__}")
    return int(value)  # normalize int subclasses


def state_from_dict(d: Mapping[str, Any]) -> Machine:
    """Deserialize a dict to a Machine.

    Raises KeyError on missing fields, TypeError on wrong value types and
    ValueError on unknown auth names or key values.
    """
    cash_inside = _require_int(d["cash_inside"], name="cash_inside")

    auth_name = d["auth"]
    expected = d["expected_pin_hash"]
    auth: AuthState
    if auth_name == AUTH_WAITING:
        auth = Waiting()
    elif auth_name == AUTH_AUTHENTICATED:
        auth = Authenticated()
    elif auth_name == AUTH_AUTHENTICATING:
        auth = Authenticating(_require_int(expected, name="expected_pin_hash"))
    else:
        raise ValueError(f"unknown auth state: {auth_name!r}")
    if auth_name != AUTH_AUTHENTICATING and expected is not None:
        raise ValueError(f"expected_pin_hash must be null when auth is {auth_name!r}")

    raw_register = d["register"]
    if not isinstance(raw_register, (list, tuple)):
        raise TypeError(f"state var 'register' must be a list, got {type(raw_register).__name__}")
    register = tuple(Key(v) for v in raw_register)

    return Machine(cash_inside=cash_inside, auth=auth, register=register)
