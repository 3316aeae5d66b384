"""Invariant checkers for the `atm` kernel.

Each function returns True when the invariant holds, and `check_all()` returns
the list of violated invariant IDs (empty = all pass). Every state reachable
from `initial_state()` through `next_state()` passes all of them.
"""

from __future__ import annotations

from typing import Callable

from .types import U64_LIMIT, Authenticating, Key, Machine, Waiting


def inv_cash_nonneg(s: Machine) -> bool:
    # Machine.__post_init__ already rejects negative cash; this catches states
    # built around the constructor (object.__setattr__, copy tricks).
    return s.cash_inside >= 0


def inv_register_digits_only(s: Machine) -> bool:
    return Key.ENTER not in s.register


def inv_register_empty_when_waiting(s: Machine) -> bool:
    if not isinstance(s.auth, Waiting):
        return True
    return s.register == ()


def inv_expected_hash_u64(s: Machine) -> bool:
    if not isinstance(s.auth, Authenticating):
        return True
    return 0 <= s.auth.expected_hash < U64_LIMIT


# ---------------------------------------------------------------------------
# Registry + check_all
# ---------------------------------------------------------------------------

INVARIANT_REGISTRY: dict[str, Callable[[Machine], bool]] = {
    "inv_cash_nonneg": inv_cash_nonneg,
    "inv_register_digits_only": inv_register_digits_only,
    "inv_register_empty_when_waiting": inv_register_empty_when_waiting,
    "inv_expected_hash_u64": inv_expected_hash_u64,
}


def check_all(state: Machine) -> list[str]:
    """Return list of violated invariant IDs (empty = all pass)."""
    return [
        inv_id
        for inv_id, check_fn in INVARIANT_REGISTRY.items()
        if not check_fn(state)
    ]
