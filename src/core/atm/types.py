"""Data types for the `atm` teller kernel.

All types are frozen dataclasses (immutable) or enums.

Conventions:
- `cash_inside` is a non-negative integer number of currency units.
- PIN hashes are unsigned 64-bit integers (`0 <= h < 2**64`).
- `register` is an ordered tuple of keypad keys typed since the last `Enter`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Callable, Sequence, Union

U64_LIMIT: int = 1 << 64


@unique
class Key(Enum):
    """Keys on the ATM keypad."""
    ONE = "1"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    ENTER = "enter"


@unique
class Event(Enum):
    """One member per transition branch of the kernel."""
    CARD_ACCEPTED = "CardAccepted"
    CARD_IGNORED = "CardIgnored"
    KEY_BUFFERED = "KeyBuffered"
    KEY_DISCARDED = "KeyDiscarded"
    PIN_ACCEPTED = "PinAccepted"
    PIN_REJECTED = "PinRejected"
    CASH_DISPENSED = "CashDispensed"
    WITHDRAWAL_REJECTED = "WithdrawalRejected"
    ENTER_IGNORED = "EnterIgnored"


def _require_u64(value: object, *, name: str) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0 or value >= U64_LIMIT:
        raise ValueError(f"{name} must fit in an unsigned 64-bit integer")


# -- Actions -----------------------------------------------------------------


@dataclass(frozen=True)
class SwipeCard:
    """Swipe a card. `pin_hash` is the hash of the PIN to be keyed in next."""

    pin_hash: int

    def __post_init__(self) -> None:
        _require_u64(self.pin_hash, name="pin_hash")


@dataclass(frozen=True)
class PressKey:
    """Press a single key on the keypad."""

    key: Key

    def __post_init__(self) -> None:
        if not isinstance(self.key, Key):
            raise TypeError(f"key must be a Key, got {type(self.key).__name__}")


Action = Union[SwipeCard, PressKey]

# Hash collaborator: key sequence -> unsigned 64-bit PIN hash.
KeyHasher = Callable[[Sequence[Key]], int]


# -- Authentication states ---------------------------------------------------


@dataclass(frozen=True)
class Waiting:
    """No session has begun. Waiting for a card swipe."""


@dataclass(frozen=True)
class Authenticating:
    """A card was swiped; waiting for the PIN whose hash is `expected_hash`."""

    expected_hash: int

    def __post_init__(self) -> None:
        if not isinstance(self.expected_hash, int) or isinstance(self.expected_hash, bool):
            raise TypeError("expected_hash must be an int")


@dataclass(frozen=True)
class Authenticated:
    """PIN verified. Waiting for a withdrawal amount."""


AuthState = Union[Waiting, Authenticating, Authenticated]

AUTH_STATE_TYPES: tuple[type, ...] = (Waiting, Authenticating, Authenticated)


# -- Machine -----------------------------------------------------------------


@dataclass(frozen=True)
class Machine:
    """Complete state of one ATM.

    The ATM learns the expected PIN hash from the swiped card, then buffers
    digits until `Enter`. A wrong PIN returns the card. A correct PIN lets the
    user key in an amount, bounded only by the cash inside the machine (there
    is no account balance).
    """

    cash_inside: int
    auth: AuthState = Waiting()
    register: tuple[Key, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.cash_inside, int) or isinstance(self.cash_inside, bool):
            raise TypeError("cash_inside must be an int")
        if self.cash_inside < 0:
            raise ValueError("cash_inside must be non-negative")
        if not isinstance(self.auth, AUTH_STATE_TYPES):
            raise TypeError(f"auth must be an AuthState, got {type(self.auth).__name__}")
        if not isinstance(self.register, tuple):
            # Accept any sequence at construction, store an immutable tuple.
            object.__setattr__(self, "register", tuple(self.register))
        for key in self.register:
            if not isinstance(key, Key):
                raise TypeError(f"register items must be Key, got {type(key).__name__}")


# -- Step observables --------------------------------------------------------


@dataclass(frozen=True)
class Effect:
    """Observables of a single transition."""

    event: Event
    dispensed: int = 0
    cash_after: int = 0


@dataclass(frozen=True)
class StepResult:
    """Result of a single kernel step. Every step yields a state."""

    state: Machine
    effect: Effect
