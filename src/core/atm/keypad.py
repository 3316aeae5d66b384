"""Keypad helpers for the `atm` kernel: digit values and the amount fold."""

from __future__ import annotations

from typing import Iterable

from .types import Key

DIGIT_VALUES: dict[Key, int] = {
    Key.ONE: 1,
    Key.TWO: 2,
    Key.THREE: 3,
    Key.FOUR: 4,
}

_DIGIT_KEYS: dict[str, Key] = {key.value: key for key in DIGIT_VALUES}


def is_digit(key: Key) -> bool:
    return key in DIGIT_VALUES


def register_amount(register: Iterable[Key]) -> int:
    """Fold the register left-to-right as base-10 digits.

    Non-digit keys are skipped. An empty register folds to 0.
    """
    amount = 0
    for key in register:
        value = DIGIT_VALUES.get(key)
        if value is None:
            continue
        amount = amount * 10 + value
    return amount


def keys_from_digits(text: str) -> tuple[Key, ...]:
    """Convert a digit string such as ``"1234"`` to keypad keys.

    Raises ValueError on any character that is not a keypad digit (1-4).
    """
    if not isinstance(text, str):
        raise TypeError("digits must be a str")
    keys: list[Key] = []
    for ch in text:
        key = _DIGIT_KEYS.get(ch)
        if key is None:
            raise ValueError(f"not a keypad digit: {ch!r}")
        keys.append(key)
    return tuple(keys)
