"""
PIN hash collaborator (v1).

Maps an ordered sequence of keypad keys to an unsigned 64-bit integer. The
kernel only compares hashes for equality; there is no preimage resistance
requirement, but SHA-256 keeps collisions out of the way of tests.

Encoding:
    sha256(domain_sep("pin_hash", v1) || canonical_json([key.value, ...]))[:8]
read as a big-endian unsigned integer.
"""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING, Iterable

from .canonical import canonical_json_bytes, domain_sep_bytes

if TYPE_CHECKING:  # pragma: no cover
    from ..core.atm.types import Key


PIN_HASH_VERSION = 1
PIN_HASH_BYTES = 8


def _hash_values(values: list[str]) -> int:
    payload = domain_sep_bytes("pin_hash", version=PIN_HASH_VERSION) + canonical_json_bytes(values)
    digest = hashlib.sha256(payload).digest()
    return int.from_bytes(digest[:PIN_HASH_BYTES], "big")


def pin_hash(keys: Iterable[Key]) -> int:
    values: list[str] = []
    for key in keys:
        value = getattr(key, "value", None)
        if not isinstance(value, str):
            raise TypeError(f"pin_hash expects keypad keys, got {type(key).__name__}")
        values.append(value)
    return _hash_values(values)


def hash_pin_digits(digits: str) -> int:
    """Hash a PIN given as a digit string, e.g. ``hash_pin_digits("1234")``.

    Equal to ``pin_hash(keys_from_digits(digits))``; raises the same
    TypeError/ValueError as ``keys_from_digits`` for anything else.
    """
    # Deferred: the kernel engine imports this module.
    from ..core.atm.keypad import keys_from_digits

    return pin_hash(keys_from_digits(digits))
