"""
Hashing and canonical encoding collaborators for the ATM kernel
"""

from .canonical import canonical_json_bytes, domain_sep_bytes
from .pin_hash import hash_pin_digits, pin_hash

__all__ = [
    "canonical_json_bytes",
    "domain_sep_bytes",
    "hash_pin_digits",
    "pin_hash",
]
