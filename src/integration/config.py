"""
Environment-driven settings for ATM terminals.

Variables:
- ATM_INITIAL_CASH      cash loaded into a new terminal (default 10)
- ATM_CHECK_INVARIANTS  check every post-state (default on)
- ATM_LOG_LEVEL         logging level name for the CLI (default WARNING)

Invalid values fall back to the defaults.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional


DEFAULT_INITIAL_CASH = 10
MAX_INITIAL_CASH = 1_000_000_000_000
DEFAULT_LOG_LEVEL = "WARNING"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_int(env: Mapping[str, str], name: str, default: int, *, lo: int, hi: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        v = int(raw.strip())
    except ValueError:
        return int(default)
    if v < lo:
        return int(lo)
    if v > hi:
        return int(hi)
    return int(v)


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in _TRUE_VALUES:
        return True
    if v in _FALSE_VALUES:
        return False
    return default


def _env_log_level(env: Mapping[str, str], name: str, default: str) -> str:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    v = raw.strip().upper()
    if not isinstance(logging.getLevelName(v), int):
        return default
    return v


@dataclass(frozen=True)
class TerminalConfig:
    initial_cash: int = DEFAULT_INITIAL_CASH
    check_invariants: bool = True
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        if not isinstance(self.initial_cash, int) or isinstance(self.initial_cash, bool):
            raise TypeError("initial_cash must be an int")
        if self.initial_cash < 0:
            raise ValueError("initial_cash must be non-negative")

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "TerminalConfig":
        e = os.environ if env is None else env
        return cls(
            initial_cash=_env_int(e, "ATM_INITIAL_CASH", DEFAULT_INITIAL_CASH, lo=0, hi=MAX_INITIAL_CASH),
            check_invariants=_env_bool(e, "ATM_CHECK_INVARIANTS", True),
            log_level=_env_log_level(e, "ATM_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        )
