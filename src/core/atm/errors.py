"""Exception types for the `atm` shell.

The kernel never raises for in-context misuse; these are used by the
terminal driver (invariant checking) and the session-script loader.
"""

from __future__ import annotations


class AtmInvariantError(Exception):
    """Raised when a post-state violates one or more invariants."""

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")


class ScriptError(ValueError):
    """Raised on a malformed session token or script."""
