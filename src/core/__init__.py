"""
Core ATM algorithms
"""

from .atm import (
    Action,
    Machine,
    PressKey,
    StepResult,
    SwipeCard,
    initial_state,
    next_state,
    step,
)

__all__ = [
    "Action",
    "Machine",
    "PressKey",
    "StepResult",
    "SwipeCard",
    "initial_state",
    "next_state",
    "step",
]
