"""
Generic state machine harness.

A state machine here is anything with ``next_state(state, transition)``. The
harness owns nothing but the threading: it feeds transitions in order and hands
back the resulting state(s). Kernels stay pure; drivers (see ``atm_terminal``)
hold the current state between calls.
"""

from __future__ import annotations

from typing import Iterable, List, Protocol, TypeVar

S = TypeVar("S")
T = TypeVar("T")


class StateMachine(Protocol[S, T]):
    def next_state(self, state: S, transition: T) -> S:  # pragma: no cover
        ...


def run(machine: StateMachine[S, T], start: S, transitions: Iterable[T]) -> S:
    """Apply every transition in order; return the final state."""
    state = start
    for t in transitions:
        state = machine.next_state(state, t)
    return state


def trace(machine: StateMachine[S, T], start: S, transitions: Iterable[T]) -> List[S]:
    """Return ``[start, s1, s2, ...]``, one entry per transition applied."""
    states = [start]
    for t in transitions:
        states.append(machine.next_state(states[-1], t))
    return states
