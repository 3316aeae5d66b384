"""
Driver layer around the ATM kernel: harness, terminal, config and scripts
"""

from .atm_script import SessionScript, load_script, parse_script, parse_tokens
from .atm_terminal import AtmTerminal
from .config import TerminalConfig
from .state_machine import StateMachine, run, trace

__all__ = [
    "AtmTerminal",
    "SessionScript",
    "StateMachine",
    "TerminalConfig",
    "load_script",
    "parse_script",
    "parse_tokens",
    "run",
    "trace",
]
