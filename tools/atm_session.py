#!/usr/bin/env python3
"""
Run a scripted ATM session through the kernel and print the resulting state.

Actions come from positional tokens, a YAML script, or both (script first):

  python3 tools/atm_session.py --cash 10 swipe=1234 1234 enter 1 enter
  python3 tools/atm_session.py --script session.yaml --trace

Output is canonical JSON: the final state, or with --trace one line per step
carrying the event, the cash dispensed and the post-state.

Settings default from ATM_INITIAL_CASH / ATM_CHECK_INVARIANTS / ATM_LOG_LEVEL;
flags override them.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.core.atm import Action, AtmInvariantError, ScriptError, state_to_dict  # noqa: E402
from src.integration.atm_script import load_script, parse_tokens  # noqa: E402
from src.integration.atm_terminal import AtmTerminal  # noqa: E402
from src.integration.config import TerminalConfig  # noqa: E402
from src.state.canonical import canonical_json_bytes  # noqa: E402


logger = logging.getLogger("atm_session")


def _dump(obj: object) -> str:
    return canonical_json_bytes(obj).decode("utf-8")


def main(argv: List[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Run a scripted ATM session and print the resulting state.")
    p.add_argument("tokens", nargs="*", help="Action tokens: swipe=<pin>, hash=<int>, keys=<digits>, <digits>, enter")
    p.add_argument("--cash", type=int, default=None, help="Initial cash inside the machine (overrides ATM_INITIAL_CASH)")
    p.add_argument("--script", type=Path, default=None, help="YAML session script (schema atm/session-script/v1)")
    p.add_argument("--trace", action="store_true", help="Print one JSON line per step instead of the final state only")
    p.add_argument("--no-check", action="store_true", help="Skip invariant checks on each post-state")
    p.add_argument("--log-level", default=None, help="Logging level (overrides ATM_LOG_LEVEL)")
    args = p.parse_args(argv)

    config = TerminalConfig.from_env()
    level = (args.log_level or config.log_level).upper()
    if not isinstance(logging.getLevelName(level), int):
        print(f"atm_session error: unknown log level {level!r}", file=sys.stderr)
        return 2
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)

    actions: List[Action] = []
    try:
        if args.script is not None:
            script = load_script(args.script)
            actions.extend(script.actions)
            if script.initial_cash is not None:
                config = replace(config, initial_cash=script.initial_cash)
        actions.extend(parse_tokens(args.tokens))
        if args.cash is not None:
            config = replace(config, initial_cash=args.cash)
        if args.no_check:
            config = replace(config, check_invariants=False)
    except (OSError, ScriptError, TypeError, ValueError) as exc:
        print(f"atm_session error: {exc}", file=sys.stderr)
        return 2

    terminal = AtmTerminal(config)
    logger.info("starting session: cash=%d actions=%d", config.initial_cash, len(actions))
    try:
        for action in actions:
            result = terminal.submit(action)
            if args.trace:
                print(_dump({
                    "event": result.effect.event.value,
                    "dispensed": result.effect.dispensed,
                    "state": state_to_dict(result.state),
                }))
    except AtmInvariantError as exc:
        print(f"atm_session error: {exc}", file=sys.stderr)
        return 2

    if not args.trace:
        print(_dump(state_to_dict(terminal.state)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
