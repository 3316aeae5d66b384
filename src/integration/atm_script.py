"""
Session scripts: text tokens and YAML documents -> kernel `Action` values.

Tokens:
  swipe=<digits>   swipe a card whose PIN is <digits> (hashed with pin_hash)
  hash=<int>       swipe a card carrying a raw PIN hash
  keys=<digits>    press each digit (a bare digit string like `14` is the same)
  enter            press Enter

YAML document:
  schema: atm/session-script/v1
  initial_cash: 10          # optional
  actions: [swipe=1234, "1234", enter, {keys: "1"}, enter]

Mapping items accept one of `swipe`, `hash` or `keys`.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Optional

import yaml

from ..core.atm import Action, Key, PressKey, ScriptError, SwipeCard, keys_from_digits
from ..state.pin_hash import hash_pin_digits


SCRIPT_SCHEMA = "atm/session-script/v1"


@dataclass(frozen=True)
class SessionScript:
    actions: List[Action]
    initial_cash: Optional[int] = None


def _digit_presses(digits: str, *, name: str) -> List[Action]:
    try:
        keys = keys_from_digits(digits)
    except ValueError as exc:
        raise ScriptError(f"{name}: {exc}") from exc
    return [PressKey(k) for k in keys]


def _swipe_pin(digits: str, *, name: str) -> Action:
    try:
        return SwipeCard(hash_pin_digits(digits))
    except ValueError as exc:
        raise ScriptError(f"{name}: {exc}") from exc


def _swipe_hash(raw: Any, *, name: str) -> Action:
    if isinstance(raw, str):
        try:
            raw = int(raw.strip(), 0)
        except ValueError as exc:
            raise ScriptError(f"{name}: hash must be an integer") from exc
    if not isinstance(raw, int) or isinstance(raw, bool):
        raise ScriptError(f"{name}: hash must be an integer")
    try:
        return SwipeCard(raw)
    except ValueError as exc:
        raise ScriptError(f"{name}: {exc}") from exc


def parse_token(token: str, *, name: str = "token") -> List[Action]:
    """Parse one token into the action(s) it stands for."""
    if not isinstance(token, str) or not token.strip():
        raise ScriptError(f"{name} must be a non-empty string")
    t = token.strip()
    if t.lower() == "enter":
        return [PressKey(Key.ENTER)]
    if "=" not in t:
        return _digit_presses(t, name=name)

    kind, _, value = t.partition("=")
    kind = kind.strip().lower()
    value = value.strip()
    if kind == "swipe":
        return [_swipe_pin(value, name=name)]
    if kind == "hash":
        return [_swipe_hash(value, name=name)]
    if kind == "keys":
        return _digit_presses(value, name=name)
    raise ScriptError(f"{name}: unknown token kind {kind!r}")


def parse_tokens(tokens: Iterable[str]) -> List[Action]:
    actions: List[Action] = []
    for i, token in enumerate(tokens):
        actions.extend(parse_token(token, name=f"token[{i}]"))
    return actions


def _parse_item(item: Any, *, name: str) -> List[Action]:
    if isinstance(item, int) and not isinstance(item, bool):
        # YAML reads an unquoted `14` as an int.
        return _digit_presses(str(item), name=name)
    if isinstance(item, str):
        return parse_token(item, name=name)
    if isinstance(item, dict):
        if len(item) != 1:
            raise ScriptError(f"{name} must have exactly one of swipe/hash/keys")
        (kind, value), = item.items()
        if kind == "swipe":
            return [_swipe_pin(str(value), name=name)]
        if kind == "hash":
            return [_swipe_hash(value, name=name)]
        if kind == "keys":
            return _digit_presses(str(value), name=name)
        raise ScriptError(f"{name}: unknown action kind {kind!r}")
    raise ScriptError(f"{name} must be a string or a mapping")


def parse_script(doc: Any) -> SessionScript:
    if not isinstance(doc, dict):
        raise ScriptError("script must be a mapping")
    schema = doc.get("schema")
    if schema != SCRIPT_SCHEMA:
        raise ScriptError(f"unsupported script schema: {schema!r}")

    initial_cash = doc.get("initial_cash")
    if initial_cash is not None:
        if not isinstance(initial_cash, int) or isinstance(initial_cash, bool) or initial_cash < 0:
            raise ScriptError("initial_cash must be a non-negative integer")

    items = doc.get("actions")
    if not isinstance(items, list):
        raise ScriptError("actions must be a list")
    actions: List[Action] = []
    for i, item in enumerate(items):
        actions.extend(_parse_item(item, name=f"actions[{i}]"))
    return SessionScript(actions=actions, initial_cash=initial_cash)


def load_script(path: Path) -> SessionScript:
    raw = path.read_text(encoding="utf-8")
    try:
        doc = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ScriptError(f"{path}: invalid YAML: {exc}") from exc
    return parse_script(doc)
