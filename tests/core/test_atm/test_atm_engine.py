"""Tests for src/core/atm/engine.py: dispatch table, next_state and step.

Each class covers one action kind end-to-end through the engine.
"""

import pytest
from dataclasses import replace

from src.core.atm import (
    ActionKind,
    AtmStateMachine,
    Authenticated,
    Authenticating,
    Event,
    Key,
    Machine,
    PressKey,
    StepResult,
    SwipeCard,
    Waiting,
    action_kind,
    initial_state,
    next_state,
    step,
)
from src.core.atm import updates
from src.core.atm.engine import _DISPATCH
from src.state.pin_hash import pin_hash

PIN = (Key.ONE, Key.TWO, Key.THREE, Key.FOUR)
ENTER = PressKey(Key.ENTER)


def _authenticating(expected_hash: int = 1234, register=(), cash: int = 10) -> Machine:
    return Machine(cash_inside=cash, auth=Authenticating(expected_hash), register=tuple(register))


def _authenticated(register=(), cash: int = 10) -> Machine:
    return Machine(cash_inside=cash, auth=Authenticated(), register=tuple(register))


# ---------------------------------------------------------------------------
# SwipeCard
# ---------------------------------------------------------------------------

class TestSwipeCard:
    def test_simple_swipe(self):
        end = next_state(initial_state(10), SwipeCard(1234))
        assert end == _authenticating(1234)

    def test_swipe_again_part_way_through(self):
        start = _authenticating(1234)
        assert next_state(start, SwipeCard(1234)) == start

        start = _authenticating(1234, register=[Key.ONE, Key.THREE])
        assert next_state(start, SwipeCard(1234)) == start

    def test_swipe_with_different_hash_mid_authentication_ignored(self):
        start = _authenticating(1234, register=[Key.TWO])
        assert next_state(start, SwipeCard(9999)) == start

    def test_swipe_when_authenticated_ignored(self):
        start = _authenticated(register=[Key.FOUR])
        r = step(start, SwipeCard(42))
        assert r.state is start
        assert r.effect.event == Event.CARD_IGNORED
        assert r.effect.dispensed == 0

    def test_swipe_reseeds_hash_after_session(self):
        start = Machine(cash_inside=7)
        end = next_state(start, SwipeCard(2**64 - 1))
        assert end.auth == Authenticating(2**64 - 1)
        assert end.register == ()
        assert end.cash_inside == 7

    def test_effect(self):
        r = step(initial_state(10), SwipeCard(5))
        assert r.effect.event == Event.CARD_ACCEPTED
        assert r.effect.cash_after == 10


# ---------------------------------------------------------------------------
# Digit keys
# ---------------------------------------------------------------------------

class TestDigitKeys:
    def test_press_key_before_card_swipe(self):
        end = next_state(initial_state(10), PressKey(Key.ONE))
        assert end == Machine(cash_inside=10, auth=Waiting(), register=())

    @pytest.mark.parametrize("key", [Key.ONE, Key.TWO, Key.THREE, Key.FOUR])
    def test_every_digit_discarded_when_waiting(self, key):
        r = step(initial_state(3), PressKey(key))
        assert r.state == initial_state(3)
        assert r.effect.event == Event.KEY_DISCARDED

    def test_repeated_presses_before_swipe_leave_no_trace(self):
        s = initial_state(10)
        for key in (Key.ONE, Key.FOUR, Key.TWO):
            s = next_state(s, PressKey(key))
        assert s.register == ()
        assert next_state(s, SwipeCard(1)).register == ()

    def test_enter_single_digit_of_pin(self):
        end = next_state(_authenticating(1234), PressKey(Key.ONE))
        assert end == _authenticating(1234, register=[Key.ONE])

        end1 = next_state(end, PressKey(Key.TWO))
        assert end1 == _authenticating(1234, register=[Key.ONE, Key.TWO])

    def test_enter_single_digit_of_withdraw_amount(self):
        end = next_state(_authenticated(), PressKey(Key.ONE))
        assert end == _authenticated(register=[Key.ONE])

        end1 = next_state(end, PressKey(Key.FOUR))
        assert end1 == _authenticated(register=[Key.ONE, Key.FOUR])

    def test_digit_effect(self):
        r = step(_authenticated(), PressKey(Key.THREE))
        assert r.effect.event == Event.KEY_BUFFERED
        assert r.effect.dispensed == 0


# ---------------------------------------------------------------------------
# Enter while authenticating
# ---------------------------------------------------------------------------

class TestEnterPin:
    def test_enter_wrong_pin(self):
        start = _authenticating(pin_hash(PIN), register=[Key.THREE] * 4)
        end = next_state(start, ENTER)
        assert end == Machine(cash_inside=10, auth=Waiting(), register=())

    def test_enter_correct_pin(self):
        start = _authenticating(pin_hash(PIN), register=PIN)
        end = next_state(start, ENTER)
        assert end == Machine(cash_inside=9, auth=Authenticated(), register=())

    def test_correct_pin_effect_reports_debit(self):
        r = step(_authenticating(pin_hash(PIN), register=PIN), ENTER)
        assert r.effect.event == Event.PIN_ACCEPTED
        assert r.effect.dispensed == 1
        assert r.effect.cash_after == 9

    def test_wrong_pin_effect(self):
        r = step(_authenticating(pin_hash(PIN), register=[Key.ONE]), ENTER)
        assert r.effect.event == Event.PIN_REJECTED
        assert r.effect.dispensed == 0

    def test_empty_pin_matches_only_hash_of_empty_sequence(self):
        assert next_state(_authenticating(pin_hash(())), ENTER).auth == Authenticated()
        assert next_state(_authenticating(pin_hash(PIN)), ENTER).auth == Waiting()

    def test_correct_pin_with_empty_machine_does_not_go_negative(self):
        start = _authenticating(pin_hash(PIN), register=PIN, cash=0)
        r = step(start, ENTER)
        assert r.state == Machine(cash_inside=0, auth=Authenticated(), register=())
        assert r.effect.dispensed == 0

    def test_injected_hasher(self):
        calls = []

        def stub(keys):
            calls.append(tuple(keys))
            return len(keys)

        start = _authenticating(expected_hash=2, register=[Key.FOUR, Key.FOUR])
        end = next_state(start, ENTER, hasher=stub)
        assert end.auth == Authenticated()
        assert calls == [(Key.FOUR, Key.FOUR)]

    def test_retry_requires_fresh_swipe(self):
        s = next_state(_authenticating(pin_hash(PIN), register=[Key.TWO]), ENTER)
        assert s.auth == Waiting()
        # Typing the right PIN now does nothing: the card was returned.
        for key in PIN:
            s = next_state(s, PressKey(key))
        s = next_state(s, ENTER)
        assert s == initial_state(10)


# ---------------------------------------------------------------------------
# Enter while authenticated
# ---------------------------------------------------------------------------

class TestEnterAmount:
    def test_try_to_withdraw_too_much(self):
        start = _authenticated(register=[Key.ONE, Key.FOUR])
        end = next_state(start, ENTER)
        assert end == Machine(cash_inside=10, auth=Waiting(), register=())

    def test_withdraw_acceptable_amount(self):
        start = _authenticated(register=[Key.ONE])
        end = next_state(start, ENTER)
        assert end == Machine(cash_inside=9, auth=Waiting(), register=())

    def test_withdraw_everything(self):
        start = _authenticated(register=[Key.ONE, Key.TWO], cash=12)
        r = step(start, ENTER)
        assert r.state == Machine(cash_inside=0)
        assert r.effect.event == Event.CASH_DISPENSED
        assert r.effect.dispensed == 12

    def test_zero_amount_succeeds(self):
        r = step(_authenticated(), ENTER)
        assert r.state == Machine(cash_inside=10)
        assert r.effect.event == Event.CASH_DISPENSED
        assert r.effect.dispensed == 0

    def test_multi_digit_fold(self):
        start = _authenticated(register=[Key.FOUR, Key.TWO, Key.ONE], cash=1000)
        assert next_state(start, ENTER).cash_inside == 1000 - 421

    def test_rejected_effect(self):
        r = step(_authenticated(register=[Key.ONE, Key.FOUR]), ENTER)
        assert r.effect.event == Event.WITHDRAWAL_REJECTED
        assert r.effect.cash_after == 10


# ---------------------------------------------------------------------------
# Enter while waiting
# ---------------------------------------------------------------------------

class TestEnterWaiting:
    def test_stray_enter(self):
        r = step(initial_state(10), ENTER)
        assert r.state == initial_state(10)
        assert r.effect.event == Event.ENTER_IGNORED


# ---------------------------------------------------------------------------
# Full sessions + dispatch
# ---------------------------------------------------------------------------

class TestSessions:
    def test_full_session(self):
        s = initial_state(10)
        actions = [SwipeCard(pin_hash(PIN))] + [PressKey(k) for k in PIN] + [ENTER]
        actions += [PressKey(Key.FOUR), ENTER]
        for a in actions:
            s = next_state(s, a)
        # 1 for authentication, 4 withdrawn.
        assert s == Machine(cash_inside=5)

    def test_input_state_not_mutated(self):
        start = _authenticated(register=[Key.ONE])
        snapshot = replace(start)
        next_state(start, PressKey(Key.TWO))
        next_state(start, ENTER)
        assert start == snapshot
        assert start.register == (Key.ONE,)

    def test_step_returns_step_result(self):
        r = step(initial_state(1), SwipeCard(1))
        assert isinstance(r, StepResult)

    def test_state_machine_adapter(self):
        sm = AtmStateMachine(hasher=lambda keys: 7)
        s = sm.next_state(initial_state(10), SwipeCard(7))
        s = sm.next_state(s, ENTER)
        assert s == Machine(cash_inside=9, auth=Authenticated())


class TestActionKind:
    def test_kinds(self):
        assert action_kind(SwipeCard(0)) == ActionKind.SWIPE
        assert action_kind(PressKey(Key.TWO)) == ActionKind.DIGIT
        assert action_kind(ENTER) == ActionKind.ENTER

    def test_unknown_action_type(self):
        with pytest.raises(TypeError):
            action_kind("enter")  # type: ignore[arg-type]


class TestUpdateFunctions:
    def test_dispatch_covers_every_pair(self):
        kinds = set(ActionKind)
        assert set(_DISPATCH) == {
            (auth_type, kind) for auth_type in (Waiting, Authenticating, Authenticated) for kind in kinds
        }

    def test_enter_pin_reads_hash_from_auth_argument(self):
        start = _authenticating(expected_hash=2, register=[Key.ONE, Key.TWO])
        new_state, event = updates.enter_pin(start, start.auth, ENTER, lambda keys: len(keys))
        assert event == Event.PIN_ACCEPTED
        assert new_state == Machine(cash_inside=9, auth=Authenticated())

    def test_swipe_when_waiting_reads_action_argument(self):
        start = initial_state(4)
        new_state, event = updates.swipe_when_waiting(start, start.auth, SwipeCard(77), pin_hash)
        assert event == Event.CARD_ACCEPTED
        assert new_state.auth == Authenticating(77)

    def test_digit_buffered_appends_action_key(self):
        start = _authenticated(register=[Key.TWO])
        new_state, event = updates.digit_buffered(start, start.auth, PressKey(Key.THREE), pin_hash)
        assert event == Event.KEY_BUFFERED
        assert new_state.register == (Key.TWO, Key.THREE)
