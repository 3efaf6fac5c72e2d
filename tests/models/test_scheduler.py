"""Unit tests for pomo_cli.models.timer.scheduler."""

from __future__ import annotations

from datetime import timedelta

import pytest

from pomo_cli.models.exceptions import InvalidDurationError, InvalidSetCountError
from pomo_cli.models.timer.scheduler import (
    MAX_MINUTES,
    MAX_SETS,
    Session,
    advance,
    build_plan,
    first_state,
    plan_for,
    plan_position,
)
from pomo_cli.models.timer.state import Mode, local_now

W = Mode.WORK
B = Mode.BREAK


def _replay(state):
    """Walk a record through its plan, returning every visited session."""
    visited = [Session(state.mode, state.minutes)]
    while True:
        state = advance(state, state.deadline)
        if state is None:
            return visited
        visited.append(Session(state.mode, state.minutes))


class TestBuildPlan:
    def test_four_sets_example(self):
        plan = build_plan(W, 25, sets=4, break_minutes=5)
        assert plan == [
            Session(W, 25),
            Session(B, 5),
            Session(W, 25),
            Session(B, 5),
            Session(W, 25),
            Session(B, 5),
            Session(W, 25),
        ]

    @pytest.mark.parametrize("sets", [1, 2, 3, 7, MAX_SETS])
    def test_length_and_alternation(self, sets):
        plan = build_plan(W, 25, sets=sets, break_minutes=5)
        assert len(plan) == 2 * sets - 1
        assert plan[0].mode is W
        assert plan[-1].mode is W
        for previous, current in zip(plan, plan[1:]):
            assert previous.mode is not current.mode

    def test_single_set_has_no_break(self):
        assert build_plan(W, 50) == [Session(W, 50)]

    def test_bare_break(self):
        assert build_plan(B, 5) == [Session(B, 5)]

    def test_break_ignores_sets(self):
        assert build_plan(B, 10, sets=3) == [Session(B, 10)]

    def test_zero_minutes_rejected(self):
        with pytest.raises(InvalidDurationError, match="minutes must be > 0"):
            build_plan(W, 0)

    def test_zero_break_minutes_rejected(self):
        with pytest.raises(InvalidDurationError, match="break minutes"):
            build_plan(W, 25, sets=2, break_minutes=0)

    def test_zero_sets_rejected(self):
        with pytest.raises(InvalidSetCountError, match="sets must be > 0"):
            build_plan(W, 25, sets=0)

    def test_too_many_minutes_rejected(self):
        with pytest.raises(InvalidDurationError, match="too large"):
            build_plan(W, MAX_MINUTES + 1)

    def test_too_many_sets_rejected(self):
        with pytest.raises(InvalidSetCountError, match="too large"):
            build_plan(W, 25, sets=MAX_SETS + 1)

    def test_negative_minutes_rejected(self):
        with pytest.raises(InvalidDurationError):
            build_plan(B, -5)


class TestFirstState:
    def test_single_work_session(self):
        now = local_now()
        state = first_state(
            build_plan(W, 25), process_id=99, now=now, work_minutes=25, break_minutes=5
        )
        assert state.process_id == 99
        assert state.mode is W
        assert state.started_at == now
        assert state.deadline == now + timedelta(minutes=25)
        assert (state.set_index, state.set_total) == (1, 1)

    def test_cycle_counts_work_sessions(self):
        state = first_state(
            build_plan(W, 25, sets=4, break_minutes=5),
            process_id=99,
            now=local_now(),
            work_minutes=25,
            break_minutes=5,
        )
        assert state.set_total == 4

    def test_break_plan(self):
        state = first_state(
            build_plan(B, 10), process_id=99, now=local_now(), work_minutes=25, break_minutes=10
        )
        assert state.mode is B
        assert state.minutes == 10
        assert (state.set_index, state.set_total) == (1, 1)

    def test_empty_plan_rejected(self):
        with pytest.raises(ValueError):
            first_state([], process_id=1, now=local_now(), work_minutes=25, break_minutes=5)


class TestAdvance:
    @pytest.mark.parametrize("sets", [1, 2, 4])
    def test_replay_matches_plan(self, sets):
        plan = build_plan(W, 25, sets=sets, break_minutes=5)
        state = first_state(plan, process_id=7, now=local_now(), work_minutes=25, break_minutes=5)
        assert _replay(state) == plan

    def test_replay_bare_break(self):
        plan = build_plan(B, 5)
        state = first_state(plan, process_id=7, now=local_now(), work_minutes=25, break_minutes=5)
        assert _replay(state) == plan

    def test_break_keeps_set_index_then_work_increments(self, state_factory):
        now = local_now()
        work = state_factory(set_index=1, set_total=3)
        brk = advance(work, now)
        assert (brk.mode, brk.set_index) == (B, 1)
        nxt = advance(brk, now)
        assert (nxt.mode, nxt.set_index) == (W, 2)

    def test_new_deadline_from_now(self, state_factory):
        now = local_now() + timedelta(minutes=30)
        brk = advance(state_factory(set_total=2), now)
        assert brk.started_at == now
        assert brk.deadline == now + timedelta(minutes=5)
        assert brk.minutes == 5

    def test_last_work_session_ends_plan(self, state_factory):
        assert advance(state_factory(set_index=4, set_total=4), local_now()) is None

    def test_single_break_ends_plan(self, state_factory):
        assert advance(state_factory(mode=B, minutes=5), local_now()) is None

    def test_does_not_mutate_input(self, state_factory):
        state = state_factory(set_total=2)
        snapshot = state.model_copy()
        advance(state, local_now())
        assert state == snapshot

    def test_keeps_owner_and_durations(self, state_factory):
        state = state_factory(process_id=31, set_total=2, work_minutes=25, break_minutes=7)
        brk = advance(state, local_now())
        assert brk.process_id == 31
        assert (brk.work_minutes, brk.break_minutes) == (25, 7)


class TestPlanPosition:
    def test_positions_follow_plan(self, state_factory):
        assert plan_position(state_factory(set_index=1, set_total=3)) == 0
        assert plan_position(state_factory(mode=B, minutes=5, set_index=1, set_total=3)) == 1
        assert plan_position(state_factory(set_index=3, set_total=3)) == 4

    def test_plan_for_cycle(self, state_factory):
        state = state_factory(set_total=2, work_minutes=25, break_minutes=5)
        assert plan_for(state) == [Session(W, 25), Session(B, 5), Session(W, 25)]

    def test_plan_for_bare_break(self, state_factory):
        assert plan_for(state_factory(mode=B, minutes=3)) == [Session(B, 3)]
