"""Work/break session planning.

Everything here is pure: the clock is passed in by the caller, so a plan can be
replayed session by session in tests without sleeping.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from pomo_cli.models.exceptions import InvalidDurationError, InvalidSetCountError
from pomo_cli.models.timer.state import Mode, TimerState

MAX_MINUTES = 24 * 60
MAX_SETS = 100


@dataclass(frozen=True)
class Session:
    """One entry of a plan."""

    mode: Mode
    minutes: int


def validate_minutes(minutes: int, label: str = "minutes") -> None:
    """Reject session lengths outside ``1..=MAX_MINUTES``."""
    if minutes < 1:
        raise InvalidDurationError(f"{label} must be > 0")
    if minutes > MAX_MINUTES:
        raise InvalidDurationError(f"{label} too large (max {MAX_MINUTES})")


def validate_sets(sets: int) -> None:
    """Reject set counts outside ``1..=MAX_SETS``."""
    if sets < 1:
        raise InvalidSetCountError("sets must be > 0")
    if sets > MAX_SETS:
        raise InvalidSetCountError(f"sets too large (max {MAX_SETS})")


def build_plan(
    mode: Mode, minutes: int, sets: int = 1, break_minutes: int = 5
) -> list[Session]:
    """Build the ordered list of sessions for a request.

    A work request alternates work and break for *sets* work sessions, with no
    trailing break. A break request is a single break session.
    """
    validate_minutes(minutes)
    validate_sets(sets)
    validate_minutes(break_minutes, "break minutes")

    if mode is Mode.BREAK:
        return [Session(Mode.BREAK, minutes)]

    plan: list[Session] = []
    for set_number in range(1, sets + 1):
        plan.append(Session(Mode.WORK, minutes))
        if set_number < sets:
            plan.append(Session(Mode.BREAK, break_minutes))
    return plan


def first_state(
    plan: list[Session],
    *,
    process_id: int,
    now: datetime,
    work_minutes: int,
    break_minutes: int,
) -> TimerState:
    """Build the record for the first session of *plan*."""
    if not plan:
        raise ValueError("plan is empty")

    session = plan[0]
    set_total = sum(1 for entry in plan if entry.mode is Mode.WORK) or 1
    return TimerState(
        process_id=process_id,
        mode=session.mode,
        started_at=now,
        deadline=now + timedelta(minutes=session.minutes),
        minutes=session.minutes,
        set_index=1,
        set_total=set_total,
        work_minutes=work_minutes,
        break_minutes=break_minutes,
    )


def _is_single_break(state: TimerState) -> bool:
    # A work plan never contains a break when it has only one set
    return state.mode is Mode.BREAK and state.set_total == 1


def plan_for(state: TimerState) -> list[Session]:
    """Regenerate the plan a record belongs to."""
    if _is_single_break(state):
        return [Session(Mode.BREAK, state.minutes)]
    return build_plan(
        Mode.WORK, state.work_minutes, state.set_total, state.break_minutes
    )


def plan_position(state: TimerState) -> int:
    """Index of the record's current session within its plan."""
    if _is_single_break(state):
        return 0
    return 2 * (state.set_index - 1) + (1 if state.mode is Mode.BREAK else 0)


def advance(state: TimerState, now: datetime) -> TimerState | None:
    """Return the record for the session after *state*, or None when done."""
    plan = plan_for(state)
    position = plan_position(state) + 1
    if position >= len(plan):
        return None

    session = plan[position]
    return state.model_copy(
        update={
            "mode": session.mode,
            "started_at": now,
            "deadline": now + timedelta(minutes=session.minutes),
            "minutes": session.minutes,
            "set_index": position // 2 + 1,
        }
    )
