"""Timer model - persisted state and session planning."""

from .scheduler import Session, advance, build_plan, first_state
from .state import Mode, TimerState, TimerStateStore

__all__ = [
    "Mode",
    "Session",
    "TimerState",
    "TimerStateStore",
    "advance",
    "build_plan",
    "first_state",
]
