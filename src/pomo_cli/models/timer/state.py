"""Timer state model and its persistent, atomically written store."""

from __future__ import annotations

import os
import tempfile
from datetime import datetime
from enum import Enum
from pathlib import Path

from platformdirs.unix import Unix
from pydantic import AwareDatetime, BaseModel, Field, ValidationError, model_validator

from pomo_cli.models.exceptions import CorruptStateError, StateIOError
from pomo_cli.utils.logger import get_logger

STATE_DIR_NAME = "pomo-cli"
LEGACY_STATE_DIR_NAME = "pomo"
STATE_FILE_NAME = "state.json"

DEFAULT_WORK_MINUTES = 25
DEFAULT_BREAK_MINUTES = 5


def local_now() -> datetime:
    """Current local time, to the second."""
    return datetime.now().astimezone().replace(microsecond=0)


class Mode(str, Enum):
    """Kind of session a timer is counting down."""

    WORK = "work"
    BREAK = "break"

    def __str__(self) -> str:
        return self.value


class TimerState(BaseModel):
    """The single persisted record describing the running timer."""

    process_id: int = Field(gt=0)
    mode: Mode
    started_at: AwareDatetime
    deadline: AwareDatetime
    minutes: int = Field(ge=1)
    set_index: int = Field(default=1, ge=1)
    set_total: int = Field(default=1, ge=1)
    work_minutes: int = Field(ge=1)
    break_minutes: int = Field(ge=1)

    @model_validator(mode="after")
    def _check_set_position(self) -> TimerState:
        if self.set_index > self.set_total:
            raise ValueError(
                f"set_index {self.set_index} exceeds set_total {self.set_total}"
            )
        return self

    @property
    def is_cycle(self) -> bool:
        """True when the timer alternates work and break sessions."""
        return self.set_total > 1

    def time_remaining(self, now: datetime | None = None) -> int:
        """Calculate whole seconds remaining in the current session."""
        now = now or local_now()
        return max(0, int((self.deadline - now).total_seconds()))

    def same_session(self, other: TimerState) -> bool:
        """Check whether *other* describes the same session of the same owner."""
        return (
            self.process_id == other.process_id
            and self.mode == other.mode
            and self.started_at == other.started_at
            and self.deadline == other.deadline
            and self.minutes == other.minutes
        )


class LegacyCycle(BaseModel):
    """Cycle position as written by earlier releases."""

    set: int
    sets: int
    work_minutes: int
    break_minutes: int


class LegacyTimerState(BaseModel):
    """Record layout of earlier releases: unix timestamps and an optional cycle."""

    pid: int
    mode: Mode
    start_ts: int
    end_ts: int
    minutes: int
    cycle: LegacyCycle | None = None

    def to_timer_state(self) -> TimerState:
        """Convert to the current record.

        Raises:
            ValidationError: the converted values break a TimerState constraint
        """
        cycle = self.cycle
        if cycle is None:
            work_minutes = self.minutes if self.mode is Mode.WORK else DEFAULT_WORK_MINUTES
            break_minutes = self.minutes if self.mode is Mode.BREAK else DEFAULT_BREAK_MINUTES
            set_index = set_total = 1
        else:
            work_minutes, break_minutes = cycle.work_minutes, cycle.break_minutes
            set_index, set_total = cycle.set, cycle.sets

        return TimerState(
            process_id=self.pid,
            mode=self.mode,
            started_at=datetime.fromtimestamp(self.start_ts).astimezone(),
            deadline=datetime.fromtimestamp(self.end_ts).astimezone(),
            minutes=self.minutes,
            set_index=set_index,
            set_total=set_total,
            work_minutes=work_minutes,
            break_minutes=break_minutes,
        )


def default_state_dir(dir_name: str = STATE_DIR_NAME) -> Path:
    """Resolve ``${XDG_DATA_HOME:-~/.local/share}/<dir_name>``.

    The XDG resolver is used on every platform so the state file lives in the
    same place on macOS as on Linux.
    """
    return Path(Unix(dir_name).user_data_dir)


class TimerStateStore:
    """Reads and writes the timer state file.

    Writes go to a temporary file in the same directory followed by
    ``os.replace``, so a concurrent reader sees either the old record or the
    new one, never a partial write.
    """

    def __init__(self, state_dir: Path | None = None):
        """Initialize the store; *state_dir* defaults to the XDG data dir."""
        if state_dir is None:
            state_dir = default_state_dir()

        self.state_dir = state_dir
        self.state_file = self.state_dir / STATE_FILE_NAME

    @classmethod
    def legacy(cls) -> TimerStateStore:
        """Store at the directory name used by earlier releases."""
        return cls(default_state_dir(LEGACY_STATE_DIR_NAME))

    def load(self) -> TimerState | None:
        """Load the state. Returns None if there is no record.

        Raises:
            CorruptStateError: the file exists but does not hold a valid record
            StateIOError: the file exists but cannot be read
        """
        try:
            raw = self.state_file.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StateIOError(f"failed to read state file {self.state_file}: {e}") from e

        try:
            return TimerState.model_validate_json(raw)
        except ValidationError as e:
            error = e

        try:
            return LegacyTimerState.model_validate_json(raw).to_timer_state()
        except ValidationError:
            pass
        except (OverflowError, OSError, ValueError) as e:
            # Timestamps outside the platform's datetime range
            get_logger().debug("legacy timestamps unusable: %s", e)

        raise CorruptStateError(
            f"state file {self.state_file} is corrupt: {error.error_count()} error(s)"
        ) from error

    def save(self, state: TimerState) -> None:
        """Atomically replace the record with *state*."""
        tmp_path: Path | None = None
        try:
            self.state_dir.mkdir(parents=True, exist_ok=True)
            # mkstemp creates the file with 0o600
            fd, tmp_name = tempfile.mkstemp(
                dir=self.state_dir, prefix=".state-", suffix=".json.tmp"
            )
            tmp_path = Path(tmp_name)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(state.model_dump_json(indent=2))
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.state_file)
        except OSError as e:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise StateIOError(f"failed to write state file {self.state_file}: {e}") from e
        except BaseException:
            # Interrupted by a termination signal mid-write
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise

    def clear(self) -> None:
        """Remove the record. Removing an absent record succeeds."""
        try:
            self.state_file.unlink(missing_ok=True)
        except OSError as e:
            raise StateIOError(f"failed to remove state file {self.state_file}: {e}") from e

    def exists(self) -> bool:
        """Check if a record (valid or not) is present."""
        return self.state_file.exists()
