"""Configuration models for Pomo CLI."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pomo_cli.models.timer.scheduler import MAX_MINUTES


class AppConfig(BaseModel):
    """User defaults applied when a command omits an argument."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    work_minutes: int = Field(default=25, ge=1, le=MAX_MINUTES)
    break_minutes: int = Field(default=5, ge=1, le=MAX_MINUTES)
    notifications: bool = Field(default=True)
    sound: bool = Field(default=True)
