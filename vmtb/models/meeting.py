"""Pydantic models for MTB meetings."""

from __future__ import annotations

from datetime import date, datetime, time
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..utils.config import MeetingPolicy


class ScheduleType(str, Enum):
    """How a meeting is scheduled."""

    ONCE = "once"
    CUSTOM = "custom"
    INSTANT = "instant"


class MeetingStatus(str, Enum):
    """Meeting lifecycle states."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    ENDED = "ended"
    CANCELLED = "cancelled"


class MeetingDraft(BaseModel):
    """A meeting before the store has assigned it an id.

    ``scheduled_date`` and ``scheduled_time`` are local wall-clock values;
    no timezone conversion is ever applied to them.
    """

    mtb_id: str = Field(..., description="Owning MTB (tumor board)")
    created_by: Optional[str] = None
    scheduled_date: date
    scheduled_time: time
    schedule_type: ScheduleType = ScheduleType.ONCE
    repeat_days: List[int] = Field(default_factory=list)
    status: MeetingStatus = MeetingStatus.SCHEDULED
    meeting_link: Optional[str] = None
    started_at: Optional[datetime] = None

    @field_validator("repeat_days", mode="before")
    @classmethod
    def none_to_list(cls, value):
        return [] if value is None else value

    @field_validator("repeat_days")
    @classmethod
    def check_weekdays(cls, value: List[int]) -> List[int]:
        """Weekdays are 0-6 with Sunday=0; duplicates collapse."""

        for day in value:
            if day not in MeetingPolicy.WEEKDAYS:
                raise ValueError(f"repeat day {day} is outside 0-6 (Sunday=0)")
        return sorted(set(value))

    @field_validator("scheduled_time")
    @classmethod
    def truncate_to_minute(cls, value: time) -> time:
        return value.replace(second=0, microsecond=0, tzinfo=None)

    @model_validator(mode="after")
    def check_repeat_days_match_schedule(self):
        if self.schedule_type == ScheduleType.CUSTOM and not self.repeat_days:
            raise ValueError("custom meetings need at least one repeat day")
        if self.schedule_type != ScheduleType.CUSTOM and self.repeat_days:
            raise ValueError(
                f"repeat days are only allowed for custom meetings, not {self.schedule_type.value}"
            )
        return self


class Meeting(MeetingDraft):
    """A stored meeting."""

    id: str
    created_at: datetime

    @property
    def is_recurring(self) -> bool:
        return self.schedule_type == ScheduleType.CUSTOM and bool(self.repeat_days)

    def to_record(self) -> dict:
        """Serialize to a row for the backing store."""

        return self.model_dump(mode="json")
