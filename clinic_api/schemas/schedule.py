import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from ..scheduling.domain import Slot
from .base import PatchModel

def _to_minute(value: Optional[datetime.time]) -> Optional[datetime.time]:
    # Windows are whole minutes; seconds would make 09:00:10-09:00:50 look valid
    if value is None:
        return value
    return value.replace(second=0, microsecond=0)

class ScheduleCreate(BaseModel):
    doctor_id: int
    date: datetime.date
    start_time: datetime.time
    end_time: datetime.time

    @field_validator("start_time", "end_time")
    @classmethod
    def truncate_seconds(cls, value: datetime.time) -> datetime.time:
        return _to_minute(value)

    @model_validator(mode="after")
    def check_range(self):
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self

class ScheduleUpdate(PatchModel):
    date: Optional[datetime.date] = None
    start_time: Optional[datetime.time] = None
    end_time: Optional[datetime.time] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def truncate_seconds(cls, value: Optional[datetime.time]) -> Optional[datetime.time]:
        return _to_minute(value)

class ScheduleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    doctor_id: int
    date: datetime.date
    start_time: datetime.time
    end_time: datetime.time

class SlotResponse(BaseModel):
    start_time: str
    end_time: str

    @classmethod
    def from_slot(cls, slot: Slot) -> "SlotResponse":
        return cls(
            start_time=slot.start_time.strftime("%H:%M"),
            end_time=slot.end_time.strftime("%H:%M")
        )
