"""
Pydantic view models for data owned by the n8n automation service.

Nothing here is persisted. Upstream keys are camelCase and are mapped via
aliases; unknown keys are ignored so upstream additions never break rendering.
"""

from __future__ import annotations

import datetime as dt
from typing import Annotated, Any

from pydantic import AliasChoices, BaseModel, BeforeValidator, Field, field_validator


def _as_text(value: Any) -> Any:
    """Upstream may send null or numbers where text is expected."""
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


# Lenient text: null renders as empty, numbers as their string form.
Text = Annotated[str, BeforeValidator(_as_text)]


class Person(BaseModel):
    """Candidate or interviewer. ``email`` is the unique key within a list."""

    name: Text = Field(default="", description="Display name")
    email: Text = Field(default="", description="Email address (list key)")

    model_config = {"extra": "ignore"}

    @property
    def label(self) -> str:
        if not self.email:
            return self.name
        return f"{self.name} ({self.email})"


class ScheduleRequest(BaseModel):
    """Booking payload forwarded to the schedule webhook."""

    candidate: Person
    interviewers: list[Person] = Field(..., min_length=1)
    datetime: str = Field(..., description="ISO 8601 timestamp with UTC offset")

    @classmethod
    def build(
        cls,
        candidate: Person,
        interviewers: list[Person],
        when: dt.datetime,
    ) -> "ScheduleRequest":
        """Build a request, serializing ``when`` with its offset preserved."""
        if when.tzinfo is None:
            when = when.astimezone()
        return cls(candidate=candidate, interviewers=interviewers, datetime=when.isoformat())


class EventTime(BaseModel):
    """Calendar timestamp as delivered by the calendar integration."""

    date_time: str | None = Field(default=None, alias="dateTime")
    time_zone: str | None = Field(default=None, alias="timeZone")

    model_config = {"extra": "ignore", "populate_by_name": True}


class TranscriptLine(BaseModel):
    """One utterance of a processed meeting recording."""

    speaker: Text = ""
    timestamp: Text = Field(default="", description="Offset into the recording (mm:ss)")
    message: Text = ""

    model_config = {"extra": "ignore"}


class Event(BaseModel):
    """
    Interview record combining calendar metadata with AI output.

    ``transcription`` is absent until the meeting recording was processed.
    """

    id: str | None = Field(default=None, validation_alias=AliasChoices("id", "_id"))
    event_id: str | None = Field(
        default=None, validation_alias=AliasChoices("eventID", "event_id")
    )
    description: Text = ""
    summary: str | None = None
    conclusion: str | None = None
    start: EventTime = Field(
        default_factory=EventTime,
        validation_alias=AliasChoices("startDateTime", "start"),
    )
    end: EventTime = Field(
        default_factory=EventTime,
        validation_alias=AliasChoices("endDateTime", "end"),
    )
    candidate: Person | None = None
    interviewers: list[Person] = Field(default_factory=list)
    transcription: list[TranscriptLine] | None = None

    model_config = {"extra": "ignore"}

    @field_validator("id", "event_id", mode="before")
    @classmethod
    def _coerce_identifier(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @field_validator("summary", "conclusion", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Any:
        return None if value is None else _as_text(value)

    @field_validator("interviewers", mode="before")
    @classmethod
    def _null_interviewers(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def has_transcript(self) -> bool:
        return bool(self.transcription)
