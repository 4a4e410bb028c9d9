"""Task and note records and their JSON representation."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_TIMESTAMP = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})"
    r"(?:\.(\d+))?"
    r"([Zz]|[+-]\d{2}:\d{2})$"
)


def _zero_time() -> datetime:
    return _ZERO_TIME


def _format_time(moment: datetime) -> str:
    """Render a timestamp as RFC 3339 with trimmed fractional seconds."""
    if moment.tzinfo is None:
        moment = moment.astimezone()
    text = (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )
    fraction = f"{moment.microsecond:06d}".rstrip("0")
    if fraction:
        text += "." + fraction
    offset = moment.utcoffset()
    if not offset:
        return text + "Z"
    total = int(offset.total_seconds())
    sign = "+" if total >= 0 else "-"
    total = abs(total)
    return f"{text}{sign}{total // 3600:02d}:{total % 3600 // 60:02d}"


def _parse_time(value: Any, key: str) -> datetime:
    """Parse an RFC 3339 timestamp, accepting up to nanosecond precision."""
    if value is None:
        return _ZERO_TIME
    if not isinstance(value, str):
        raise TypeError(f"field {key!r} must be a timestamp string")
    match = _TIMESTAMP.match(value)
    if match is None:
        raise ValueError(f"field {key!r} is not an RFC 3339 timestamp: {value!r}")
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    micro = int((fraction or "")[:6].ljust(6, "0"))
    if zone in ("Z", "z"):
        tz = timezone.utc
    else:
        sign = 1 if zone[0] == "+" else -1
        hours, minutes = int(zone[1:3]), int(zone[4:6])
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))
    return datetime(
        int(year), int(month), int(day), int(hour), int(minute), int(second), micro, tzinfo=tz
    )


def _require_mapping(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise TypeError(f"{what} must be a JSON object")
    return data


def _get(data: dict, key: str, kind: type, default: Any) -> Any:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, kind):
        raise TypeError(f"field {key!r} must be of type {kind.__name__}")
    return value


def _get_tags(data: dict) -> list[str]:
    tags = _get(data, "tags", list, [])
    if not all(isinstance(tag, str) for tag in tags):
        raise TypeError("field 'tags' must hold only strings")
    return list(tags)


@dataclass
class Task:
    """A todo item with due date, priority and tags."""

    id: str
    title: str
    completed: bool = False
    due_date: Optional[str] = None
    priority: str = ""
    tags: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=_zero_time)
    updated_at: datetime = field(default_factory=_zero_time)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
        }
        if self.due_date is not None:
            data["due_date"] = self.due_date
        data["priority"] = self.priority
        data["tags"] = list(self.tags)
        data["created_at"] = _format_time(self.created_at)
        data["updated_at"] = _format_time(self.updated_at)
        return data

    @classmethod
    def from_dict(cls, data: Any) -> Task:
        data = _require_mapping(data, "task")
        return cls(
            id=_get(data, "id", str, ""),
            title=_get(data, "title", str, ""),
            completed=_get(data, "completed", bool, False),
            due_date=_get(data, "due_date", str, None),
            priority=_get(data, "priority", str, ""),
            tags=_get_tags(data),
            created_at=_parse_time(data.get("created_at"), "created_at"),
            updated_at=_parse_time(data.get("updated_at"), "updated_at"),
        )


@dataclass
class Note:
    """A text note with tags."""

    id: str
    title: str
    content: str = ""
    tags: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=_zero_time)
    updated_at: datetime = field(default_factory=_zero_time)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "tags": list(self.tags),
            "created_at": _format_time(self.created_at),
            "updated_at": _format_time(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Any) -> Note:
        data = _require_mapping(data, "note")
        return cls(
            id=_get(data, "id", str, ""),
            title=_get(data, "title", str, ""),
            content=_get(data, "content", str, ""),
            tags=_get_tags(data),
            created_at=_parse_time(data.get("created_at"), "created_at"),
            updated_at=_parse_time(data.get("updated_at"), "updated_at"),
        )


@dataclass
class TaskList:
    """All stored tasks, in insertion order."""

    tasks: list[Task] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"tasks": [task.to_dict() for task in self.tasks]}

    @classmethod
    def from_dict(cls, data: Any) -> TaskList:
        if data is None:
            return cls()
        data = _require_mapping(data, "task list")
        items = _get(data, "tasks", list, [])
        return cls(tasks=[Task.from_dict(item) for item in items])


@dataclass
class NoteList:
    """All stored notes, in insertion order."""

    notes: list[Note] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"notes": [note.to_dict() for note in self.notes]}

    @classmethod
    def from_dict(cls, data: Any) -> NoteList:
        if data is None:
            return cls()
        data = _require_mapping(data, "note list")
        items = _get(data, "notes", list, [])
        return cls(notes=[Note.from_dict(item) for item in items])