"""Assistant tools that manage tasks and notes through the storage layer."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from kiki.models import Note, Task
from kiki.storage import Storage, StorageError, is_today, is_today_time

NOTE_PREVIEW_MAX = 100

_JSON_TYPES: dict[str, type] = {"string": str, "array": list}


def _string(description: str) -> dict[str, Any]:
    return {"type": "string", "description": description}


def _string_array(description: str) -> dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}, "description": description}


def _schema(properties: dict[str, dict[str, Any]], required: Sequence[str]) -> dict[str, Any]:
    return {"type": "object", "properties": properties, "required": list(required)}


@dataclass(frozen=True)
class Tool:
    """A named operation the assistant may call with JSON arguments."""

    name: str
    description: str
    parameters: dict[str, Any]
    handler: Callable[..., dict[str, Any]] = field(repr=False)

    def invoke(self, arguments: Optional[Mapping[str, Any]]) -> dict[str, Any]:
        """Check the arguments against the schema and run the handler.

        Unknown keys are ignored and missing ones take their zero value.
        """
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            raise TypeError(f"arguments for {self.name!r} must be a JSON object")
        kwargs: dict[str, Any] = {}
        for key, spec in self.parameters["properties"].items():
            if key not in arguments or arguments[key] is None:
                continue
            value = arguments[key]
            expected = _JSON_TYPES[spec["type"]]
            if not isinstance(value, expected):
                raise TypeError(f"argument {key!r} of {self.name!r} must be a {spec['type']}")
            if expected is list and not all(isinstance(item, str) for item in value):
                raise TypeError(f"argument {key!r} of {self.name!r} must hold only strings")
            kwargs[key] = value
        return self.handler(**kwargs)


@dataclass(frozen=True)
class TaskSummary:
    """A task as shown in listings, numbered by its position in the store."""

    number: int
    id: str
    title: str
    completed: bool
    due_date: Optional[str]
    priority: str

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "number": self.number,
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
        }
        if self.due_date is not None:
            data["due_date"] = self.due_date
        data["priority"] = self.priority
        return data


@dataclass(frozen=True)
class NoteSummary:
    """A note as shown in listings, with a shortened preview of its content."""

    number: int
    id: str
    title: str
    preview: str
    tags: list[str]
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "number": self.number,
            "id": self.id,
            "title": self.title,
            "preview": self.preview,
            "tags": list(self.tags),
            "created_at": self.created_at,
        }


def _find_index(items: Sequence[Task] | Sequence[Note], query: str) -> Optional[int]:
    query_lower = query.lower()
    for index, item in enumerate(items):
        if item.id == query or query_lower in item.title.lower():
            return index
    return None


def find_task_index(tasks: Sequence[Task], query: str) -> Optional[int]:
    """Return the index of the first task whose ID equals or title contains the query."""
    return _find_index(tasks, query)


def find_note_index(notes: Sequence[Note], query: str) -> Optional[int]:
    """Return the index of the first note whose ID equals or title contains the query."""
    return _find_index(notes, query)


def note_preview(content: str) -> str:
    """Shorten content to at most 100 UTF-8 bytes, marking a cut with '...'."""
    raw = content.encode("utf-8")
    if len(raw) > NOTE_PREVIEW_MAX:
        return raw[:NOTE_PREVIEW_MAX].decode("utf-8", errors="replace") + "..."
    return content


def _format_date(moment: datetime) -> str:
    return moment.date().isoformat()


def note_summary_from(note: Note, number: int) -> NoteSummary:
    """Build the listing entry for a note."""
    return NoteSummary(
        number=number,
        id=note.id,
        title=note.title,
        preview=note_preview(note.content),
        tags=list(note.tags),
        created_at=_format_date(note.created_at),
    )


class ToolHandler:
    """Implements the task and note tools on top of a Storage."""

    def __init__(self, storage: Storage, logger: Optional[logging.Logger] = None) -> None:
        self.storage = storage
        self.logger = logger or logging.getLogger(__name__)

    def get_all_tools(self) -> list[Tool]:
        """Return every tool, in the order they are offered to the assistant."""
        return [
            Tool(
                "add_task",
                "Create a new task with optional due date, priority, and tags",
                _schema(
                    {
                        "title": _string("The task title"),
                        "due_date": _string("Due date in YYYY-MM-DD format"),
                        "priority": _string("Priority level: low, medium, or high"),
                        "tags": _string_array("Optional tags for categorization"),
                    },
                    ["title"],
                ),
                self.add_task,
            ),
            Tool(
                "list_tasks",
                "List tasks with filter: all, today (due or created today), incomplete, "
                "or completed. Returns numbered list for easy reference.",
                _schema(
                    {"filter": _string("Filter: all, today, incomplete, or completed")},
                    ["filter"],
                ),
                self.list_tasks,
            ),
            Tool(
                "complete_task",
                "Mark a task as completed by ID or title match",
                _schema({"query": _string("Task ID or title substring to match")}, ["query"]),
                self.complete_task,
            ),
            Tool(
                "delete_task",
                "Delete a task by ID or title match",
                _schema({"query": _string("Task ID or title substring to match")}, ["query"]),
                self.delete_task,
            ),
            Tool(
                "add_note",
                "Create a new note with title, content, and optional tags",
                _schema(
                    {
                        "title": _string("The note title"),
                        "content": _string("The note content"),
                        "tags": _string_array("Optional tags for categorization"),
                    },
                    ["title", "content"],
                ),
                self.add_note,
            ),
            Tool(
                "list_notes",
                "List notes with optional filter (all or today) and tag. "
                "Returns numbered list for easy reference.",
                _schema(
                    {
                        "filter": _string("Filter: all or today"),
                        "tag": _string("Optional tag to filter by"),
                    },
                    ["filter"],
                ),
                self.list_notes,
            ),
            Tool(
                "search_notes",
                "Search notes by keyword in title or content. "
                "Returns numbered list for easy reference.",
                _schema(
                    {"query": _string("Search term to find in title or content")}, ["query"]
                ),
                self.search_notes,
            ),
            Tool(
                "delete_note",
                "Delete a note by ID or title match",
                _schema({"query": _string("Note ID or title substring to match")}, ["query"]),
                self.delete_note,
            ),
        ]

    def add_task(
        self,
        title: str = "",
        due_date: Optional[str] = None,
        priority: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
    ) -> dict[str, Any]:
        try:
            task = self.storage.add_task(
                title, due_date, priority if priority is not None else "medium", tags
            )
        except StorageError as exc:
            return {"success": False, "message": str(exc)}
        return {
            "success": True,
            "message": f"Task '{task.title}' created with {task.priority} priority",
            "task_id": task.id,
        }

    def list_tasks(self, filter: str = "") -> dict[str, Any]:
        try:
            task_list = self.storage.load_tasks()
        except StorageError as exc:
            return {"tasks": [], "count": 0, "message": str(exc)}

        def include(task: Task) -> bool:
            if filter == "today":
                return is_today(task.due_date) or is_today_time(task.created_at)
            if filter == "incomplete":
                return not task.completed
            if filter == "completed":
                return task.completed
            return True

        summaries = [
            TaskSummary(
                number=number,
                id=task.id,
                title=task.title,
                completed=task.completed,
                due_date=task.due_date,
                priority=task.priority,
            ).to_dict()
            for number, task in enumerate(task_list.tasks, start=1)
            if include(task)
        ]
        return {
            "tasks": summaries,
            "count": len(summaries),
            "message": f"Found {len(summaries)} tasks",
        }

    def complete_task(self, query: str = "") -> dict[str, Any]:
        try:
            task_list = self.storage.load_tasks()
        except StorageError as exc:
            return {"success": False, "message": str(exc)}

        index = find_task_index(task_list.tasks, query)
        if index is None:
            return {"success": False, "message": f"No task found matching '{query}'"}

        task = task_list.tasks[index]
        task.completed = True
        task.updated_at = datetime.now().astimezone()
        try:
            self.storage.save_tasks(task_list)
        except StorageError as exc:
            return {"success": False, "message": str(exc)}
        return {"success": True, "message": f"Task '{task.title}' marked as completed"}

    def delete_task(self, query: str = "") -> dict[str, Any]:
        try:
            task_list = self.storage.load_tasks()
        except StorageError as exc:
            return {"success": False, "message": str(exc)}

        index = find_task_index(task_list.tasks, query)
        if index is None:
            return {"success": False, "message": f"No task found matching '{query}'"}

        removed = task_list.tasks.pop(index)
        try:
            self.storage.save_tasks(task_list)
        except StorageError as exc:
            return {"success": False, "message": str(exc)}
        return {"success": True, "message": f"Task '{removed.title}' deleted"}

    def add_note(
        self, title: str = "", content: str = "", tags: Optional[Sequence[str]] = None
    ) -> dict[str, Any]:
        try:
            note = self.storage.add_note(title, content, tags)
        except StorageError as exc:
            return {"success": False, "message": str(exc)}
        return {
            "success": True,
            "message": f"Note '{note.title}' created",
            "note_id": note.id,
        }

    def list_notes(self, filter: str = "", tag: Optional[str] = None) -> dict[str, Any]:
        try:
            note_list = self.storage.load_notes()
        except StorageError as exc:
            return {"notes": [], "count": 0, "message": str(exc)}

        wanted_tag = tag.casefold() if tag is not None else None

        def include(note: Note) -> bool:
            if filter == "today" and not is_today_time(note.created_at):
                return False
            if wanted_tag is not None:
                return any(t.casefold() == wanted_tag for t in note.tags)
            return True

        matches = [note for note in note_list.notes if include(note)]
        summaries = [
            note_summary_from(note, number).to_dict()
            for number, note in enumerate(matches, start=1)
        ]
        return {
            "notes": summaries,
            "count": len(summaries),
            "message": f"Found {len(summaries)} notes",
        }

    def search_notes(self, query: str = "") -> dict[str, Any]:
        try:
            note_list = self.storage.load_notes()
        except StorageError as exc:
            return {"notes": [], "count": 0, "message": str(exc)}

        needle = query.lower()
        matches = [
            note
            for note in note_list.notes
            if needle in note.title.lower() or needle in note.content.lower()
        ]
        summaries = [
            note_summary_from(note, number).to_dict()
            for number, note in enumerate(matches, start=1)
        ]
        return {
            "notes": summaries,
            "count": len(summaries),
            "message": f"Found {len(summaries)} notes matching '{query}'",
        }

    def delete_note(self, query: str = "") -> dict[str, Any]:
        try:
            note_list = self.storage.load_notes()
        except StorageError as exc:
            return {"success": False, "message": str(exc)}

        index = find_note_index(note_list.notes, query)
        if index is None:
            return {"success": False, "message": f"No note found matching '{query}'"}

        removed = note_list.notes.pop(index)
        try:
            self.storage.save_notes(note_list)
        except StorageError as exc:
            return {"success": False, "message": str(exc)}
        return {"success": True, "message": f"Note '{removed.title}' deleted"}