"""JSON file storage for tasks and notes under the configuration directory."""

from __future__ import annotations

import json
import logging
import os
import secrets
import time
import uuid
from datetime import date, datetime
from pathlib import Path
from typing import Optional, Sequence

from kiki.models import Note, NoteList, Task, TaskList

KIKI_DIR = "kiki"
TASKS_FILE = "tasks.json"
NOTES_FILE = "notes.json"
DATE_FORMAT = "%Y-%m-%d"
_CONFIG_DIR_MODE = 0o755


class StorageError(Exception):
    """Raised when the data files cannot be read, parsed or written."""


def get_config_dir() -> Path:
    """Return the configuration directory, honouring XDG_CONFIG_HOME."""
    config_home = os.environ.get("XDG_CONFIG_HOME", "")
    if config_home:
        return Path(config_home) / KIKI_DIR
    try:
        return Path.home() / ".config" / KIKI_DIR
    except (RuntimeError, KeyError):
        return Path(".") / KIKI_DIR


def _write_json(path: Path, data: dict) -> None:
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def init_storage() -> None:
    """Create the configuration directory and empty data files if missing."""
    base_path = get_config_dir()
    try:
        base_path.mkdir(mode=_CONFIG_DIR_MODE, parents=True, exist_ok=True)
    except OSError as exc:
        raise StorageError(f"failed to create config directory: {exc}") from exc

    for filename, empty in ((TASKS_FILE, TaskList()), (NOTES_FILE, NoteList())):
        path = base_path / filename
        if path.exists():
            continue
        try:
            _write_json(path, empty.to_dict())
        except OSError as exc:
            raise StorageError(f"failed to create {filename}: {exc}") from exc


def generate_id() -> str:
    """Return a new time-ordered UUID (version 7) as a string."""
    millis = time.time_ns() // 1_000_000
    value = (millis & ((1 << 48) - 1)) << 80
    value |= secrets.randbits(80)
    value &= ~(0xF << 76)
    value |= 0x7 << 76
    value &= ~(0x3 << 62)
    value |= 0x2 << 62
    return str(uuid.UUID(int=value))


def today_string() -> str:
    """Return today's local date as YYYY-MM-DD."""
    return date.today().strftime(DATE_FORMAT)


def is_today(date_str: Optional[str]) -> bool:
    """Tell whether a YYYY-MM-DD string is today's date."""
    if date_str is None:
        return False
    return date_str == today_string()


def is_today_time(moment: datetime) -> bool:
    """Tell whether a timestamp falls on today's calendar date."""
    return moment.date() == date.today()


class Storage:
    """Reads and writes the task and note files."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.base_path = get_config_dir()
        self.logger = logger or logging.getLogger(__name__)
        try:
            self.base_path.mkdir(mode=_CONFIG_DIR_MODE, parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"failed to create kiki directory: {exc}") from exc

    def _load(self, filename: str, label: str):
        path = self.base_path / filename
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None, False
        except OSError as exc:
            raise StorageError(f"failed to read {label}: {exc}") from exc
        try:
            return json.loads(text), True
        except ValueError as exc:
            raise StorageError(f"failed to parse {label}: {exc}") from exc

    def _save(self, filename: str, label: str, data: dict) -> None:
        try:
            _write_json(self.base_path / filename, data)
        except OSError as exc:
            raise StorageError(f"failed to write {label}: {exc}") from exc

    def load_tasks(self) -> TaskList:
        data, found = self._load(TASKS_FILE, "tasks")
        if not found:
            return TaskList()
        try:
            return TaskList.from_dict(data)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"failed to parse tasks: {exc}") from exc

    def save_tasks(self, tasks: TaskList) -> None:
        self._save(TASKS_FILE, "tasks", tasks.to_dict())

    def load_notes(self) -> NoteList:
        data, found = self._load(NOTES_FILE, "notes")
        if not found:
            return NoteList()
        try:
            return NoteList.from_dict(data)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"failed to parse notes: {exc}") from exc

    def save_notes(self, notes: NoteList) -> None:
        self._save(NOTES_FILE, "notes", notes.to_dict())

    def add_task(
        self,
        title: str,
        due_date: Optional[str] = None,
        priority: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
    ) -> Task:
        """Create a task, append it to the stored list and return it."""
        tasks = self.load_tasks()
        now = datetime.now().astimezone()
        task = Task(
            id=generate_id(),
            title=title,
            completed=False,
            due_date=due_date,
            priority=priority or "medium",
            tags=list(tags) if tags is not None else [],
            created_at=now,
            updated_at=now,
        )
        tasks.tasks.append(task)
        self.save_tasks(tasks)
        return task

    def add_note(
        self, title: str, content: str, tags: Optional[Sequence[str]] = None
    ) -> Note:
        """Create a note, append it to the stored list and return it."""
        notes = self.load_notes()
        now = datetime.now().astimezone()
        note = Note(
            id=generate_id(),
            title=title,
            content=content,
            tags=list(tags) if tags is not None else [],
            created_at=now,
            updated_at=now,
        )
        notes.notes.append(note)
        self.save_notes(notes)
        return note