import json
import logging
import uuid
from datetime import date, datetime, timedelta
from pathlib import Path

import pytest

from kiki.models import Note, NoteList, Task, TaskList
from kiki.storage import (
    KIKI_DIR,
    NOTES_FILE,
    TASKS_FILE,
    Storage,
    StorageError,
    generate_id,
    get_config_dir,
    init_storage,
    is_today,
    is_today_time,
    today_string,
)


@pytest.fixture
def config_home(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def storage(config_home):
    return Storage(logging.getLogger("test"))


def test_get_config_dir_uses_xdg_config_home(config_home):
    assert get_config_dir() == config_home / KIKI_DIR


def test_get_config_dir_falls_back_to_home(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", "")
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    assert get_config_dir() == Path.home() / ".config" / KIKI_DIR


def test_new_storage_creates_directory(config_home):
    created = Storage(logging.getLogger("test"))
    assert created.base_path == config_home / KIKI_DIR
    assert (config_home / KIKI_DIR).is_dir()


def test_init_storage_creates_empty_files(config_home):
    init_storage()
    base = get_config_dir()
    assert base == config_home / KIKI_DIR
    assert base.is_dir()
    tasks = json.loads((base / TASKS_FILE).read_text())
    notes = json.loads((base / NOTES_FILE).read_text())
    assert tasks == {"tasks": []}
    assert notes == {"notes": []}
    loaded = Storage(logging.getLogger("test"))
    assert loaded.load_tasks().tasks == []
    assert loaded.load_notes().notes == []


def test_init_storage_keeps_existing_files(config_home, storage):
    storage.add_task("Keep me")
    init_storage()
    assert [task.title for task in storage.load_tasks().tasks] == ["Keep me"]


def test_save_and_load_tasks(storage):
    now = datetime.now().astimezone()
    data = TaskList(
        tasks=[
            Task(
                id="task-1",
                title="Test task",
                completed=True,
                due_date="2030-01-02",
                priority="high",
                tags=["one", "two"],
                created_at=now,
                updated_at=now,
            )
        ]
    )
    storage.save_tasks(data)
    output = storage.load_tasks()
    assert len(output.tasks) == 1
    assert output.tasks[0].title == "Test task"
    assert output.tasks[0].priority == "high"
    assert output.tasks[0] == data.tasks[0]


def test_load_tasks_missing_file_is_empty(storage):
    assert storage.load_tasks().tasks == []


def test_save_and_load_notes(storage):
    now = datetime.now().astimezone()
    data = NoteList(
        notes=[
            Note(
                id="note-1",
                title="Test note",
                content="Hello",
                tags=["tag"],
                created_at=now,
                updated_at=now,
            )
        ]
    )
    storage.save_notes(data)
    output = storage.load_notes()
    assert len(output.notes) == 1
    assert output.notes[0].title == "Test note"
    assert output.notes[0].content == "Hello"


def test_load_notes_missing_file_is_empty(storage):
    assert storage.load_notes().notes == []


def test_load_tasks_invalid_json_raises(storage):
    (storage.base_path / TASKS_FILE).write_text("{not json")
    with pytest.raises(StorageError, match="failed to parse tasks"):
        storage.load_tasks()


def test_load_notes_wrong_shape_raises(storage):
    (storage.base_path / NOTES_FILE).write_text("[]")
    with pytest.raises(StorageError, match="failed to parse notes"):
        storage.load_notes()


def test_add_task_applies_defaults_and_persists(storage):
    before = datetime.now().astimezone()
    created = storage.add_task("Write tests", "2032-03-04", "", None)
    after = datetime.now().astimezone()
    assert created.id
    assert created.title == "Write tests"
    assert created.completed is False
    assert created.priority == "medium"
    assert created.tags == []
    assert created.due_date == "2032-03-04"
    assert before <= created.created_at <= after
    assert before <= created.updated_at <= after
    assert len(storage.load_tasks().tasks) == 1


def test_add_task_keeps_given_priority_and_tags(storage):
    created = storage.add_task("Ship", None, "high", ["work"])
    loaded = storage.load_tasks().tasks[0]
    assert loaded.priority == "high"
    assert loaded.tags == ["work"]
    assert loaded.id == created.id


def test_add_note_applies_defaults_and_persists(storage):
    before = datetime.now().astimezone()
    created = storage.add_note("Idea", "Something", None)
    after = datetime.now().astimezone()
    assert created.id
    assert created.title == "Idea"
    assert created.content == "Something"
    assert created.tags == []
    assert before <= created.created_at <= after
    assert before <= created.updated_at <= after
    assert len(storage.load_notes().notes) == 1


def test_generate_id_is_uuid_version_7():
    value = generate_id()
    assert value
    assert uuid.UUID(value).version == 7


def test_generate_ids_are_unique():
    assert len({generate_id() for _ in range(100)}) == 100


def test_is_today_none_is_false():
    assert is_today(None) is False


def test_is_today_for_today():
    assert is_today(date.today().strftime("%Y-%m-%d")) is True
    assert is_today(today_string()) is True


def test_is_today_for_other_date():
    other = (date.today() - timedelta(days=1)).strftime("%Y-%m-%d")
    assert is_today(other) is False


def test_is_today_time_now():
    assert is_today_time(datetime.now().astimezone()) is True


def test_is_today_time_yesterday():
    assert is_today_time(datetime.now().astimezone() - timedelta(days=1)) is False