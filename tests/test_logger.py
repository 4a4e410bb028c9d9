from pathlib import Path

import pytest

from kiki.logger import LOG_DIR_NAME, LOG_FILE_NAME, get_log_dir, open_file_logger


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    return tmp_path


def test_get_log_dir_is_under_home(home):
    assert get_log_dir() == Path.home() / LOG_DIR_NAME


def test_logger_writes_info_messages_to_file(home):
    with open_file_logger() as logger:
        logger.info("storage ready")
    text = (get_log_dir() / LOG_FILE_NAME).read_text(encoding="utf-8")
    assert "storage ready" in text


def test_logger_drops_debug_messages(home):
    with open_file_logger() as logger:
        logger.debug("hidden detail")
        logger.error("visible problem")
    text = (get_log_dir() / LOG_FILE_NAME).read_text(encoding="utf-8")
    assert "hidden detail" not in text
    assert "visible problem" in text


def test_logger_appends_across_sessions(home):
    with open_file_logger() as logger:
        logger.info("first run")
    with open_file_logger() as logger:
        logger.info("second run")
    lines = (get_log_dir() / LOG_FILE_NAME).read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert "first run" in lines[0]
    assert "second run" in lines[1]


def test_handler_is_detached_after_exit(home):
    with open_file_logger() as logger:
        inside = len(logger.handlers)
    assert len(logger.handlers) == inside - 1


def test_log_dir_blocked_by_file_raises(home):
    (home / LOG_DIR_NAME).write_text("in the way")
    with pytest.raises(OSError, match="create log dir"):
        with open_file_logger():
            pass