import logging

from core.command_runner import CommandError
from core.logger import cleanup_old_logs, log_command_error, setup_logging


def test_setup_logging_creates_log_file(tmp_path, restore_root_logger):
    log_dir = tmp_path / "logs"
    log_file = setup_logging(str(log_dir), max_log_files=5)

    assert log_file.parent == log_dir
    assert log_file.name.startswith("sweepr-")
    logging.info("hello from test")
    for handler in restore_root_logger.handlers:
        handler.flush()
    assert "hello from test" in log_file.read_text(encoding="utf-8")


def test_setup_logging_rotates_old_logs(tmp_path, restore_root_logger):
    for i in range(5):
        (tmp_path / f"sweepr-20200101-00000{i}.log").write_text("old", encoding="utf-8")

    log_file = setup_logging(str(tmp_path), max_log_files=3)

    remaining = sorted(p.name for p in tmp_path.glob("sweepr-*.log"))
    assert len(remaining) == 3
    assert log_file.name in remaining
    assert "sweepr-20200101-000004.log" in remaining
    assert "sweepr-20200101-000000.log" not in remaining


def test_cleanup_old_logs_ignores_other_files(tmp_path):
    (tmp_path / "notes.log").write_text("keep", encoding="utf-8")
    (tmp_path / "sweepr-1.log").write_text("x", encoding="utf-8")

    cleanup_old_logs(tmp_path, 0)

    assert (tmp_path / "notes.log").exists()
    assert not (tmp_path / "sweepr-1.log").exists()


def test_log_command_error_with_exit_status(caplog):
    error = CommandError(["apt-get", "clean"], output="lock held", returncode=100)
    with caplog.at_level(logging.ERROR):
        log_command_error(error, "Apt Cache")

    assert "Apt Cache: command failed with return code 100" in caplog.text
    assert "Command: apt-get clean" in caplog.text
    assert "lock held" in caplog.text


def test_log_command_error_spawn_failure(caplog):
    error = CommandError(["dnf", "clean", "all"], cause=FileNotFoundError("no dnf"))
    with caplog.at_level(logging.ERROR):
        log_command_error(error)

    assert "command could not run: no dnf" in caplog.text
    assert "Output:" not in caplog.text
