"""
LogManager: per-run file output and size/age based cleanup.
"""

import os
import time

from sessiongate.log.log_manager import LogManager


def _manager(tmp_path, **overrides):
    config = {"log_dir": str(tmp_path), "console_output": False}
    config.update(overrides)
    return LogManager(config)


def test_logger_writes_to_run_file(tmp_path):
    logger = _manager(tmp_path).get_logger("sessiongate.test.run_file")
    logger.info("hello")
    for handler in logger.handlers:
        handler.flush()

    files = list(tmp_path.glob("*.log"))
    assert len(files) == 1
    assert "hello" in files[0].read_text(encoding="utf-8")


def test_file_output_can_be_disabled(tmp_path):
    log_dir = tmp_path / "never-created"
    logger = LogManager({"log_dir": str(log_dir), "console_output": False, "file_output": False}) \
        .get_logger("sessiongate.test.no_file")
    logger.info("dropped")
    assert not log_dir.exists()


def test_cleanup_keeps_everything_under_min_keep(tmp_path):
    (tmp_path / "old.log").write_text("x" * 1024)
    report = _manager(tmp_path, min_keep_mb=1).cleanup()
    assert report["deleted_by_age"] == []
    assert (tmp_path / "old.log").exists()


def test_cleanup_removes_old_files(tmp_path):
    old = tmp_path / "old.log"
    new = tmp_path / "new.log"
    old.write_bytes(b"x" * 1024)
    new.write_bytes(b"x" * 1024)
    two_months_ago = time.time() - 60 * 24 * 3600
    os.utime(old, (two_months_ago, two_months_ago))

    report = _manager(tmp_path, min_keep_mb=0, max_age_days=30).cleanup()
    assert report["deleted_by_age"] == ["old.log"]
    assert not old.exists()
    assert new.exists()


def test_cleanup_trims_oldest_to_size_cap(tmp_path):
    now = time.time()
    for age_hours, name in ((3, "a.log"), (2, "b.log"), (1, "c.log")):
        path = tmp_path / name
        path.write_bytes(b"x" * 1024)
        os.utime(path, (now - age_hours * 3600, now - age_hours * 3600))

    report = _manager(tmp_path, min_keep_mb=0, max_size_mb=0).cleanup()
    assert report["deleted_by_size"] == ["a.log", "b.log", "c.log"]
    assert report["remaining_mb"] == 0.0
