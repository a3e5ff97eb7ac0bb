"""
Process logging for sessiongate.

Every named logger writes to the console and to one file per process run
under ``logs/app/``. ``LogManager.cleanup`` prunes old run files at startup.
Configuration comes from the ``logging`` section of the app config.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

_MB = 1024 * 1024
_FORMAT = "%(asctime)s.%(msecs)03d | %(levelname)s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class _RunFile:
    path: Path
    size: int
    modified: datetime


class LogManager:
    """
    Hands out named loggers and prunes the log directory.

    Cleanup leaves the directory alone while it holds less than
    ``min_keep_mb``; above that, files older than ``max_age_days`` go first,
    then the oldest remaining ones until the total is within ``max_size_mb``.
    """

    def __init__(self, config: dict[str, Any] | None = None):
        config = config or {}
        default_dir = Path(__file__).resolve().parents[2] / "logs" / "app"
        self.log_dir = Path(config["log_dir"]) if config.get("log_dir") else default_dir
        self.level = getattr(logging, str(config.get("level", "INFO")).upper(), logging.INFO)
        self.console_output = bool(config.get("console_output", True))
        self.file_output = bool(config.get("file_output", True))
        self.max_size_mb = int(config.get("max_size_mb", 100))
        self.max_age_days = int(config.get("max_age_days", 30))
        self.min_keep_mb = int(config.get("min_keep_mb", 20))

        self._formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT)
        self._run_file: Path | None = None

    @property
    def run_file(self) -> Path:
        if self._run_file is None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self._run_file = self.log_dir / datetime.now().strftime("%Y-%m-%d_%H-%M-%S.log")
        return self._run_file

    def _handlers(self) -> list[logging.Handler]:
        handlers: list[logging.Handler] = []
        if self.console_output:
            handlers.append(logging.StreamHandler())
        if self.file_output:
            handlers.append(logging.FileHandler(self.run_file, encoding="utf-8"))
        for handler in handlers:
            handler.setLevel(self.level)
            handler.setFormatter(self._formatter)
        return handlers

    def get_logger(self, name: str) -> logging.Logger:
        logger = logging.getLogger(name)
        if not logger.handlers:
            logger.setLevel(self.level)
            logger.propagate = False
            for handler in self._handlers():
                logger.addHandler(handler)
        return logger

    def _run_files(self) -> list[_RunFile]:
        files = []
        for path in self.log_dir.glob("*.log"):
            if path.is_file():
                stat = path.stat()
                files.append(_RunFile(path, stat.st_size, datetime.fromtimestamp(stat.st_mtime)))
        return sorted(files, key=lambda f: f.modified)

    def cleanup(self) -> dict[str, Any]:
        """Prune run files; returns the deleted names and the remaining size in MB."""
        report: dict[str, Any] = {"deleted_by_age": [], "deleted_by_size": [], "remaining_mb": 0.0}
        if not self.log_dir.exists():
            return report

        files = self._run_files()
        if sum(f.size for f in files) >= self.min_keep_mb * _MB:
            cutoff = datetime.now() - timedelta(days=self.max_age_days)
            for f in [f for f in files if f.modified < cutoff]:
                f.path.unlink()
                report["deleted_by_age"].append(f.path.name)
                files.remove(f)

            while files and sum(f.size for f in files) > self.max_size_mb * _MB:
                oldest = files.pop(0)
                oldest.path.unlink()
                report["deleted_by_size"].append(oldest.path.name)

        report["remaining_mb"] = sum(f.size for f in files) / _MB
        return report


_manager: LogManager | None = None


def _current_manager() -> LogManager:
    global _manager
    if _manager is None:
        from config.settings import settings
        _manager = LogManager(dict(settings.logging))
    return _manager


def get_logger(name: str) -> logging.Logger:
    """Named logger configured from the app config on first use."""
    return _current_manager().get_logger(name)


def cleanup_logs() -> dict[str, Any]:
    return _current_manager().cleanup()
