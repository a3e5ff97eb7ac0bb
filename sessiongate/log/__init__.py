"""Process logging: console plus one file per run, pruned at startup."""
from .log_manager import LogManager, cleanup_logs, get_logger

__all__ = ["LogManager", "get_logger", "cleanup_logs"]
