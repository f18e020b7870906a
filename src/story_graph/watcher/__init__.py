"""File watcher module for live story graph rebuilds."""

from .handler import DebouncedFileHandler, FileWatcher

__all__ = [
    "DebouncedFileHandler",
    "FileWatcher",
]
