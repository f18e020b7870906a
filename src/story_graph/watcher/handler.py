"""Debounced watching of story and component sources."""

import logging
import threading
from pathlib import Path
from typing import Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ..parser.languages import is_story_file, is_supported_file, should_ignore_path

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[dict[str, str]], None]


class DebouncedFileHandler(FileSystemEventHandler):
    """Collects source changes and reports them once the repository is quiet.

    A change to any story or component can move edges anywhere in the graph,
    so consumers typically rebuild on every flush. Debouncing turns a git
    checkout or a formatter run into a single flush.
    """

    def __init__(
        self,
        on_changes_callback: ChangeCallback,
        debounce_seconds: float = 2.0,
        root: Path | None = None,
    ):
        """Initialize the handler.

        Args:
            on_changes_callback: Called with ``{path: "upsert" | "delete"}``
            debounce_seconds: Quiet period before the callback runs
            root: Watched root; ignored directories are matched below it
        """
        super().__init__()
        self._callback = on_changes_callback
        self._debounce_seconds = debounce_seconds
        self._root = root

        self._pending: set[str] = set()
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    def is_relevant(self, path: str) -> bool:
        """Check if a changed path can affect the story graph."""
        path_obj = Path(path)
        relative = path_obj
        if self._root is not None:
            try:
                relative = path_obj.relative_to(self._root)
            except ValueError:
                return False
        if should_ignore_path(relative):
            return False
        return is_supported_file(path_obj) or is_story_file(path_obj)

    def on_any_event(self, event: FileSystemEvent) -> None:
        """Queue created, modified, deleted and moved files."""
        if event.is_directory or event.event_type not in {
            "created",
            "modified",
            "deleted",
            "moved",
        }:
            return

        paths = [event.src_path]
        if event.event_type == "moved":
            paths.append(event.dest_path)
        self.queue(*(str(p) for p in paths))

    def queue(self, *paths: str) -> None:
        """Record changed paths and restart the debounce timer."""
        relevant = [p for p in paths if self.is_relevant(p)]
        if not relevant:
            return

        with self._lock:
            self._pending.update(relevant)
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self._debounce_seconds, self.flush)
            self._timer.daemon = True
            self._timer.start()
            logger.debug(f"Queued {relevant}, {len(self._pending)} changes pending")

    def flush(self) -> None:
        """Report pending changes now."""
        with self._lock:
            if not self._pending:
                return
            pending = sorted(self._pending)
            self._pending.clear()
            self._timer = None

        # Editors that save atomically emit delete+create; what is on disk now decides
        changes = {path: "upsert" if Path(path).exists() else "delete" for path in pending}
        logger.info(f"Processing {len(changes)} file changes")

        try:
            self._callback(changes)
        except Exception as e:
            logger.error(f"Error processing file changes: {e}")

    def stop(self) -> None:
        """Cancel a pending flush."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None


class FileWatcher:
    """Watches a repository and calls back with debounced source changes."""

    def __init__(
        self,
        repo_path: Path,
        on_changes: ChangeCallback,
        debounce_seconds: float = 2.0,
    ):
        self._repo_path = repo_path
        self._handler = DebouncedFileHandler(
            on_changes_callback=on_changes,
            debounce_seconds=debounce_seconds,
            root=repo_path,
        )
        self._observer = Observer()
        self._running = False

    @property
    def handler(self) -> DebouncedFileHandler:
        return self._handler

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Start watching the repository recursively."""
        if self._running:
            logger.warning("FileWatcher is already running")
            return
        self._observer.schedule(self._handler, str(self._repo_path), recursive=True)
        self._observer.start()
        self._running = True
        logger.info(f"Watching {self._repo_path} for story and component changes")

    def stop(self) -> None:
        """Stop watching and drop any pending flush."""
        if not self._running:
            return
        self._handler.stop()
        self._observer.stop()
        self._observer.join(timeout=5.0)
        self._running = False
        logger.info("FileWatcher stopped")

    def __enter__(self) -> "FileWatcher":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
