from pathlib import Path
from typing import Dict, Optional
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver, ObservedWatch
from watchdog.events import FileSystemEventHandler, FileSystemEvent

from diffview.view_session import LiveDiffManager


class DiffFileSystemEventHandler(FileSystemEventHandler):
    """Forwards file changes under a repository to the live diff manager."""

    def __init__(self, manager: LiveDiffManager, root: Path):
        """Initialize the handler.

        Args:
            manager: Live diff manager whose cached views go stale on change
            root: Repository root; reported paths are relative to it
        """
        self.manager = manager
        self.root = root.resolve()

    def relative_path(self, src_path: str) -> Optional[str]:
        """Repo-relative POSIX path, or None for paths outside the repository."""
        try:
            return Path(src_path).resolve().relative_to(self.root).as_posix()
        except ValueError:
            return None

    def on_any_event(self, event: FileSystemEvent) -> None:
        """Handle created, modified, moved and deleted files."""
        if event.is_directory or event.event_type in ("opened", "closed", "closed_no_write"):
            return
        file_path = self.relative_path(str(event.src_path))
        if file_path is None:
            return

        if file_path == ".git" or file_path.startswith(".git/"):
            # Index or ref updates change the staged diff, not a single file
            self.manager.mark_stale()
        else:
            self.manager.notify_file_changed(file_path)


class FileWatcher:
    """Watches a repository for changes and invalidates live diffs."""

    def __init__(self, manager: LiveDiffManager):
        """Initialize the file watcher.

        Args:
            manager: Live diff manager to notify
        """
        self.manager = manager
        self.observer: Optional[BaseObserver] = None
        self.watch_handles: Dict[str, ObservedWatch] = {}  # Directory -> watch handle
        self._is_watching = False

    def start_watching(self, directory: str) -> None:
        """Start watching a directory for changes.

        Args:
            directory: Directory path to watch recursively
        """
        if self._is_watching:
            return

        if self.observer is None:
            self.observer = Observer()
            self.observer.start()

        handler = DiffFileSystemEventHandler(self.manager, Path(directory))
        try:
            watch_handle = self.observer.schedule(
                handler,
                directory,
                recursive=True
            )
            self.watch_handles[directory] = watch_handle
            self._is_watching = True
        except OSError as e:
            print(f"Warning: Could not watch directory {directory}: {e}")

    def stop(self) -> None:
        """Stop the file watcher."""
        if self.observer:
            self.observer.stop()
            self.observer.join()
            self.observer = None
        self.watch_handles.clear()
        self._is_watching = False
