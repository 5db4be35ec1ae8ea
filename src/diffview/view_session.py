import threading
import time
import uuid
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

from diffview.config import settings
from diffview.git_service import GitDiffService
from diffview.models import DiffResult, DiffSummary, ViewMode
from diffview.rendering import RenderedDiff, render_diff
from diffview.stats import summarize


class DiffViewSession:
    """Holds one diff payload and memoises its rendered per-file views.

    Views are keyed by (file_path, view_mode). Recomputing a view always gives
    the same answer, so invalidation only has to be conservative, never exact.
    """

    def __init__(self, results: Optional[List[DiffResult]] = None,
                 show_line_numbers: Optional[bool] = None) -> None:
        self.id = str(uuid.uuid4())[:8]
        self.created_at = time.time()
        self.show_line_numbers = (
            settings.show_line_numbers if show_line_numbers is None else show_line_numbers
        )
        self._lock = threading.Lock()
        self._results: Dict[str, DiffResult] = {}
        self._cache: Dict[Tuple[str, ViewMode], RenderedDiff] = {}
        self.replace(results or [])

    @property
    def results(self) -> List[DiffResult]:
        with self._lock:
            return list(self._results.values())

    @property
    def file_paths(self) -> List[str]:
        with self._lock:
            return list(self._results.keys())

    def replace(self, results: List[DiffResult]) -> None:
        """Swap in a fresh payload, keeping cached views of unchanged files."""
        with self._lock:
            fresh = {result.file_path: result for result in results}
            for key in list(self._cache):
                if self._results.get(key[0]) != fresh.get(key[0]):
                    del self._cache[key]
            self._results = fresh

    def render(self, file_path: str, view_mode: ViewMode = ViewMode.UNIFIED) -> RenderedDiff:
        """Rendered view of one file, computed at most once per payload."""
        key = (file_path, view_mode)
        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                return cached
            result = self._results.get(file_path)
        if result is None:
            raise KeyError(file_path)

        rendered = render_diff(result, view_mode, self.show_line_numbers)
        with self._lock:
            # A concurrent replace() may have dropped this file meanwhile.
            if self._results.get(file_path) is result:
                self._cache[key] = rendered
        if settings.debug:
            print(f"[DEBUG] Rendered {view_mode.value} view of '{file_path}'")
        return rendered

    def render_all(self, view_mode: ViewMode = ViewMode.UNIFIED) -> List[RenderedDiff]:
        return [self.render(path, view_mode) for path in self.file_paths]

    def summary(self) -> DiffSummary:
        return summarize(self.results)

    def invalidate(self, file_path: Optional[str] = None) -> int:
        """Drop cached views for one file, or all of them. Returns how many."""
        with self._lock:
            if file_path is None:
                dropped = len(self._cache)
                self._cache.clear()
                return dropped
            keys = [key for key in self._cache if key[0] == file_path]
            for key in keys:
                del self._cache[key]
            return len(keys)

    def cached_keys(self) -> List[Tuple[str, ViewMode]]:
        with self._lock:
            return list(self._cache.keys())


class DiffSource(str, Enum):
    """Live change sets the server can show."""
    WORKING = "working"
    STAGED = "staged"


class LiveDiffManager:
    """Keeps one session per live source, refetching after file changes."""

    def __init__(self, git_service: Optional[GitDiffService] = None) -> None:
        self.git_service = git_service or GitDiffService()
        self.sessions: Dict[DiffSource, DiffViewSession] = {}
        self._stale: Set[DiffSource] = set()
        self._lock = threading.Lock()

    def fetch(self, source: DiffSource) -> List[DiffResult]:
        if source == DiffSource.STAGED:
            return self.git_service.get_staged_diff()
        return self.git_service.get_working_diff()

    def get_session(self, source: DiffSource = DiffSource.WORKING) -> DiffViewSession:
        """Session for a source, refreshed from git if files changed since."""
        with self._lock:
            session = self.sessions.get(source)
            if session is not None and source not in self._stale:
                return session
            # Changes arriving during the fetch mark the source stale again
            self._stale.discard(source)

        try:
            results = self.fetch(source)
        except Exception:
            with self._lock:
                if source in self.sessions:
                    self._stale.add(source)
            raise

        with self._lock:
            session = self.sessions.get(source)
            if session is None:
                session = DiffViewSession(results)
                self.sessions[source] = session
            else:
                session.replace(results)
        if settings.debug:
            print(f"[DEBUG] Fetched {len(results)} file(s) for {source.value} diff")
        return session

    def mark_stale(self) -> None:
        """Refetch every live source on its next access."""
        with self._lock:
            self._stale.update(self.sessions.keys())

    def notify_file_changed(self, file_path: str) -> None:
        """Mark every live source stale and drop cached views of the file."""
        self.mark_stale()
        with self._lock:
            sessions = list(self.sessions.values())
        for session in sessions:
            session.invalidate(file_path)
        if settings.debug:
            print(f"[DEBUG] File changed: {file_path}")
