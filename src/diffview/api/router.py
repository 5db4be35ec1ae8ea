from typing import List

from fastapi import APIRouter, Query, HTTPException

from diffview.api.responses import RenderRequest, RenderedDiffSet
from diffview.config import settings
from diffview.git_service import GitCommandError
from diffview.models import DiffResult, DiffSummary, ViewMode
from diffview.rendering import render_diff
from diffview.stats import summarize
from diffview.view_session import DiffSource, LiveDiffManager


def create_api_router(manager: LiveDiffManager | None = None) -> APIRouter:
    """Create the diff API router, backed by a live diff manager."""
    router = APIRouter()
    live = manager or LiveDiffManager()

    def git_error(e: GitCommandError) -> HTTPException:
        if settings.debug:
            print(f"[DEBUG] {e}")
        return HTTPException(status_code=500, detail=str(e))

    @router.get("/api/diff/working")
    async def get_working_diff() -> List[DiffResult]:
        """Unstaged changes in the working tree."""
        try:
            return live.git_service.get_working_diff()
        except GitCommandError as e:
            raise git_error(e)

    @router.get("/api/diff/staged")
    async def get_staged_diff() -> List[DiffResult]:
        """Changes staged for the next commit."""
        try:
            return live.git_service.get_staged_diff()
        except GitCommandError as e:
            raise git_error(e)

    @router.get("/api/diff/commit")
    async def get_commit_diff(
        from_ref: str | None = Query(None, description="Base commit"),
        to_ref: str | None = Query(None, description="Target commit"),
    ) -> List[DiffResult]:
        """Changes between two commits."""
        if not from_ref or not to_ref:
            raise HTTPException(
                status_code=400,
                detail="Must specify both 'from_ref' and 'to_ref' parameters",
            )
        try:
            return live.git_service.get_commit_diff(from_ref, to_ref)
        except GitCommandError as e:
            raise git_error(e)

    @router.get("/api/diff/file")
    async def get_file_diff(
        path: str = Query(..., description="Repository-relative file path"),
    ) -> DiffResult:
        """Changes to one file since HEAD."""
        try:
            return live.git_service.get_file_diff(path)
        except GitCommandError as e:
            raise git_error(e)

    @router.get("/api/diff/commit-file")
    async def get_commit_file_diff(
        commit: str = Query(..., description="Commit to inspect"),
        path: str = Query(..., description="Repository-relative file path"),
    ) -> DiffResult:
        """Changes one commit made to one file."""
        try:
            return live.git_service.get_commit_file_diff(commit, path)
        except GitCommandError as e:
            raise git_error(e)

    @router.get("/api/diff/stats")
    async def get_diff_stats(
        source: DiffSource = Query(DiffSource.WORKING, description="Live change set"),
    ) -> DiffSummary:
        """Files changed and total additions/deletions for a live change set."""
        try:
            return live.get_session(source).summary()
        except GitCommandError as e:
            raise git_error(e)

    @router.get("/api/diff/view")
    async def get_diff_view(
        source: DiffSource = Query(DiffSource.WORKING, description="Live change set"),
        view_mode: ViewMode | None = Query(None, description="unified or split"),
        path: str | None = Query(None, description="Render only this file"),
    ) -> RenderedDiffSet:
        """Rendered views of a live change set, memoised per file and mode."""
        mode = view_mode or settings.default_view_mode
        try:
            session = live.get_session(source)
        except GitCommandError as e:
            raise git_error(e)

        if path is not None:
            try:
                files = [session.render(path, mode)]
            except KeyError:
                raise HTTPException(status_code=404, detail=f"No changes for file: {path}")
        else:
            files = session.render_all(mode)
        return RenderedDiffSet(files=files, summary=session.summary())

    @router.post("/api/diff/render")
    async def render_payload(request: RenderRequest) -> RenderedDiffSet:
        """Lay out a diff payload supplied by the caller."""
        files = [
            render_diff(result, request.view_mode, request.show_line_numbers)
            for result in request.results
        ]
        return RenderedDiffSet(files=files, summary=summarize(request.results))

    return router
