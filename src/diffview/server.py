import argparse
from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from diffview.api.router import create_api_router
from diffview.config import settings
from diffview.file_watcher import FileWatcher
from diffview.git_service import GitDiffService
from diffview.utils.common import get_random_port
from diffview.view_session import LiveDiffManager


def create_app(manager: LiveDiffManager | None = None, watch: bool = True) -> FastAPI:
    """Build the diff viewer app around a live diff manager."""
    live = manager or LiveDiffManager()
    file_watcher = FileWatcher(live)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if watch:
            file_watcher.start_watching(str(live.git_service.repo_path))
            if settings.debug:
                print(f"[DEBUG] Watching {live.git_service.repo_path}")
        yield
        file_watcher.stop()

    app = FastAPI(title="Diff Viewer", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, specify exact origins
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(create_api_router(live))
    app.state.live_diffs = live
    app.state.file_watcher = file_watcher
    return app


def main() -> None:
    """Entry point for the diffview-server command."""
    parser = argparse.ArgumentParser(description="Diff Viewer Server")
    parser.add_argument("--port", type=int, help="Port to run the server on (default: random)")
    parser.add_argument("--repo", help="Repository to diff (default: current directory)")
    args = parser.parse_args()

    app = create_app(LiveDiffManager(GitDiffService(repo_path=args.repo)))

    port = args.port or settings.port
    if port:
        print(f"Diff server available at: http://{settings.host}:{port}")
        uvicorn.run(app, host=settings.host, port=port)
    else:
        sock, port = get_random_port()
        print(f"Diff server available at: http://127.0.0.1:{port}")
        uvicorn.run(app, fd=sock.fileno())


if __name__ == "__main__":
    main()
