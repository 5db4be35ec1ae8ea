from mcp.server.fastmcp import FastMCP

from diffview.models import ViewMode
from diffview.rendering import render_text
from diffview.view_session import DiffSource, LiveDiffManager

# MCP server and live diff manager
mcp = FastMCP("Diff Viewer")
live_diffs = LiveDiffManager()


@mcp.tool()
def diff_summary(source: str = "working") -> str:
    """Summarize a live change set.

    Parameters:
    - source: 'working' for unstaged changes, 'staged' for the index
    """
    session = live_diffs.get_session(DiffSource(source))
    return session.summary().format()


@mcp.tool()
def render_file_diff(path: str, view_mode: str = "unified", source: str = "working") -> str:
    """Render one file's diff as plain text.

    Parameters:
    - path: repository-relative file path
    - view_mode: 'unified' or 'split'
    - source: 'working' or 'staged'
    """
    session = live_diffs.get_session(DiffSource(source))
    try:
        rendered = session.render(path, ViewMode(view_mode))
    except KeyError:
        return f"No changes for {path}"
    return render_text(rendered)


def main() -> None:
    """Entry point for the stdio MCP server."""
    mcp.run('stdio')


if __name__ == "__main__":
    main()
