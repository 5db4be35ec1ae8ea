"""Shared fixtures: diff line builders and a throwaway git repository."""

import subprocess
from pathlib import Path
from typing import List

import pytest

from diffview.models import DiffLine, DiffResult


def git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args], cwd=repo, capture_output=True, text=True, check=True
    )
    return result.stdout


@pytest.fixture
def git_repo_with_commits(tmp_path: Path) -> Path:
    """A repository with two commits and a clean working tree.

    file1.txt goes from "line1..line3" to "line1, line2 changed, line3";
    file2.txt is unchanged after the first commit.
    """
    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init", "-q")
    git(repo, "config", "user.email", "test@example.com")
    git(repo, "config", "user.name", "Test User")
    git(repo, "config", "commit.gpgsign", "false")

    (repo / "file1.txt").write_text("line1\nline2\nline3\n")
    (repo / "file2.txt").write_text("alpha\nbeta\n")
    git(repo, "add", ".")
    git(repo, "commit", "-q", "-m", "initial")

    (repo / "file1.txt").write_text("line1\nline2 changed\nline3\n")
    git(repo, "commit", "-q", "-am", "change line2")
    return repo


@pytest.fixture
def mixed_lines() -> List[DiffLine]:
    """Context, a 2-for-1 replacement, context, a lone addition."""
    return [
        DiffLine.context(1, 1, "# Title"),
        DiffLine.deleted(2, "old a"),
        DiffLine.deleted(3, "old b"),
        DiffLine.added(2, "new a"),
        DiffLine.context(4, 3, ""),
        DiffLine.added(4, "appendix"),
    ]


@pytest.fixture
def mixed_result(mixed_lines: List[DiffLine]) -> DiffResult:
    return DiffResult(file_path="docs/readme.md", diff_lines=mixed_lines)
