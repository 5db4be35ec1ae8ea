import re
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from diffview.config import settings
from diffview.models import DiffLine, DiffResult


HUNK_HEADER = re.compile(r'@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@')

# Escapes git uses when it quotes a path, besides \ooo octal bytes
C_ESCAPES = {'a': 7, 'b': 8, 't': 9, 'n': 10, 'v': 11, 'f': 12, 'r': 13, '"': 34, '\\': 92}


def unquote_path(path: str) -> str:
    """Undo git's C-style quoting of a path; unquoted paths pass through."""
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path
    inner = path[1:-1]
    out = bytearray()
    i = 0
    while i < len(inner):
        char = inner[i]
        if char != '\\' or i + 1 == len(inner):
            out += char.encode('utf-8')
            i += 1
        elif inner[i + 1:i + 4].isdigit() and len(inner[i + 1:i + 4]) == 3:
            out.append(int(inner[i + 1:i + 4], 8) & 0xFF)
            i += 4
        else:
            out.append(C_ESCAPES.get(inner[i + 1], ord(inner[i + 1])))
            i += 2
    return out.decode('utf-8', errors='replace')


def _strip_prefix(path: str, prefix: str) -> str:
    return path[len(prefix):] if path.startswith(prefix) else path


def _closing_quote(text: str) -> int:
    i = 1
    while i < len(text):
        if text[i] == '\\':
            i += 2
        elif text[i] == '"':
            return i
        else:
            i += 1
    return len(text) - 1


def parse_header_paths(rest: str) -> Tuple[str, str]:
    """Old and new path from the part of a `diff --git` line after the command."""
    if rest.startswith('"'):
        end = _closing_quote(rest)
        old, new = rest[:end + 1], rest[end + 2:]
    elif rest.endswith('"') and ' "' in rest:
        start = rest.rfind(' "')
        old, new = rest[:start], rest[start + 1:]
    else:
        match = re.match(r'a/(.*) b/(.*)', rest)
        if not match:
            return '', ''
        return match.group(1), match.group(2)
    return _strip_prefix(unquote_path(old), 'a/'), _strip_prefix(unquote_path(new), 'b/')


class GitCommandError(RuntimeError):
    """A git invocation exited with a non-zero status."""

    def __init__(self, cmd: List[str], stderr: str) -> None:
        self.cmd = cmd
        self.stderr = stderr
        super().__init__(f"Git command failed: {' '.join(cmd)}: {stderr}")


class GitDiffService:
    """Produces classified per-file diffs from a git repository."""

    def __init__(self, repo_path: Optional[str | Path] = None, context_lines: Optional[int] = None) -> None:
        """Initialize with optional repository path and context size."""
        self.repo_path = Path(repo_path) if repo_path else settings.resolved_repo_path()
        self.context_lines = settings.context_lines if context_lines is None else context_lines

    def get_working_diff(self) -> List[DiffResult]:
        """Unstaged changes: index to working tree."""
        return self._diff([])

    def get_staged_diff(self) -> List[DiffResult]:
        """Staged changes: HEAD to index (or the empty tree before the first commit)."""
        return self._diff(["--cached"])

    def get_commit_diff(self, from_ref: str, to_ref: str) -> List[DiffResult]:
        """Changes between two commits."""
        return self._diff([from_ref, to_ref])

    def get_file_diff(self, file_path: str) -> DiffResult:
        """Changes to one file between HEAD and the working tree."""
        results = self._diff(["HEAD"], paths=[file_path])
        return self._single(results, file_path)

    def get_commit_file_diff(self, commit: str, file_path: str) -> DiffResult:
        """Changes a single commit made to one file."""
        cmd = [
            "git", "show", "--pretty=format:", f"--unified={self.context_lines}",
            "--no-color", "--no-ext-diff",
            # Merge commits: diff against the first parent, not a combined diff
            "-m", "--first-parent",
            commit, "--", file_path,
        ]
        results = self._parse_diff_output(self._run_git_command(cmd))
        return self._single(results, file_path)

    def _diff(self, args: List[str], paths: Optional[List[str]] = None) -> List[DiffResult]:
        cmd = ["git", "diff", f"--unified={self.context_lines}", "--no-color", "--no-ext-diff", *args]
        if paths:
            cmd += ["--", *paths]
        if settings.debug:
            print(f"[DEBUG] Running {' '.join(cmd)} in {self.repo_path}")
        return self._parse_diff_output(self._run_git_command(cmd))

    def _single(self, results: List[DiffResult], file_path: str) -> DiffResult:
        for result in results:
            if result.file_path == file_path:
                return result
        # Unchanged file: an empty diff, not an error.
        return DiffResult(file_path=file_path, diff_lines=[])

    def _run_git_command(self, cmd: List[str]) -> str:
        """Run a git command and return output.

        Paths are requested unquoted so non-ASCII file names come back verbatim.
        """
        full_cmd = [cmd[0], "-c", "core.quotePath=false", *cmd[1:]]
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                encoding="utf-8",
                check=True
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            raise GitCommandError(cmd, e.stderr.strip())
        except FileNotFoundError as e:
            raise GitCommandError(cmd, str(e))

    def _parse_diff_output(self, diff_output: str) -> List[DiffResult]:
        """Parse git diff output into per-file results."""
        files: List[DiffResult] = []
        current_file: Optional[Dict[str, Any]] = None
        old_num = 0
        new_num = 0
        in_hunk = False

        lines = diff_output.split('\n')
        if lines and lines[-1] == '':
            lines.pop()

        for line in lines:
            # File header
            if line.startswith('diff --git'):
                if current_file:
                    files.append(self._finalize_file(current_file))
                old_path, path = parse_header_paths(line[len('diff --git '):])
                current_file = {
                    'old_path': old_path,
                    'path': path,
                    'lines': [],
                }
                in_hunk = False

            elif current_file is None:
                continue

            elif line.startswith('@@'):
                match = HUNK_HEADER.match(line)
                if match:
                    old_num = int(match.group(1))
                    new_num = int(match.group(3))
                    in_hunk = True

            elif not in_hunk:
                # Extended header: new/deleted file, rename, binary marker
                if line.startswith('+++ '):
                    target = unquote_path(line[4:])
                    if target.startswith('b/'):
                        current_file['path'] = target[2:]
                elif line.startswith('rename to '):
                    current_file['path'] = unquote_path(line[len('rename to '):])

            elif line.startswith(' '):
                current_file['lines'].append(DiffLine.context(old_num, new_num, line[1:]))
                old_num += 1
                new_num += 1

            elif line.startswith('-'):
                current_file['lines'].append(DiffLine.deleted(old_num, line[1:]))
                old_num += 1

            elif line.startswith('+'):
                current_file['lines'].append(DiffLine.added(new_num, line[1:]))
                new_num += 1

            elif line == '':
                # Some tools strip the leading space of blank context lines
                current_file['lines'].append(DiffLine.context(old_num, new_num, ''))
                old_num += 1
                new_num += 1

            # "\ No newline at end of file" markers carry no line

        if current_file:
            files.append(self._finalize_file(current_file))

        return files

    def _finalize_file(self, file_data: Dict[str, Any]) -> DiffResult:
        """Convert file dict to a DiffResult."""
        path = file_data['path'] or file_data['old_path']
        return DiffResult(file_path=path, diff_lines=file_data['lines'])
