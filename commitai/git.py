"""Git operations for commitai."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from .exceptions import GitError, PreconditionError

DIFF_HEADER = "diff --git "

# Report non-ASCII paths verbatim instead of C-quoting them.
GIT_OPTIONS = ["-c", "core.quotePath=false"]

logger = logging.getLogger(__name__)


class ChangeStatus(str, Enum):
    """Coarse classification of a ``--name-status`` code."""

    ADDED = "A"
    MODIFIED = "M"
    DELETED = "D"
    RENAMED = "R"
    OTHER = "?"

    @classmethod
    def from_code(cls, code: str) -> "ChangeStatus":
        for status in (cls.ADDED, cls.MODIFIED, cls.DELETED, cls.RENAMED):
            if code.startswith(status.value):
                return status
        return cls.OTHER


@dataclass(frozen=True)
class FileChange:
    """A staged file, its raw status code and its own diff section.

    For renames ``path`` is the new name and ``old_path`` the name the file
    is moved away from.
    """

    path: str
    status_code: str
    diff: str = ""
    old_path: str = ""

    @property
    def status(self) -> ChangeStatus:
        return ChangeStatus.from_code(self.status_code)


def split_diff_by_file(full_diff: str) -> Dict[str, str]:
    """Partition a combined unified diff into per-file sections.

    Each ``diff --git a/<old> b/<new>`` line starts a new section; the key is
    whatever follows the last `` b/`` on that line. Paths that themselves
    contain `` b/`` are therefore keyed by their trailing fragment only.
    """
    result: Dict[str, str] = {}
    current_file = ""
    current_lines: List[str] = []

    for line in full_diff.split("\n"):
        if line.startswith(DIFF_HEADER):
            if current_file and current_lines:
                result[current_file] = "\n".join(current_lines)
            parts = line.split(" b/")
            if len(parts) >= 2:
                current_file = parts[-1]
            current_lines = [line]
        else:
            current_lines.append(line)

    if current_file and current_lines:
        result[current_file] = "\n".join(current_lines)

    return result


class GitRepo:
    """Handles Git repository operations."""

    def __init__(self, repo_path: Optional[str] = None) -> None:
        """Initialize Git repository handler.

        Raises:
            PreconditionError: If ``repo_path`` is not inside a repository.
        """
        self.repo_path = Path(repo_path or ".")
        if not self.is_git_repo():
            raise PreconditionError("not a git repository")
        # Staged paths are reported relative to the top level.
        try:
            top_level = self._run_git_command(["rev-parse", "--show-toplevel"])
        except GitError as e:
            raise PreconditionError("not inside a git work tree") from e
        self.repo_path = Path(top_level)

    def is_git_repo(self) -> bool:
        """Check if the current directory is a Git repository."""
        try:
            self._run_git_command(["rev-parse", "--git-dir"])
            return True
        except GitError:
            return False

    def _run_git_command(self, args: list[str]) -> str:
        """Run a Git command and return its output."""
        try:
            result = subprocess.run(
                ["git"] + GIT_OPTIONS + args,
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                check=True,
            )
            return result.stdout.strip()
        except subprocess.CalledProcessError as e:
            cmd = " ".join(args)
            detail = (e.stderr or e.stdout or "").strip()
            raise GitError(f"git {cmd} failed: {detail}") from e
        except FileNotFoundError as exc:
            raise GitError("Git command not found. Please install Git.") from exc

    def get_staged_diff(self) -> str:
        """Get the unified diff of staged changes."""
        return self._run_git_command(["diff", "--cached", "--unified=3"])

    def staged_changes(self) -> List[FileChange]:
        """Return every staged file with its status and diff section.

        Raises:
            PreconditionError: If nothing is staged.
        """
        status_output = self._run_git_command(["diff", "--cached", "--name-status"])
        if not status_output.strip():
            raise PreconditionError(
                "no staged changes found. Use 'git add' to stage files first"
            )

        entries: List[tuple[str, str, str]] = []
        for line in status_output.split("\n"):
            parts = [p for p in line.split("\t") if p]
            if len(parts) < 2:
                continue
            status = parts[0].strip()
            # Renames/copies list old and new path; the new one wins.
            old_path = ""
            if status.startswith(ChangeStatus.RENAMED.value) and len(parts) >= 3:
                old_path = parts[1].strip()
            entries.append((status, parts[-1].strip(), old_path))

        file_diffs = split_diff_by_file(self.get_staged_diff())
        changes = [
            FileChange(
                path=path,
                status_code=status,
                diff=file_diffs.get(path, ""),
                old_path=old_path,
            )
            for status, path, old_path in entries
        ]
        logger.debug(
            "Collected %d staged file(s), %d with diff sections",
            len(changes),
            sum(1 for c in changes if c.diff),
        )
        return changes

    def get_recent_commits(self, count: int = 5) -> list[str]:
        """Get recent commit subjects prefixed with their short hash."""
        output = self._run_git_command(["log", f"-{count}", "--pretty=%h %s"])
        return [line for line in output.split("\n") if line] if output else []

    def latest_tag(self) -> str:
        """Return the most recent reachable tag, or "" when there is none."""
        try:
            return self._run_git_command(["describe", "--tags", "--abbrev=0"])
        except GitError:
            return ""

    def commits_since_tag(self, tag: str) -> list[str]:
        """One-line commit summaries since ``tag`` (all history if empty)."""
        args = ["log", "--oneline"]
        if tag:
            args.append(f"{tag}..HEAD")
        output = self._run_git_command(args)
        return [line for line in output.split("\n") if line]

    def stage_file(self, file_path: str) -> None:
        """Stage a specific file for commit."""
        self._run_git_command(["add", "--", file_path])

    def reset_index(self) -> None:
        """Unstage everything, keeping working tree changes."""
        self._run_git_command(["reset", "-q"])

    def commit(self, message: str) -> None:
        """Create a commit with the given message."""
        self._run_git_command(["commit", "-m", message])

    def create_tag(self, tag: str, message: str) -> None:
        """Create an annotated tag."""
        self._run_git_command(["tag", "-a", tag, "-m", message])

    def push_tag(self, tag: str, remote: str = "origin") -> str:
        return self._run_git_command(["push", remote, tag])
