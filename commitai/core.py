"""Core commit workflow for commitai."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from . import console
from .exceptions import CommitAIError, GitError, LLMError
from .git import FileChange, GitRepo
from .llm import ALL_FILES, LLMClient

RECENT_COMMITS = 5

logger = logging.getLogger(__name__)


@dataclass
class RunOptions:
    """Per-invocation options of the commit command."""

    granular: bool = False
    all_files: bool = False
    dry_run: bool = False
    yes: bool = False


@dataclass
class CommitResult:
    """Result of a commit operation."""

    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    file_path: Optional[str] = None


def determine_mode(changes: Sequence[FileChange], options: RunOptions) -> bool:
    """Return True for one-commit-per-file mode.

    Explicit flags win. Otherwise a single file is never granular; several
    files are granular when there are three or more, or when they live in
    more than one top-level directory.
    """
    if options.granular:
        return True
    if options.all_files:
        return False
    if len(changes) <= 1:
        return False
    dirs = {c.path.split("/")[0] for c in changes if "/" in c.path}
    return len(dirs) > 1 or len(changes) >= 3


def default_message(path: str) -> str:
    return f"chore: update {path}"


class CommitAIWorkflow:
    """Generate messages for staged changes and commit them."""

    def __init__(
        self,
        git_repo: GitRepo,
        llm_client: LLMClient,
        options: Optional[RunOptions] = None,
        input_fn: Callable[[str], str] = input,
    ) -> None:
        self.git_repo = git_repo
        self.llm_client = llm_client
        self.options = options or RunOptions()
        self._input = input_fn

    def execute_workflow(self) -> List[CommitResult]:
        """Run the full commit flow and return the commits that were made."""
        console.info("🔍 Analyzing staged changes...")
        changes = self.git_repo.staged_changes()
        granular = determine_mode(changes, self.options)

        console.info(f"\n📂 Staged files ({len(changes)}):")
        for change in changes:
            print(f"  {console.status_icon(change.status)} {change.path}")

        recent = self._recent_commits()

        console.info("\n✨ Generating commit message(s) with Gemini...")
        try:
            messages = self.llm_client.generate_commit_messages(
                changes, granular, recent
            )
        except LLMError as e:
            raise CommitAIError(f"AI generation failed: {e}") from e

        if granular:
            return self.handle_granular_commits(changes, messages)
        return self.handle_single_commit(messages.get(ALL_FILES, ""))

    def _recent_commits(self) -> List[str]:
        try:
            return self.git_repo.get_recent_commits(RECENT_COMMITS)
        except GitError as e:
            # A repository without commits has no log yet.
            logger.debug("No recent commits for context: %s", e)
            return []

    # ------------------------------------------------------------------
    # Single commit
    # ------------------------------------------------------------------
    def handle_single_commit(self, message: str) -> List[CommitResult]:
        print()
        console.success("💬 Suggested commit message:")
        console.boxed(message)

        if self.options.dry_run:
            console.warn("\n🔍 Dry run: no commit was made.")
            return []

        final, confirmed = self.confirm_or_edit(message)
        if not confirmed:
            console.warn("Commit cancelled.")
            return []

        try:
            self.git_repo.commit(final)
        except GitError as e:
            raise CommitAIError(f"commit failed: {e}") from e
        console.success("\n✅ Committed successfully!")
        return [CommitResult(success=True, message=final)]

    def confirm_or_edit(self, message: str) -> tuple[str, bool]:
        """Ask the user to accept, reject or replace ``message``."""
        if self.options.yes:
            return message, True

        answer = self._ask("\n⚡ Use this message? [Y/n/e(dit)]: ")
        if answer in {"n", "no"}:
            return "", False
        if answer in {"e", "edit"}:
            try:
                edited = self._input("Enter your message: ").strip()
            except EOFError:
                edited = ""
            if not edited:
                return "", False
            return edited, True
        return message, True

    # ------------------------------------------------------------------
    # Granular commits
    # ------------------------------------------------------------------
    def build_plan(
        self, changes: Sequence[FileChange], messages: Dict[str, str]
    ) -> List[tuple[str, str]]:
        """Pair every staged path, in staged order, with its message."""
        plan = []
        for change in changes:
            message = messages.get(change.path)
            if not message:
                logger.debug("No generated message for %s", change.path)
                message = default_message(change.path)
            plan.append((change.path, message))
        return plan

    def handle_granular_commits(
        self, changes: Sequence[FileChange], messages: Dict[str, str]
    ) -> List[CommitResult]:
        plan = self.build_plan(changes, messages)

        print()
        console.success("💬 Suggested commit messages (per file):")
        for i, (path, message) in enumerate(plan, start=1):
            print(f"\n[{i}/{len(plan)}] {path}")
            console.boxed(message)

        if self.options.dry_run:
            console.warn("\n🔍 Dry run: no commits were made.")
            return []

        if not self.options.yes:
            answer = self._ask("\n⚡ Commit all with these messages? [Y/n]: ")
            if answer in {"n", "no"}:
                console.warn("Commit cancelled.")
                return []

        try:
            self.git_repo.reset_index()
        except GitError as e:
            raise CommitAIError(f"failed to unstage changes: {e}") from e

        # A rename commits the removal of its old path too.
        old_paths = {c.path: c.old_path for c in changes if c.old_path}
        results: List[CommitResult] = []
        for i, (path, message) in enumerate(plan, start=1):
            try:
                self.git_repo.stage_file(path)
                if path in old_paths:
                    self.git_repo.stage_file(old_paths[path])
            except GitError as e:
                raise CommitAIError(f"failed to stage {path}: {e}") from e
            try:
                self.git_repo.commit(message)
            except GitError as e:
                raise CommitAIError(f"failed to commit {path}: {e}") from e
            results.append(CommitResult(success=True, message=message, file_path=path))
            console.success(f"  ✅ [{i}/{len(plan)}] {path}")

        console.success(f"\n🎉 All {len(plan)} files committed!")
        return results

    def _ask(self, prompt: str) -> str:
        try:
            return self._input(prompt).strip().lower()
        except EOFError:
            return ""
