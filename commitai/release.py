"""Release workflow: pick the next version, write notes, create the tag."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from . import console
from .exceptions import CommitAIError, GitError, LLMError
from .git import GitRepo
from .llm import LLMClient

FIRST_VERSION = "0.1.0"

logger = logging.getLogger(__name__)

_LEADING_DIGITS = re.compile(r"^\d+")


@dataclass
class ReleaseOptions:
    """Per-invocation options of the release command."""

    major: bool = False
    minor: bool = False
    patch: bool = False
    auto: bool = False
    tag: str = ""
    dry_run: bool = False
    push: bool = False
    yes: bool = False


def _version_part(text: str) -> int:
    match = _LEADING_DIGITS.match(text.strip())
    return int(match.group()) if match else 0


def bump_version(
    current_tag: str, major: bool = False, minor: bool = False, patch: bool = False
) -> str:
    """Return the next semver string (without ``v``) for ``current_tag``.

    Major takes precedence over minor; anything else bumps the patch level.
    """
    tag = current_tag.removeprefix("v")
    if not tag:
        return FIRST_VERSION

    parts = tag.split(".")
    while len(parts) < 3:
        parts.append("0")
    maj, min_, pat = (_version_part(p) for p in parts[:3])

    if major:
        maj, min_, pat = maj + 1, 0, 0
    elif minor:
        min_, pat = min_ + 1, 0
    else:
        pat += 1
    return f"{maj}.{min_}.{pat}"


def release_notes_path(repo_path: Path, tag: str) -> Path:
    return repo_path / f"RELEASE-{tag}.md"


class ReleaseWorkflow:
    """Create an annotated tag with AI-generated release notes."""

    def __init__(
        self,
        git_repo: GitRepo,
        llm_client: LLMClient,
        options: Optional[ReleaseOptions] = None,
        input_fn: Callable[[str], str] = input,
    ) -> None:
        self.git_repo = git_repo
        self.llm_client = llm_client
        self.options = options or ReleaseOptions()
        self._input = input_fn

    def next_version(self, commits: list[str], current_tag: str) -> str:
        opts = self.options
        if opts.tag:
            return opts.tag.removeprefix("v")
        if opts.auto:
            console.info("\n🤖 Asking AI to suggest version bump...")
            try:
                return self.llm_client.suggest_next_version(commits, current_tag)
            except LLMError as e:
                raise CommitAIError(f"AI version suggestion failed: {e}") from e
        return bump_version(current_tag, opts.major, opts.minor, opts.patch)

    def execute(self) -> Optional[str]:
        """Run the release flow; returns the created tag or None."""
        current_tag = self.git_repo.latest_tag()
        console.info(f"📦 Current version: {current_tag or 'none'}")

        commits = self.git_repo.commits_since_tag(current_tag)
        if not commits:
            console.warn("No commits since last tag. Nothing to release.")
            return None
        console.info(f"📝 {len(commits)} commit(s) since last tag")

        new_tag = "v" + self.next_version(commits, current_tag)
        console.info(f"🏷️  New version: {new_tag}")

        console.info("\n✨ Generating release notes with Gemini...")
        try:
            notes = self.llm_client.generate_release_notes(
                commits, current_tag, new_tag
            )
        except LLMError as e:
            raise CommitAIError(f"failed to generate release notes: {e}") from e

        print()
        console.success("📋 Release Notes:")
        console.boxed(notes)

        if self.options.dry_run:
            console.warn("\n🔍 Dry run: no tag was created.")
            return None

        if not self.options.yes:
            try:
                answer = self._input(f"\n⚡ Create tag {new_tag}? [Y/n]: ")
            except EOFError:
                answer = ""
            if answer.strip().lower() in {"n", "no"}:
                console.warn("Release cancelled.")
                return None

        try:
            self.git_repo.create_tag(new_tag, notes)
        except GitError as e:
            raise CommitAIError(f"failed to create tag: {e}") from e
        console.success(f"\n✅ Tag {new_tag} created!")

        notes_file = release_notes_path(self.git_repo.repo_path, new_tag)
        try:
            notes_file.write_text(notes)
            console.info(f"📄 Release notes saved to {notes_file.name}")
        except OSError as e:
            console.warn(f"⚠️  Could not save release notes to {notes_file}: {e}")

        if self.options.push:
            console.info("\n📤 Pushing tag to origin...")
            try:
                self.git_repo.push_tag(new_tag)
            except GitError as e:
                raise CommitAIError(f"failed to push tag: {e}") from e
            console.success("✅ Tag pushed to origin!")

        return new_tag
