"""Prompt templates sent to the language model."""

from __future__ import annotations

from typing import Sequence

from .git import FileChange

GRANULAR_DIFF_LIMIT = 3000
SINGLE_DIFF_LIMIT = 2000
TRUNCATION_MARKER = "\n... (truncated)"

COMMIT_TYPES = (
    "feat",
    "fix",
    "docs",
    "style",
    "refactor",
    "test",
    "chore",
    "perf",
    "ci",
    "build",
)
PORTUGUESE_CODES = {"pt", "pt-br"}

RECORD_FORMAT = "FILE: <filepath>\nMESSAGE:\n<commit message>\n---\n"


def truncate_diff(diff: str, limit: int) -> str:
    """Hard character cutoff; may cut mid-line."""
    if len(diff) > limit:
        return diff[:limit] + TRUNCATION_MARKER
    return diff


def language_directive(language: str) -> str:
    if (language or "").strip().lower() in PORTUGUESE_CODES:
        return "Write commit messages in Portuguese (pt-BR)."
    return "Write commit messages in English."


def build_commit_prompt(
    changes: Sequence[FileChange],
    granular: bool,
    recent_commits: Sequence[str] = (),
    style: str = "conventional",
    language: str = "en",
) -> str:
    """Render the commit-message prompt for one backend call."""
    parts = ["You are an expert developer writing git commit messages.", ""]

    if style == "conventional":
        parts.extend(
            [
                "Use Conventional Commits format: <type>(<scope>): <description>",
                "Types: " + ", ".join(COMMIT_TYPES),
                "",
            ]
        )

    parts.extend([language_directive(language), ""])

    if recent_commits:
        parts.append("Recent commits for context:")
        parts.extend(f"  {commit}" for commit in recent_commits)
        parts.append("")

    if granular:
        parts.extend(
            [
                f"I have {len(changes)} staged file(s). "
                "Generate ONE commit message per file.",
                "Rules:",
                "- Each message must be concise (max 72 chars for subject line)",
                "- Add a blank line then a short body if needed",
                "- Use the format below for EVERY file",
                "- Output format must be EXACTLY:",
                "",
                RECORD_FORMAT,
                "Now here are the diffs:",
                "",
            ]
        )
        for change in changes:
            parts.append(f"FILE: {change.path} (status: {change.status_code})")
            if change.diff:
                parts.extend(
                    [
                        "DIFF:",
                        "```",
                        truncate_diff(change.diff, GRANULAR_DIFF_LIMIT),
                        "```",
                    ]
                )
            parts.append("")
    else:
        parts.extend(
            [
                "Generate ONE single commit message that summarizes ALL the "
                "following staged changes.",
                "Rules:",
                "- Subject line: max 72 chars",
                "- Add a blank line then bullet points listing key changes "
                "if there are multiple files",
                "- Output ONLY the commit message, nothing else.",
                "",
                "Staged changes:",
                "",
            ]
        )
        for change in changes:
            parts.append(f"FILE: {change.path} (status: {change.status_code})")
            if change.diff:
                parts.extend(
                    ["```", truncate_diff(change.diff, SINGLE_DIFF_LIMIT), "```"]
                )
            parts.append("")

    return "\n".join(parts)


def build_release_prompt(
    commits: Sequence[str], current_tag: str, new_tag: str
) -> str:
    header = f"Generate release notes for version {new_tag}"
    if current_tag:
        header += f" (previous: {current_tag})"
    parts = [
        "You are a developer writing GitHub release notes.",
        "",
        header + ".",
        "",
        "Rules:",
        "- Use markdown",
        "- Group into sections: ## 🚀 Features, ## 🐛 Bug Fixes, "
        "## 🔧 Improvements, ## 📚 Docs (omit empty sections)",
        "- Be concise and user-friendly",
        "- Start with a one-sentence summary",
        "- Output ONLY the release notes markdown",
        "",
        "Commits since last release:",
    ]
    parts.extend(f"- {commit}" for commit in commits)
    return "\n".join(parts) + "\n"


def build_version_prompt(commits: Sequence[str], current_tag: str) -> str:
    current = current_tag or "none (first release)"
    parts = [
        "You are a versioning expert using Semantic Versioning (semver).",
        "",
        f"Current version: {current}",
        "",
        "Based on these commits, suggest the next version number.",
        "Rules:",
        "- MAJOR: breaking changes (feat! or BREAKING CHANGE)",
        "- MINOR: new features (feat:)",
        "- PATCH: fixes and other changes",
        "- If no current version, suggest 0.1.0",
        "- Output ONLY the version number (e.g. 1.2.3), no 'v' prefix, "
        "no explanation",
        "",
        "Commits:",
    ]
    parts.extend(f"- {commit}" for commit in commits)
    return "\n".join(parts) + "\n"
