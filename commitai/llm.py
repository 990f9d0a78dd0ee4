"""LLM integration for commitai.

One backend request is made per operation. Commit generation sends the
diffs of every staged file together and, in granular mode, asks the model
to answer with one framed record per file::

    FILE: <path>
    MESSAGE:
    <message lines>
    ---

The reply is treated as untrusted free text. Parsing is permissive line
scanning; when no record can be recovered the whole reply becomes the
message of every file rather than failing the run.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence

from .config import Config
from .git import FileChange
from .prompts import build_commit_prompt, build_release_prompt, build_version_prompt
from .providers.base import BaseDriver
from .providers.gemini_driver import GeminiDriver

ALL_FILES = "__all__"
RECORD_SEPARATOR = "---"
FILE_PREFIX = "FILE:"
MESSAGE_PREFIX = "MESSAGE:"

logger = logging.getLogger(__name__)


def parse_commit_response(
    raw: str, changes: Sequence[FileChange], granular: bool = True
) -> Dict[str, str]:
    """Turn a model reply into a mapping of path -> commit message.

    Non-granular replies map the whole trimmed text to ``ALL_FILES``.
    Paths the model invents are kept; paths it omits are left for the
    caller to default.
    """
    if not granular:
        return {ALL_FILES: raw.strip()}

    result: Dict[str, str] = {}
    for block in raw.split(RECORD_SEPARATOR):
        block = block.strip()
        if not block:
            continue
        file_path = ""
        message = ""
        in_message = False
        for line in block.split("\n"):
            if line.startswith(FILE_PREFIX):
                file_path = line[len(FILE_PREFIX):].strip()
                in_message = False
            elif line.startswith(MESSAGE_PREFIX):
                in_message = True
                rest = line[len(MESSAGE_PREFIX):].strip()
                if rest:
                    message = rest
            elif in_message:
                message = line if not message else message + "\n" + line
        if file_path and message.strip():
            result[file_path] = message.strip()

    if not result and changes:
        logger.debug(
            "Reply did not follow the FILE/MESSAGE framing; "
            "using the full reply for all %d file(s)",
            len(changes),
        )
        fallback = raw.strip()
        for change in changes:
            result[change.path] = fallback

    return result


def extract_version(raw: str) -> str:
    """First line that looks like a version, without a leading ``v``."""
    for line in raw.strip().split("\n"):
        line = line.strip()
        if line.startswith("v") or (line and line[0].isdigit()):
            return line.removeprefix("v").strip()
    return raw.strip()


class LLMClient:
    """Generates commit messages, release notes and versions via a driver."""

    def __init__(self, config: Config, driver: Optional[BaseDriver] = None) -> None:
        self.config = config
        self._driver = driver or GeminiDriver(config)

    def generate_commit_messages(
        self,
        changes: Sequence[FileChange],
        granular: bool,
        recent_commits: Sequence[str] = (),
    ) -> Dict[str, str]:
        """Build one prompt for all ``changes`` and parse the single reply."""
        prompt = build_commit_prompt(
            changes,
            granular,
            recent_commits,
            style=self.config.commit_style,
            language=self.config.language,
        )
        logger.debug(
            "Commit prompt: %d chars, %d file(s), granular=%s",
            len(prompt),
            len(changes),
            granular,
        )
        raw = self._driver.invoke(prompt)
        return parse_commit_response(raw, changes, granular)

    def generate_release_notes(
        self, commits: Sequence[str], current_tag: str, new_tag: str
    ) -> str:
        return self._driver.invoke(build_release_prompt(commits, current_tag, new_tag))

    def suggest_next_version(self, commits: Sequence[str], current_tag: str) -> str:
        raw = self._driver.invoke(build_version_prompt(commits, current_tag))
        return extract_version(raw)
