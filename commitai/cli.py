"""Command-line interface for commitai."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Callable, Optional

from . import __version__, console
from .config import COMMIT_STYLES, Config, config_file_path, load_config, save_config
from .core import CommitAIWorkflow, RunOptions
from .exceptions import CommitAIError, ConfigError, ValidationError
from .git import GitRepo
from .llm import LLMClient
from .release import ReleaseOptions, ReleaseWorkflow

LOG_LEVEL_ENV = "COMMITAI_LOG_LEVEL"

EPILOG = """\
Examples:
  commitai              # Auto-detect: single message or granular by file count
  commitai --all        # One message for all staged changes
  commitai --granular   # Separate message per file
  commitai --dry-run    # Preview messages without committing
  commitai config       # Configure API key and preferences
  commitai release      # Create a tagged release with AI-generated notes
"""


def configure_logging(debug: bool = False) -> None:
    level_name = "DEBUG" if debug else os.environ.get(LOG_LEVEL_ENV, "WARNING")
    level = getattr(logging, level_name.upper(), logging.WARNING)
    logging.basicConfig(
        level=level, format="%(levelname)s %(name)s: %(message)s", force=True
    )


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from e
    if number <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return number


class CLI:
    """argparse front-end dispatching to the commit, config and release flows."""

    def __init__(self, input_fn: Callable[[str], str] = input) -> None:
        self._input = input_fn
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="commitai",
            description="🤖 AI-powered git commit messages using Google Gemini",
            epilog=EPILOG,
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        parser.add_argument(
            "-g", "--granular", action="store_true",
            help="Generate separate commit per staged file",
        )
        parser.add_argument(
            "-a", "--all", dest="all_files", action="store_true",
            help="Generate one commit message for all staged changes",
        )
        parser.add_argument(
            "-d", "--dry-run", action="store_true",
            help="Preview commit messages without committing",
        )
        parser.add_argument(
            "-y", "--yes", action="store_true", help="Skip confirmation prompts"
        )
        parser.add_argument(
            "-l", "--lang", help="Language for messages (en, pt-br)"
        )
        parser.add_argument("--style", choices=COMMIT_STYLES, help="Commit style")
        parser.add_argument(
            "--repo-path", default=".", help="Path to the git repository"
        )
        parser.add_argument(
            "--debug", action="store_true", help="Enable debug logging"
        )

        sub = parser.add_subparsers(dest="command")

        cfg = sub.add_parser("config", help="Configure commitai settings")
        cfg.add_argument("--key", help="Gemini API key")
        cfg.add_argument(
            "--lang", dest="config_lang", help="Language (en, pt-br, es, fr, ...)"
        )
        cfg.add_argument(
            "--style", dest="config_style", choices=COMMIT_STYLES,
            help="Commit style",
        )
        cfg.add_argument("--model", help="Gemini model (e.g. gemini-2.5-flash)")
        cfg.add_argument(
            "--max-tokens", type=_positive_int, help="Max output tokens"
        )
        cfg.add_argument(
            "--show", action="store_true", help="Show current configuration"
        )

        rel = sub.add_parser(
            "release", help="Create a tagged release with AI-generated notes"
        )
        bump = rel.add_mutually_exclusive_group()
        bump.add_argument("--major", action="store_true", help="Bump major version")
        bump.add_argument("--minor", action="store_true", help="Bump minor version")
        bump.add_argument("--patch", action="store_true", help="Bump patch version")
        bump.add_argument(
            "-a", "--auto", action="store_true", help="Let AI suggest version bump"
        )
        bump.add_argument("--tag", default="", help="Use specific tag (e.g. v1.2.3)")
        # Shared with the root parser; SUPPRESS keeps a root-level value.
        rel.add_argument(
            "-d", "--dry-run", action="store_true", default=argparse.SUPPRESS,
            help="Preview without creating tag",
        )
        rel.add_argument(
            "-p", "--push", action="store_true",
            help="Push tag to origin after creation",
        )
        rel.add_argument(
            "-y", "--yes", action="store_true", default=argparse.SUPPRESS,
            help="Skip confirmation prompts",
        )

        sub.add_parser("version", help="Print commitai version")
        return parser

    def run(self, args: Optional[list[str]] = None) -> int:
        try:
            parsed = self.parser.parse_args(args)
        except SystemExit as e:
            return int(e.code or 0)

        configure_logging(parsed.debug)
        handlers = {
            None: self._run_commit,
            "config": self._run_config,
            "release": self._run_release,
            "version": self._run_version,
        }
        try:
            return handlers[parsed.command](parsed)
        except CommitAIError as e:
            console.error(f"Error: {e}")
            return 1
        except KeyboardInterrupt:
            console.warn("\nAborted.")
            return 130

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def _load_validated_config(
        self, overrides: Optional[dict] = None
    ) -> Optional[Config]:
        config = load_config(overrides=overrides)
        try:
            config.validate()
        except ConfigError as e:
            console.warn(f"⚠️  {e}")
            return None
        return config

    def _run_commit(self, parsed: argparse.Namespace) -> int:
        repo = GitRepo(parsed.repo_path)
        config = self._load_validated_config(
            overrides={"language": parsed.lang, "commit_style": parsed.style},
        )
        if config is None:
            return 0

        options = RunOptions(
            granular=parsed.granular,
            all_files=parsed.all_files,
            dry_run=parsed.dry_run,
            yes=parsed.yes,
        )
        workflow = CommitAIWorkflow(
            repo, LLMClient(config), options, input_fn=self._input
        )
        workflow.execute_workflow()
        return 0

    def _run_config(self, parsed: argparse.Namespace) -> int:
        try:
            config = load_config()
        except ConfigError as e:
            console.warn(f"⚠️  {e}; starting from defaults")
            config = Config()

        updates = {
            "gemini_api_key": parsed.key,
            "language": parsed.config_lang,
            "commit_style": parsed.config_style,
            "model": parsed.model,
            "max_tokens": parsed.max_tokens,
        }
        updates = {k: v for k, v in updates.items() if v not in (None, "")}
        if parsed.show or not updates:
            self._print_config(config)
            return 0

        for key, value in updates.items():
            setattr(config, key, value)
        labels = {
            "gemini_api_key": "API key saved",
            "language": f"Language set to: {config.language}",
            "commit_style": f"Commit style set to: {config.commit_style}",
            "model": f"Model set to: {config.model}",
            "max_tokens": f"Max tokens set to: {config.max_tokens}",
        }
        for key in updates:
            console.success(f"✅ {labels[key]}")

        try:
            path = save_config(config)
        except OSError as e:
            raise ConfigError(f"failed to save config: {e}") from e
        console.info(f"💾 Config saved to {path}")
        return 0

    def _print_config(self, config: Config) -> None:
        print()
        console.info("⚙️  commitai configuration:")
        print()
        print(f"  API Key:      {config.masked_api_key()}")
        print(f"  Language:     {config.language}")
        print(f"  Style:        {config.commit_style}")
        print(f"  Model:        {config.model}")
        print(f"  Max Tokens:   {config.max_tokens}")
        print()
        print(f"  Config file:  {config_file_path()}")
        print("  Env override: GEMINI_API_KEY")
        print()

    def _run_release(self, parsed: argparse.Namespace) -> int:
        repo = GitRepo(parsed.repo_path)
        config = self._load_validated_config()
        if config is None:
            return 0

        tag = (parsed.tag or "").strip()
        if parsed.tag and not tag.removeprefix("v"):
            raise ValidationError(f"invalid tag: {parsed.tag!r}")
        options = ReleaseOptions(
            major=parsed.major,
            minor=parsed.minor,
            patch=parsed.patch,
            auto=parsed.auto,
            tag=tag,
            dry_run=parsed.dry_run,
            push=parsed.push,
            yes=parsed.yes,
        )
        ReleaseWorkflow(
            repo, LLMClient(config), options, input_fn=self._input
        ).execute()
        return 0

    def _run_version(self, parsed: argparse.Namespace) -> int:
        print(f"commitai {__version__}")
        return 0


def main(argv: Optional[list[str]] = None) -> int:
    return CLI().run(argv)


if __name__ == "__main__":
    sys.exit(main())
