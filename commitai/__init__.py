"""commitai - AI-generated git commit messages and release notes."""

from importlib import import_module
from typing import TYPE_CHECKING

__version__ = "0.1.0"

# Public API (lazy-exported to avoid import-time side effects)
__all__ = [
    # Config
    "Config", "load_config",
    # Git
    "GitRepo", "FileChange", "split_diff_by_file",
    # LLM
    "LLMClient", "parse_commit_response",
    # Workflows
    "CommitAIWorkflow", "RunOptions", "ReleaseWorkflow", "ReleaseOptions",
    # Exceptions
    "CommitAIError", "GitError", "PreconditionError", "ConfigError",
    "LLMError", "TransportError", "ProtocolError", "BackendError",
    "EmptyResponseError",
]


def __getattr__(name: str):
    """Lazy attribute loader so ``import commitai`` stays cheap.

    Importing the package must not pull in httpx or touch the user's
    configuration until a symbol is actually used.
    """
    mapping = {
        "Config": ("commitai.config", "Config"),
        "load_config": ("commitai.config", "load_config"),
        "GitRepo": ("commitai.git", "GitRepo"),
        "FileChange": ("commitai.git", "FileChange"),
        "split_diff_by_file": ("commitai.git", "split_diff_by_file"),
        "LLMClient": ("commitai.llm", "LLMClient"),
        "parse_commit_response": ("commitai.llm", "parse_commit_response"),
        "CommitAIWorkflow": ("commitai.core", "CommitAIWorkflow"),
        "RunOptions": ("commitai.core", "RunOptions"),
        "ReleaseWorkflow": ("commitai.release", "ReleaseWorkflow"),
        "ReleaseOptions": ("commitai.release", "ReleaseOptions"),
    }
    exceptions = {
        "CommitAIError", "GitError", "PreconditionError", "ConfigError",
        "LLMError", "TransportError", "ProtocolError", "BackendError",
        "EmptyResponseError",
    }
    if name in exceptions:
        mapping[name] = ("commitai.exceptions", name)
    if name in mapping:
        mod_name, attr = mapping[name]
        mod = import_module(mod_name)
        value = getattr(mod, attr)
        globals()[name] = value  # cache for future access
        return value
    raise AttributeError(f"module 'commitai' has no attribute {name!r}")


if TYPE_CHECKING:
    from .config import Config, load_config
    from .core import CommitAIWorkflow, RunOptions
    from .exceptions import (
        BackendError,
        CommitAIError,
        ConfigError,
        EmptyResponseError,
        GitError,
        LLMError,
        PreconditionError,
        ProtocolError,
        TransportError,
    )
    from .git import FileChange, GitRepo, split_diff_by_file
    from .llm import LLMClient, parse_commit_response
    from .release import ReleaseOptions, ReleaseWorkflow
