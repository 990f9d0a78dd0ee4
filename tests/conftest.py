import subprocess
from collections.abc import Generator
from pathlib import Path

import pytest

from commitai.config import Config


@pytest.fixture(autouse=True)
def isolate_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Generator[None, None, None]:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("COMMITAI_MODEL", raising=False)
    monkeypatch.delenv("COMMITAI_LOG_LEVEL", raising=False)
    monkeypatch.setenv("COMMITAI_CONFIG_HOME", str(tmp_path / "config-home"))
    monkeypatch.setenv("NO_COLOR", "1")
    yield


# No test may reach the real Gemini endpoint. Tests that exercise the
# driver install their own fake with monkeypatch.setattr(httpx, "post", ...).
@pytest.fixture(autouse=True)
def _block_network(monkeypatch):
    import httpx

    def fake_post(url, *args, **kwargs):  # noqa: D401
        raise AssertionError(f"unexpected network call to {url}")

    monkeypatch.setattr(httpx, "post", fake_post)


@pytest.fixture
def config() -> Config:
    return Config(gemini_api_key="test-key", max_tokens=256, model="gemini-test")


def git(cmd: list[str], cwd: Path) -> str:
    result = subprocess.run(
        ["git"] + cmd,
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """An initialised repository with one commit on its default branch."""
    repo = tmp_path / "repo"
    repo.mkdir()
    git(["init", "-q"], repo)
    git(["config", "user.name", "Test"], repo)
    git(["config", "user.email", "test@example.com"], repo)
    git(["config", "commit.gpgsign", "false"], repo)
    git(["config", "tag.gpgsign", "false"], repo)
    (repo / "README.md").write_text("# demo\n")
    git(["add", "README.md"], repo)
    git(["commit", "-q", "-m", "chore: initial commit"], repo)
    return repo
