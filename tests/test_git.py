import subprocess
from pathlib import Path

import pytest

from commitai.exceptions import GitError, PreconditionError
from commitai.git import ChangeStatus, FileChange, GitRepo, split_diff_by_file

COMBINED_DIFF = """\
diff --git a/a.txt b/a.txt
index 0000001..0000002 100644
--- a/a.txt
+++ b/a.txt
@@ -1 +1 @@
-old
+new
diff --git a/b/c.txt b/b/c.txt
new file mode 100644
index 0000000..0000003
--- /dev/null
+++ b/b/c.txt
@@ -0,0 +1 @@
+hello"""


def _git(cmd: list[str], cwd: Path) -> str:
    result = subprocess.run(
        ["git"] + cmd,
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def _repo_without_init(tmp_path) -> GitRepo:
    repo = object.__new__(GitRepo)
    repo.repo_path = tmp_path
    return repo


def test_split_diff_by_file_two_sections():
    sections = split_diff_by_file(COMBINED_DIFF)

    assert set(sections) == {"a.txt", "b/c.txt"}
    assert sections["a.txt"].startswith("diff --git a/a.txt b/a.txt\n")
    assert sections["b/c.txt"].startswith("diff --git a/b/c.txt b/b/c.txt\n")
    assert sections["a.txt"].endswith("+new")
    assert "+hello" not in sections["a.txt"]


def test_split_diff_sections_reassemble_combined_diff():
    sections = split_diff_by_file(COMBINED_DIFF)
    assert "\n".join(sections.values()) == COMBINED_DIFF


def test_split_diff_ignores_preamble_and_empty_input():
    assert split_diff_by_file("") == {}
    sections = split_diff_by_file("noise\n" + COMBINED_DIFF)
    assert not any(v.startswith("noise") for v in sections.values())


def test_split_diff_path_containing_b_slash_is_keyed_by_trailing_fragment():
    # Known limitation: the path is whatever follows the final " b/".
    diff = "diff --git a/x b/y.txt b/x b/y.txt\n+line"
    assert split_diff_by_file(diff) == {"y.txt": diff}


@pytest.mark.parametrize(
    "code,status",
    [
        ("A", ChangeStatus.ADDED),
        ("M", ChangeStatus.MODIFIED),
        ("D", ChangeStatus.DELETED),
        ("R100", ChangeStatus.RENAMED),
        ("C75", ChangeStatus.OTHER),
        ("T", ChangeStatus.OTHER),
    ],
)
def test_change_status_from_code(code, status):
    assert FileChange(path="f", status_code=code).status is status


def test_gitrepo_init_rejects_non_repo(monkeypatch):
    monkeypatch.setattr(GitRepo, "is_git_repo", lambda self: False)
    with pytest.raises(PreconditionError):
        GitRepo(".")


def test_run_git_command_called_process_error(monkeypatch, tmp_path):
    def fake_run(*args, **kwargs):
        raise subprocess.CalledProcessError(1, "git", stderr="bad\n")

    monkeypatch.setattr(subprocess, "run", fake_run)

    with pytest.raises(GitError) as ei:
        GitRepo._run_git_command(_repo_without_init(tmp_path), ["x"])
    assert "failed" in str(ei.value)
    assert "bad" in str(ei.value)


def test_run_git_command_file_not_found(monkeypatch, tmp_path):
    def fake_run(*args, **kwargs):
        raise FileNotFoundError()

    monkeypatch.setattr(subprocess, "run", fake_run)

    with pytest.raises(GitError) as ei:
        GitRepo._run_git_command(_repo_without_init(tmp_path), ["x"])
    assert "not found" in str(ei.value).lower()


def test_staged_changes_pairs_status_with_diff(monkeypatch, tmp_path):
    outputs = {
        ("diff", "--cached", "--name-status"): (
            "M\ta.txt\nA\tb/c.txt\nR087\told name.txt\tnew name.txt"
        ),
        ("diff", "--cached", "--unified=3"): COMBINED_DIFF,
    }
    monkeypatch.setattr(
        GitRepo, "_run_git_command", lambda self, args: outputs[tuple(args)]
    )

    changes = GitRepo.staged_changes(_repo_without_init(tmp_path))

    assert [c.path for c in changes] == ["a.txt", "b/c.txt", "new name.txt"]
    assert [c.status for c in changes] == [
        ChangeStatus.MODIFIED,
        ChangeStatus.ADDED,
        ChangeStatus.RENAMED,
    ]
    assert changes[0].diff.startswith("diff --git a/a.txt")
    assert changes[1].diff.startswith("diff --git a/b/c.txt")
    assert changes[2].diff == ""
    assert changes[2].old_path == "old name.txt"
    assert changes[0].old_path == ""


def test_staged_changes_requires_staged_files(monkeypatch, tmp_path):
    monkeypatch.setattr(GitRepo, "_run_git_command", lambda self, args: "")
    with pytest.raises(PreconditionError):
        GitRepo.staged_changes(_repo_without_init(tmp_path))


def test_staged_changes_in_real_repository(git_repo):
    (git_repo / "README.md").write_text("# demo\nmore\n")
    (git_repo / "pkg").mkdir()
    (git_repo / "pkg" / "mod.py").write_text("print('hi')\n")
    _git(["add", "-A"], git_repo)

    changes = GitRepo(str(git_repo)).staged_changes()

    by_path = {c.path: c for c in changes}
    assert set(by_path) == {"README.md", "pkg/mod.py"}
    assert by_path["README.md"].status is ChangeStatus.MODIFIED
    assert by_path["pkg/mod.py"].status is ChangeStatus.ADDED
    assert "+more" in by_path["README.md"].diff
    assert "print('hi')" in by_path["pkg/mod.py"].diff
    assert "print('hi')" not in by_path["README.md"].diff


def test_recent_commits_tags_and_log(git_repo):
    repo = GitRepo(str(git_repo))
    assert repo.latest_tag() == ""

    repo.create_tag("v0.1.0", "first")
    (git_repo / "new.txt").write_text("x\n")
    repo.stage_file("new.txt")
    repo.commit("feat: add new file")

    assert repo.latest_tag() == "v0.1.0"
    since = repo.commits_since_tag("v0.1.0")
    assert len(since) == 1 and since[0].endswith("feat: add new file")
    recent = repo.get_recent_commits(5)
    assert [line.split(" ", 1)[1] for line in recent] == [
        "feat: add new file",
        "chore: initial commit",
    ]


def test_reset_index_unstages_everything(git_repo):
    (git_repo / "one.txt").write_text("1\n")
    (git_repo / "two.txt").write_text("2\n")
    _git(["add", "-A"], git_repo)
    repo = GitRepo(str(git_repo))

    repo.reset_index()

    assert _git(["diff", "--cached", "--name-only"], git_repo) == ""


def test_repo_opened_from_subdirectory_uses_top_level(git_repo):
    (git_repo / "sub").mkdir()
    (git_repo / "sub" / "a.txt").write_text("a\n")
    _git(["add", "sub/a.txt"], git_repo)

    repo = GitRepo(str(git_repo / "sub"))

    assert repo.repo_path.resolve() == git_repo.resolve()
    assert [c.path for c in repo.staged_changes()] == ["sub/a.txt"]


def test_non_ascii_paths_are_not_quoted(git_repo):
    (git_repo / "café.txt").write_text("olá\n")
    _git(["add", "café.txt"], git_repo)

    (change,) = GitRepo(str(git_repo)).staged_changes()

    assert change.path == "café.txt"
    assert change.diff.startswith("diff --git a/café.txt b/café.txt")
    assert "+olá" in change.diff


def test_rename_records_old_path(git_repo):
    _git(["mv", "README.md", "GUIDE.md"], git_repo)

    (change,) = GitRepo(str(git_repo)).staged_changes()

    assert change.path == "GUIDE.md"
    assert change.old_path == "README.md"
    assert change.status is ChangeStatus.RENAMED
