import copy
import os
from unittest.mock import patch

import pytest

from list_files.exceptions import IgnoreEvaluationError, RepositoryNotFoundError, RepositoryOpenError
from list_files.git_ignore.ignore_evaluator import GitIgnoreEvaluator


@pytest.fixture
def repo(tmp_path, make_repository):
    root = make_repository(tmp_path / "repo")
    (root / ".gitignore").write_text("*.log\n!important.log\nbuild/\n/top.txt\n")
    (root / "debug.log").touch()
    (root / "important.log").touch()
    (root / "main.py").touch()
    (root / "top.txt").touch()
    (root / "build").mkdir()
    (root / "build" / "output.o").touch()
    (root / "src").mkdir()
    (root / "src" / "top.txt").touch()
    (root / "src" / "build").touch()  # a file, not a directory
    return root


@pytest.mark.parametrize(
    "relative_path,expected",
    [
        ("debug.log", True),
        ("important.log", False),
        ("main.py", False),
        ("top.txt", True),
        ("src/top.txt", False),
        ("build", True),
        ("build/output.o", True),
        ("src/build", False),
        ("src", False),
        (".gitignore", False),
    ],
)
def test_is_ignored(repo, relative_path, expected):
    with GitIgnoreEvaluator(repo) as evaluator:
        assert evaluator.is_ignored(repo / relative_path) == expected, f"Failed for path: {relative_path}"


def test_git_directory_is_always_ignored(repo):
    with GitIgnoreEvaluator(repo) as evaluator:
        assert evaluator.is_ignored(repo / ".git")
        assert evaluator.is_ignored(repo / ".git" / "HEAD")


def test_work_tree_root_is_never_ignored(repo):
    (repo / ".gitignore").write_text("*\n")
    with GitIgnoreEvaluator(repo) as evaluator:
        assert not evaluator.is_ignored(repo)
        assert evaluator.is_ignored(repo / "main.py")


def test_nested_gitignore_overrides_parent(repo):
    (repo / "logs").mkdir()
    (repo / "logs" / ".gitignore").write_text("!keep.log\n")
    (repo / "logs" / "keep.log").touch()
    (repo / "logs" / "drop.log").touch()
    with GitIgnoreEvaluator(repo) as evaluator:
        assert not evaluator.is_ignored(repo / "logs" / "keep.log")
        assert evaluator.is_ignored(repo / "logs" / "drop.log")


def test_nested_gitignore_patterns_are_relative_to_their_directory(repo):
    (repo / "src" / ".gitignore").write_text("/generated.py\n")
    (repo / "src" / "generated.py").touch()
    (repo / "src" / "pkg").mkdir()
    (repo / "src" / "pkg" / "generated.py").touch()
    (repo / "generated.py").touch()
    with GitIgnoreEvaluator(repo) as evaluator:
        assert evaluator.is_ignored(repo / "src" / "generated.py")
        assert not evaluator.is_ignored(repo / "src" / "pkg" / "generated.py")
        assert not evaluator.is_ignored(repo / "generated.py")


def test_cannot_reinclude_inside_ignored_directory(repo):
    (repo / ".gitignore").write_text("build/\n!build/keep.txt\n")
    (repo / "build" / "keep.txt").touch()
    with GitIgnoreEvaluator(repo) as evaluator:
        assert evaluator.is_ignored(repo / "build" / "keep.txt")


def test_info_exclude_is_honored(repo):
    (repo / ".git" / "info" / "exclude").write_text("main.py\n")
    with GitIgnoreEvaluator(repo) as evaluator:
        assert evaluator.is_ignored(repo / "main.py")


def test_gitignore_overrides_info_exclude(repo):
    (repo / ".git" / "info" / "exclude").write_text("main.py\n")
    (repo / ".gitignore").write_text("!main.py\n")
    with GitIgnoreEvaluator(repo) as evaluator:
        assert not evaluator.is_ignored(repo / "main.py")


def test_xdg_global_excludes_file(repo, isolated_git_config):
    global_ignore = isolated_git_config / ".config" / "git" / "ignore"
    global_ignore.parent.mkdir(parents=True)
    global_ignore.write_text("*.py\n")
    with GitIgnoreEvaluator(repo) as evaluator:
        assert evaluator.is_ignored(repo / "main.py")


def test_core_excludes_file_from_repository_config(repo, tmp_path):
    excludes = tmp_path / "my-excludes"
    excludes.write_text("main.py\n")
    with open(repo / ".git" / "config", "a") as f:
        f.write(f"\texcludesFile = {excludes}\n")
    with GitIgnoreEvaluator(repo) as evaluator:
        assert evaluator.is_ignored(repo / "main.py")


def test_core_excludes_file_from_user_config(repo, isolated_git_config):
    (isolated_git_config / "excludes").write_text("main.py\n")
    (isolated_git_config / ".gitconfig").write_text('[user]\n\tname = Someone\n[core]\n\texcludesfile = "~/excludes"\n')
    with GitIgnoreEvaluator(repo) as evaluator:
        assert evaluator.is_ignored(repo / "main.py")


def test_opening_from_subdirectory_finds_top_of_work_tree(repo):
    with GitIgnoreEvaluator(repo / "src") as evaluator:
        assert evaluator.location.work_tree == repo.resolve()
        assert evaluator.is_ignored(repo / "debug.log")


def test_open_classmethod(repo):
    evaluator = GitIgnoreEvaluator.open(repo)
    try:
        assert evaluator.is_ignored(repo / "debug.log")
    finally:
        evaluator.close()


def test_no_repository(tmp_path):
    (tmp_path / "plain").mkdir()
    with pytest.raises(RepositoryNotFoundError):
        GitIgnoreEvaluator(tmp_path / "plain")


def test_missing_root_fails_to_open(tmp_path):
    with pytest.raises(RepositoryOpenError):
        GitIgnoreEvaluator(tmp_path / "missing")


def test_unreadable_exclude_file_fails_to_open(repo):
    with patch("list_files.git_ignore.ignore_evaluator._load_spec", side_effect=PermissionError("denied")):
        with pytest.raises(RepositoryOpenError):
            GitIgnoreEvaluator(repo)


def test_failed_open_releases_evaluator(repo):
    with patch("list_files.git_ignore.ignore_evaluator._load_spec", side_effect=PermissionError("denied")):
        with patch.object(GitIgnoreEvaluator, "close", autospec=True) as mock_close:
            with pytest.raises(RepositoryOpenError):
                GitIgnoreEvaluator(repo)
    mock_close.assert_called_once()


def test_path_outside_work_tree(repo, tmp_path):
    outside = tmp_path / "outside.txt"
    outside.touch()
    with GitIgnoreEvaluator(repo) as evaluator:
        with pytest.raises(IgnoreEvaluationError, match="outside the repository"):
            evaluator.is_ignored(outside)


def test_missing_path_fails_evaluation(repo):
    with GitIgnoreEvaluator(repo) as evaluator:
        with pytest.raises(IgnoreEvaluationError):
            evaluator.is_ignored(repo / "does-not-exist.txt")


def test_unreadable_gitignore_fails_evaluation(repo):
    (repo / "src" / ".gitignore").mkdir()  # reading a directory raises an OSError
    with GitIgnoreEvaluator(repo) as evaluator:
        with pytest.raises(IgnoreEvaluationError):
            evaluator.is_ignored(repo / "src" / "top.txt")


def test_close_is_idempotent_and_blocks_queries(repo):
    evaluator = GitIgnoreEvaluator(repo)
    evaluator.close()
    evaluator.close()
    assert evaluator.closed
    with pytest.raises(IgnoreEvaluationError, match="closed"):
        evaluator.is_ignored(repo / "main.py")


def test_context_manager_closes_on_error(repo):
    with pytest.raises(ValueError):
        with GitIgnoreEvaluator(repo) as evaluator:
            raise ValueError("boom")
    assert evaluator.closed


def test_evaluator_cannot_be_copied(repo):
    with GitIgnoreEvaluator(repo) as evaluator:
        with pytest.raises(TypeError):
            copy.copy(evaluator)
        with pytest.raises(TypeError):
            copy.deepcopy(evaluator)


def test_paths_through_symlinked_directory(repo, tmp_path):
    link = tmp_path / "link-to-repo"
    try:
        os.symlink(repo, link)
    except (OSError, NotImplementedError):
        pytest.skip("Symlinks not supported on this platform")

    with GitIgnoreEvaluator(link) as evaluator:
        assert evaluator.is_ignored(link / "debug.log")
        assert not evaluator.is_ignored(link / "main.py")


def test_symlink_entry_is_judged_by_its_own_location(repo, tmp_path):
    target = tmp_path / "elsewhere.log"
    target.touch()
    try:
        os.symlink(target, repo / "linked.txt")
    except (OSError, NotImplementedError):
        pytest.skip("Symlinks not supported on this platform")

    with GitIgnoreEvaluator(repo) as evaluator:
        # The target lies outside the work tree and matches *.log, but neither matters
        assert not evaluator.is_ignored(repo / "linked.txt")


def test_symlink_outside_leading_into_work_tree(repo, tmp_path):
    link = tmp_path / "build-link"
    try:
        os.symlink(repo / "build", link)
    except (OSError, NotImplementedError):
        pytest.skip("Symlinks not supported on this platform")

    with GitIgnoreEvaluator(repo) as evaluator:
        assert evaluator.is_ignored(link)


@pytest.mark.parametrize(
    "rules,directories,expected",
    [
        # Allow-list: ignore everything, then re-include directories and Python files
        (
            "*\n!*/\n!*.py\n",
            ["src"],
            {"src": False, "src/a.txt": True, "src/b.py": False, "top.txt": True, "top.py": False},
        ),
        # Re-including one directory below an ignored level
        (
            "dir/*\n!dir/sub/\n",
            ["dir", "dir/sub", "dir/other"],
            {
                "dir": False,
                "dir/sub": False,
                "dir/sub/x.txt": False,
                "dir/other": True,
                "dir/other/y.txt": True,
                "dir/z.txt": True,
            },
        ),
        # A re-included directory does not re-include the files matched inside it
        (
            "*\n!docs\n",
            ["docs"],
            {"docs": False, "docs/readme.md": True},
        ),
        # Directory-only negation leaves a file of the same name ignored
        (
            "*.d\n!keep.d/\n",
            ["keep.d", "src"],
            {"keep.d": False, "keep.d/a.txt": False, "src/keep.d": True, "other.d": True},
        ),
    ],
)
def test_negated_patterns_match_git(tmp_path, make_repository, rules, directories, expected):
    root = make_repository(tmp_path / "repo")
    (root / ".gitignore").write_text(rules)
    for directory in directories:
        (root / directory).mkdir(parents=True)
    for relative_path in expected:
        path = root / relative_path
        if not path.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()

    with GitIgnoreEvaluator(root) as evaluator:
        results = {relative_path: evaluator.is_ignored(root / relative_path) for relative_path in expected}
    assert results == expected


def test_missing_home_directory_fails_to_open(repo, monkeypatch):
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    with patch("list_files.git_ignore.ignore_evaluator.Path.home", side_effect=RuntimeError("no home")):
        with pytest.raises(RepositoryOpenError, match="home directory"):
            GitIgnoreEvaluator(repo)
