"""Test configuration and fixtures for list-files."""

import pytest


def pytest_addoption(parser):
    """Add custom command-line options for tests."""
    parser.addoption("--run-cli-tests", action="store_true", default=False, help="Run CLI integration tests (slow)")


@pytest.fixture(autouse=True)
def isolated_git_config(tmp_path_factory, monkeypatch):
    """Keep the user's global git configuration and excludes file out of the tests."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    return home


@pytest.fixture
def make_repository():
    """Return a function that creates the minimal .git layout the ignore evaluator looks for."""

    def create(path):
        (path / ".git" / "info").mkdir(parents=True)
        (path / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
        (path / ".git" / "config").write_text("[core]\n\trepositoryformatversion = 0\n\tbare = false\n")
        return path

    return create
