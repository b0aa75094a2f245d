from __future__ import annotations

import json
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from repokeeper.cli import app as cli_app
from repokeeper.cli.helpers import fail
from repokeeper.config import GIT_ENV_VAR
from repokeeper.errors import ConfigError
from tests.utils import git, requires_git

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(GIT_ENV_VAR, raising=False)


def test_help_lists_commands() -> None:
    result = runner.invoke(cli_app, ["--help"])
    assert result.exit_code == 0
    for name in ["sync", "branch", "head", "status", "diff", "author", "show", "show-deleted", "publish", "config"]:
        assert name in result.stdout


def test_config_shows_defaults() -> None:
    result = runner.invoke(cli_app, ["config"])
    assert result.exit_code == 0
    assert "git.executable" in result.stdout
    assert "defaults.rebase_on_pull" in result.stdout


def test_config_init_writes_file(tmp_path: Path) -> None:
    result = runner.invoke(cli_app, ["config", "--init"])
    assert result.exit_code == 0
    assert (tmp_path / ".repokeeper" / "config.yaml").exists()

    again = runner.invoke(cli_app, ["config", "--init"])
    assert again.exit_code == 0
    assert "already exists" in again.stdout


def test_invalid_config_is_reported(tmp_path: Path) -> None:
    bad = tmp_path / "bad.yaml"
    bad.write_text("git: nope\n", encoding="utf-8")

    result = runner.invoke(cli_app, ["--config", str(bad), "config"])

    assert result.exit_code == 1
    assert "Error" in result.output


def test_branch_outside_checkout_fails(tmp_path: Path) -> None:
    result = runner.invoke(cli_app, ["branch", "--repo", str(tmp_path / "missing")])
    assert result.exit_code == 1
    assert "Error" in result.output


@requires_git
class TestAgainstRealRepo:
    @pytest.fixture()
    def checkout(self, remote_repo: Path, tmp_path: Path) -> Path:
        result = runner.invoke(
            cli_app,
            ["sync", str(remote_repo), "--branch", "main", "--parent-dir", str(tmp_path / "work")],
        )
        assert result.exit_code == 1  # parent dir does not exist yet
        (tmp_path / "work").mkdir()
        result = runner.invoke(
            cli_app,
            ["sync", str(remote_repo), "--branch", "main", "--parent-dir", str(tmp_path / "work")],
        )
        assert result.exit_code == 0, result.output
        assert "project ready" in result.stdout
        return tmp_path / "work" / "project"

    def test_branch_and_head(self, checkout: Path) -> None:
        branch = runner.invoke(cli_app, ["branch", "--repo", str(checkout)])
        assert branch.exit_code == 0
        assert branch.stdout.strip() == "main"

        head = runner.invoke(cli_app, ["head", "--repo", str(checkout)])
        assert head.stdout.strip() == git("rev-parse", "HEAD", cwd=checkout).strip()

    def test_diff_json(self, checkout: Path) -> None:
        result = runner.invoke(cli_app, ["diff", "HEAD~1", "HEAD", "--repo", str(checkout), "--json"])
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert {"change_kind": "deleted", "path": "gone.txt"} in payload
        assert len(payload) == 3

    def test_show_deleted(self, checkout: Path) -> None:
        result = runner.invoke(cli_app, ["show-deleted", "gone.txt", "--repo", str(checkout)])
        assert result.exit_code == 0
        assert result.stdout == "old content\n"

    def test_status_clean(self, checkout: Path) -> None:
        result = runner.invoke(cli_app, ["status", "--repo", str(checkout)])
        assert result.exit_code == 0
        assert "clean" in result.stdout
        assert "not clean" not in result.stdout

    def test_publish(self, checkout: Path, remote_repo: Path) -> None:
        (checkout / "cli.txt").write_text("from cli\n", encoding="utf-8")

        result = runner.invoke(cli_app, ["publish", "cli change", "--repo", str(checkout)])

        assert result.exit_code == 0, result.output
        assert git("log", "-1", "--format=%s", "main", cwd=remote_repo).strip() == "cli change"

    def test_repo_defaults_to_current_directory(self, checkout: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(checkout)

        branch = runner.invoke(cli_app, ["branch"])
        assert branch.exit_code == 0, branch.output
        assert branch.stdout.strip() == "main"

        deleted = runner.invoke(cli_app, ["show-deleted", "gone.txt"])
        assert deleted.exit_code == 0, deleted.output
        assert deleted.stdout == "old content\n"

    def test_relative_repo_path(self, checkout: Path, tmp_path: Path) -> None:
        relative = checkout.relative_to(tmp_path)

        result = runner.invoke(cli_app, ["diff", "HEAD~1", "HEAD", "--repo", str(relative), "--json"])

        assert result.exit_code == 0, result.output
        assert len(json.loads(result.stdout)) == 3


@requires_git
def test_sync_with_relative_parent_dir(remote_repo: Path, tmp_path: Path) -> None:
    (tmp_path / "rel").mkdir()

    result = runner.invoke(cli_app, ["sync", str(remote_repo), "--branch", "main", "-d", "rel"])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "rel" / "project" / ".git").is_dir()
    assert not (tmp_path / "rel" / "rel").exists()


def test_errors_are_printed_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(typer.Exit) as exc_info:
        fail(ConfigError("broken [config]"))

    captured = capsys.readouterr()
    assert exc_info.value.exit_code == 1
    assert "broken [config]" in captured.err
    assert captured.out == ""
