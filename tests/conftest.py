from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from tests.utils import ScriptedRunner, git


@pytest.fixture()
def fake_runner() -> ScriptedRunner:
    return ScriptedRunner()


@pytest.fixture(name="_git_env")
def git_env_fixture(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate git from the user's configuration and locale."""
    gitconfig = tmp_path / "gitconfig"
    gitconfig.write_text(
        "[user]\n"
        "\tname = Repo Keeper\n"
        "\temail = keeper@example.com\n"
        "[commit]\n"
        "\tgpgsign = false\n"
        "[init]\n"
        "\tdefaultBranch = main\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(gitconfig))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Repo Keeper")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "keeper@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Repo Keeper")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "keeper@example.com")
    monkeypatch.setenv("LC_ALL", "C")
    monkeypatch.setenv("LANGUAGE", "C")


@pytest.fixture()
def remote_repo(tmp_path: Path, _git_env: None) -> Iterator[Path]:
    """Bare repository ``project.git`` on branch ``main`` with two commits.

    First commit adds ``keep.txt`` and ``gone.txt``; the second modifies
    ``keep.txt``, adds ``new.txt`` and deletes ``gone.txt``.
    """
    bare = tmp_path / "remotes" / "project.git"
    bare.mkdir(parents=True)
    git("init", "--bare", cwd=bare)
    git("symbolic-ref", "HEAD", "refs/heads/main", cwd=bare)

    seed = tmp_path / "seed"
    seed.mkdir()
    git("init", cwd=seed)
    git("symbolic-ref", "HEAD", "refs/heads/main", cwd=seed)
    (seed / "keep.txt").write_text("v1\n", encoding="utf-8")
    (seed / "gone.txt").write_text("old content\n", encoding="utf-8")
    git("add", ".", cwd=seed)
    git("commit", "-m", "initial", cwd=seed)

    (seed / "keep.txt").write_text("v2\n", encoding="utf-8")
    (seed / "new.txt").write_text("fresh\n", encoding="utf-8")
    (seed / "gone.txt").unlink()
    git("add", "-A", cwd=seed)
    git("commit", "-m", "second", cwd=seed)

    git("remote", "add", "origin", str(bare), cwd=seed)
    git("push", "origin", "main", cwd=seed)
    git("branch", "develop", cwd=seed)
    git("push", "origin", "develop", cwd=seed)
    yield bare
