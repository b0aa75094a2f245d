"""Repokeeper configuration stored in .repokeeper/config.yaml."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from ruamel.yaml import YAML

from .errors import ConfigError
from .runner import SubprocessRunner
from .types import RepoOptions

logger = logging.getLogger(__name__)

GIT_ENV_VAR = "REPOKEEPER_GIT"
CONFIG_DIRNAME = ".repokeeper"
CONFIG_FILENAME = "config.yaml"


@dataclass
class RepoKeeperConfig:
    """Resolved configuration.

    Attributes:
        git_executable: Tool invoked for every command
        git_timeout: Seconds before an invocation is abandoned; None waits forever
        rebase_on_pull: Default for ``RepoOptions.rebase_on_pull``
        parent_dir: Default parent directory for ``sync``
    """

    git_executable: str = "git"
    git_timeout: float | None = None
    rebase_on_pull: bool = False
    parent_dir: Path | None = None

    def make_runner(self) -> SubprocessRunner:
        return SubprocessRunner(executable=self.git_executable, timeout=self.git_timeout)

    def options(self, clone_dir: str = "", rebase_on_pull: bool | None = None) -> RepoOptions:
        """Build :class:`RepoOptions`, letting explicit arguments win over config."""
        if rebase_on_pull is None:
            rebase_on_pull = self.rebase_on_pull
        return RepoOptions(rebase_on_pull=rebase_on_pull, clone_dir=clone_dir)

    def to_dict(self) -> dict[str, object]:
        return {
            "git": {
                "executable": self.git_executable,
                "timeout": self.git_timeout,
            },
            "defaults": {
                "rebase_on_pull": self.rebase_on_pull,
                "parent_dir": str(self.parent_dir) if self.parent_dir else None,
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, object] | None) -> "RepoKeeperConfig":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError("Top-level configuration must be a mapping")

        git = _section(data, "git")
        defaults = _section(data, "defaults")

        executable = git.get("executable", "git")
        if not isinstance(executable, str) or not executable.strip():
            raise ConfigError("git.executable must be a non-empty string")

        timeout = git.get("timeout")
        if timeout is not None:
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
                raise ConfigError("git.timeout must be a positive number or null")
            timeout = float(timeout)

        rebase = defaults.get("rebase_on_pull", False)
        if not isinstance(rebase, bool):
            raise ConfigError("defaults.rebase_on_pull must be true or false")

        parent_dir = defaults.get("parent_dir")
        if parent_dir is not None and not isinstance(parent_dir, str):
            raise ConfigError("defaults.parent_dir must be a string or null")

        return cls(
            git_executable=executable.strip(),
            git_timeout=timeout,
            rebase_on_pull=rebase,
            parent_dir=Path(parent_dir).expanduser() if parent_dir else None,
        )


def _section(data: dict, key: str) -> dict:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' section must be a mapping")
    return value


def default_config_path(base_dir: Path | None = None) -> Path:
    return (base_dir or Path.cwd()) / CONFIG_DIRNAME / CONFIG_FILENAME


def load_config(config_path: Path | None = None) -> RepoKeeperConfig:
    """Load configuration from *config_path* (default: ./.repokeeper/config.yaml).

    A missing file yields defaults. ``REPOKEEPER_GIT`` overrides the
    configured executable.
    """
    path = config_path or default_config_path()

    if path.exists():
        yaml = YAML(typ="safe")
        try:
            with path.open("r", encoding="utf-8") as handle:
                payload = yaml.load(handle)
        except Exception as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
        config = RepoKeeperConfig.from_dict(payload)
        logger.debug("Loaded config from %s", path)
    else:
        if config_path is not None:
            raise ConfigError(f"Config file not found: {path}")
        config = RepoKeeperConfig()

    override = os.environ.get(GIT_ENV_VAR, "").strip()
    if override:
        config.git_executable = override
    return config


def save_config(config: RepoKeeperConfig, config_path: Path | None = None) -> Path:
    """Write *config* to *config_path*, creating the directory if needed."""
    path = config_path or default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    yaml = YAML()
    with path.open("w", encoding="utf-8") as handle:
        yaml.dump(config.to_dict(), handle)

    logger.info("Saved config to %s", path)
    return path


__all__ = [
    "GIT_ENV_VAR",
    "RepoKeeperConfig",
    "default_config_path",
    "load_config",
    "save_config",
]
