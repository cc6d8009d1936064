"""Per-repository configuration with explicit versioned migrations.

Config lives at $XDG_CONFIG_HOME/bonsai/<repo-name>.toml (default
~/.config/bonsai). Example:

    version = 2

    [repo]
    path = "/Users/me/src/app"
    worktree_base = "/Users/me/src/app.worktrees"
    main_branch = "main"

    [editor]
    name = "cursor"

    [setup]
    commands = ["uv sync", "cp .env.example .env"]

    [behavior]
    navigate_after_grow = false
    post_creation_action = "nothing"

Files written before versioning have no `version` key and are treated as
version 1. Each version bump has exactly one migration function; loading a
file that needed migration writes the upgraded document back.
"""

import copy
import logging
import os
import tomllib
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import tomlkit

from bonsai.core.editor import EditorName
from bonsai.core.errors import ConfigError, ConfigNotFound

logger = logging.getLogger(__name__)

CURRENT_CONFIG_VERSION = 2
DEFAULT_MAIN_BRANCH = "main"
DEFAULT_EDITOR = EditorName.CURSOR
SECTIONS = ("repo", "editor", "setup", "behavior")


class PostCreationAction(Enum):
    OPEN_EDITOR = "open_editor"
    NOTHING = "nothing"


@dataclass(frozen=True)
class RepoSection:
    path: Path
    worktree_base: Path
    main_branch: str = DEFAULT_MAIN_BRANCH


@dataclass(frozen=True)
class EditorSection:
    name: EditorName = DEFAULT_EDITOR


@dataclass(frozen=True)
class SetupSection:
    commands: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class BehaviorSection:
    navigate_after_grow: bool = False
    post_creation_action: PostCreationAction = PostCreationAction.NOTHING


@dataclass(frozen=True)
class BonsaiConfig:
    """Immutable per-repository configuration.

    Loaded once at CLI entry point and stored in BonsaiContext.
    """

    repo: RepoSection
    editor: EditorSection = field(default_factory=EditorSection)
    setup: SetupSection = field(default_factory=SetupSection)
    behavior: BehaviorSection = field(default_factory=BehaviorSection)
    version: int = CURRENT_CONFIG_VERSION


# ============================================================================
# Migrations
# ============================================================================


def _migrate_v1_to_v2(data: dict[str, Any]) -> dict[str, Any]:
    """v1 configs predate [behavior] and stored post_creation_action as 0/1.

    Existing users keep the old behavior of opening the editor after grow.
    """
    repo = data.setdefault("repo", {})
    repo.setdefault("main_branch", DEFAULT_MAIN_BRANCH)

    editor = data.setdefault("editor", {})
    editor.setdefault("name", DEFAULT_EDITOR.value)

    setup = data.setdefault("setup", {})
    setup.setdefault("commands", [])

    behavior = data.setdefault("behavior", {})
    behavior.setdefault("navigate_after_grow", False)
    legacy_action = behavior.get("post_creation_action", 0)
    if legacy_action in (0, "0", PostCreationAction.OPEN_EDITOR.value):
        behavior["post_creation_action"] = PostCreationAction.OPEN_EDITOR.value
    else:
        behavior["post_creation_action"] = PostCreationAction.NOTHING.value

    data["version"] = 2
    return data


# Keyed by the version being migrated FROM.
MIGRATIONS: dict[int, Callable[[dict[str, Any]], dict[str, Any]]] = {
    1: _migrate_v1_to_v2,
}


def migrate_config_data(
    data: dict[str, Any], source: Path | None = None
) -> tuple[dict[str, Any], bool]:
    """Bring raw config data up to CURRENT_CONFIG_VERSION.

    Args:
        data: Parsed TOML (not mutated)
        source: Config file named in error messages

    Returns:
        Tuple of (migrated data, whether any migration ran)

    Raises:
        ConfigError: If the version is unknown or newer than supported, or a
            section is not a table
    """
    migrated = copy.deepcopy(data)
    for section in SECTIONS:
        if section in migrated:
            _table(migrated, section, source)
    version = migrated.get("version", 1)
    if not isinstance(version, int) or version < 1:
        raise ConfigError(f"Invalid config version{_where(source)}: {version!r}")
    if version > CURRENT_CONFIG_VERSION:
        raise ConfigError(
            f"Config version {version}{_where(source)} is newer than this bonsai supports "
            f"({CURRENT_CONFIG_VERSION}). Upgrade bonsai."
        )

    changed = False
    while version < CURRENT_CONFIG_VERSION:
        logger.debug("Migrating config from version %d", version)
        migrated = MIGRATIONS[version](migrated)
        version = migrated["version"]
        changed = True
    return migrated, changed


# ============================================================================
# Conversion
# ============================================================================


def _where(source: Path | None) -> str:
    return f" in {source}" if source is not None else ""


def _table(data: dict[str, Any], key: str, source: Path | None) -> dict[str, Any]:
    """Return the [key] table, creating it when absent.

    Raises:
        ConfigError: If key holds something other than a table
    """
    value = data.setdefault(key, {})
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a table{_where(source)}, got {value!r}")
    return value


def _typed(
    section: dict[str, Any], key: str, expected: type, default: Any, source: Path | None
) -> Any:
    value = section.get(key, default)
    if not isinstance(value, expected):
        raise ConfigError(
            f"'{key}' must be a {expected.__name__}{_where(source)}, got {value!r}"
        )
    return value


def resolve_worktree_base(repo_path: Path, worktree_base: Path) -> Path:
    """Anchor a relative worktree base at the repository and normalize it.

    git reports absolute worktree paths, so the base must be absolute for
    prefix comparisons and for existence checks made outside the repo.
    """
    base = worktree_base.expanduser()
    if not base.is_absolute():
        base = repo_path / base
    return Path(os.path.normpath(base))


def config_from_data(data: dict[str, Any], source: Path) -> BonsaiConfig:
    """Build a BonsaiConfig from fully migrated data.

    Raises:
        ConfigError: If required fields are missing or malformed
    """
    data = dict(data)
    repo = _table(data, "repo", source)
    repo_path = _typed(repo, "path", str, "", source)
    worktree_base = _typed(repo, "worktree_base", str, "", source)
    if not repo_path:
        raise ConfigError(f"Missing 'repo.path' in {source}")
    if not worktree_base:
        raise ConfigError(f"Missing 'repo.worktree_base' in {source}")
    main_branch = _typed(repo, "main_branch", str, DEFAULT_MAIN_BRANCH, source)

    editor_value = _table(data, "editor", source).get("name", DEFAULT_EDITOR.value)
    try:
        editor_name = EditorName(editor_value)
    except ValueError as e:
        allowed = ", ".join(name.value for name in EditorName)
        raise ConfigError(
            f"Unknown editor '{editor_value}' in {source} (allowed: {allowed})"
        ) from e

    commands = _typed(_table(data, "setup", source), "commands", list, [], source)
    if not all(isinstance(cmd, str) for cmd in commands):
        raise ConfigError(f"'commands' must be a list of strings in {source}")

    behavior = _table(data, "behavior", source)
    navigate = _typed(behavior, "navigate_after_grow", bool, False, source)
    action_value = behavior.get("post_creation_action", PostCreationAction.NOTHING.value)
    try:
        action = PostCreationAction(action_value)
    except ValueError as e:
        raise ConfigError(
            f"Unknown post_creation_action '{action_value}' in {source}"
        ) from e

    path = Path(repo_path).expanduser()
    return BonsaiConfig(
        version=data.get("version", CURRENT_CONFIG_VERSION),
        repo=RepoSection(
            path=path,
            worktree_base=resolve_worktree_base(path, Path(worktree_base)),
            main_branch=main_branch or DEFAULT_MAIN_BRANCH,
        ),
        editor=EditorSection(name=editor_name),
        setup=SetupSection(commands=list(commands)),
        behavior=BehaviorSection(navigate_after_grow=navigate, post_creation_action=action),
    )


def config_to_toml(config: BonsaiConfig) -> str:
    """Render config as TOML using tomlkit."""
    doc = tomlkit.document()
    doc.add(tomlkit.comment("bonsai configuration"))
    doc["version"] = config.version

    repo = tomlkit.table()
    repo["path"] = str(config.repo.path)
    repo["worktree_base"] = str(config.repo.worktree_base)
    repo["main_branch"] = config.repo.main_branch
    doc["repo"] = repo

    editor = tomlkit.table()
    editor["name"] = config.editor.name.value
    doc["editor"] = editor

    setup = tomlkit.table()
    setup["commands"] = list(config.setup.commands)
    doc["setup"] = setup

    behavior = tomlkit.table()
    behavior["navigate_after_grow"] = config.behavior.navigate_after_grow
    behavior["post_creation_action"] = config.behavior.post_creation_action.value
    doc["behavior"] = behavior

    return tomlkit.dumps(doc)


def parse_setup_commands(raw: str) -> list[str]:
    """Split a comma-separated list of commands, dropping blanks."""
    return [cmd.strip() for cmd in raw.split(",") if cmd.strip()]


# ============================================================================
# Storage
# ============================================================================


def default_config_dir() -> Path:
    """$XDG_CONFIG_HOME/bonsai, falling back to ~/.config/bonsai."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "bonsai"


class ConfigStore(ABC):
    """Abstract interface for per-repository config persistence.

    Enables in-memory implementations for tests without touching the
    filesystem.
    """

    @abstractmethod
    def path_for(self, repo_root: Path) -> Path:
        """Config file location for a repository (for messages and editing)."""
        ...

    @abstractmethod
    def exists(self, repo_root: Path) -> bool: ...

    @abstractmethod
    def load(self, repo_root: Path) -> BonsaiConfig:
        """Load and migrate the config for repo_root.

        Raises:
            ConfigNotFound: If no config exists
            ConfigError: If the config is malformed
        """
        ...

    @abstractmethod
    def save(self, config: BonsaiConfig) -> Path:
        """Persist config keyed by config.repo.path; returns the file path."""
        ...


class FilesystemConfigStore(ConfigStore):
    """Production implementation storing one TOML file per repository.

    A read-only store (used for --dry-run) still migrates on load but never
    writes the upgraded file back.
    """

    def __init__(self, config_dir: Path | None = None, *, read_only: bool = False) -> None:
        self._config_dir = config_dir
        self._read_only = read_only

    @property
    def config_dir(self) -> Path:
        return self._config_dir if self._config_dir is not None else default_config_dir()

    def path_for(self, repo_root: Path) -> Path:
        return self.config_dir / f"{repo_root.name}.toml"

    def exists(self, repo_root: Path) -> bool:
        return self.path_for(repo_root).exists()

    def load(self, repo_root: Path) -> BonsaiConfig:
        config_path = self.path_for(repo_root)
        if not config_path.exists():
            raise ConfigNotFound(config_path)

        try:
            data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Could not parse {config_path}: {e}") from e

        migrated, changed = migrate_config_data(data, config_path)
        config = config_from_data(migrated, config_path)
        if changed and not self._read_only:
            logger.info("Upgraded config %s to version %d", config_path, config.version)
            self._write(config_path, config)
        return config

    def save(self, config: BonsaiConfig) -> Path:
        config_path = self.path_for(config.repo.path)
        self._write(config_path, config)
        return config_path

    def _write(self, config_path: Path, config: BonsaiConfig) -> None:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(config_to_toml(config), encoding="utf-8")
