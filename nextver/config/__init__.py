"""Configuration Management Package"""

import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_API_URL = "https://api.github.com"

# Environment variables checked in order, first non-empty wins
TOKEN_ENV_VARS = ("INPUT_TOKEN", "NEXTVER_TOKEN", "GITHUB_TOKEN")
BRANCH_ENV_VARS = ("INPUT_BRANCH", "NEXTVER_BRANCH")


@dataclass
class Config:
    """User configuration with sensible defaults. The token is never stored here."""
    branch: str = "main"
    repository: Optional[str] = None  # owner/name
    api_url: str = DEFAULT_API_URL
    graphql_url: Optional[str] = None  # derived from api_url when unset
    tag_prefix: str = "v"
    per_page: int = 100
    timeout: int = 30

    def validate(self) -> list[str]:
        """Validate config values and return list of warnings.

        Invalid values are replaced with defaults after warning.
        """
        warnings = []
        defaults = Config()

        if not isinstance(self.branch, str) or not self.branch.strip():
            warnings.append(f"Invalid branch '{self.branch}', using '{defaults.branch}'")
            self.branch = defaults.branch

        if self.repository is not None and not _is_repository(self.repository):
            warnings.append(f"Invalid repository '{self.repository}', expected owner/name")
            self.repository = defaults.repository

        if not isinstance(self.api_url, str) or not self.api_url.startswith(('http://', 'https://')):
            warnings.append(f"Invalid api_url '{self.api_url}', using '{defaults.api_url}'")
            self.api_url = defaults.api_url

        if not isinstance(self.tag_prefix, str):
            warnings.append(f"Invalid tag_prefix '{self.tag_prefix}', using '{defaults.tag_prefix}'")
            self.tag_prefix = defaults.tag_prefix

        # GitHub caps compare pages at 100 commits
        if not isinstance(self.per_page, int) or not 0 < self.per_page <= 100:
            warnings.append(f"Invalid per_page '{self.per_page}', using {defaults.per_page}")
            self.per_page = defaults.per_page

        if not isinstance(self.timeout, int) or self.timeout <= 0:
            warnings.append(f"Invalid timeout '{self.timeout}', using {defaults.timeout}")
            self.timeout = defaults.timeout

        return warnings

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        config = cls(**filtered)
        for warning in config.validate():
            print(f"Config warning: {warning}", file=sys.stderr)
        return config


def _is_repository(value) -> bool:
    if not isinstance(value, str):
        return False
    owner, _, name = value.partition('/')
    return bool(owner) and bool(name) and '/' not in name


class ConfigManager:
    """Loads configuration from .nextverrc (local first, then home)."""

    CONFIG_FILENAME = ".nextverrc"

    def __init__(self):
        self._config: Optional[Config] = None
        self._config_path: Optional[Path] = None

    def load(self) -> Config:
        if self._config is not None:
            return self._config

        local_path = Path.cwd() / self.CONFIG_FILENAME
        if local_path.exists():
            self._config = self._load_from_file(local_path)
            self._config_path = local_path
            return self._config

        home_path = Path.home() / self.CONFIG_FILENAME
        if home_path.exists():
            self._config = self._load_from_file(home_path)
            self._config_path = home_path
            return self._config

        self._config = Config()
        return self._config

    def _load_from_file(self, path: Path) -> Config:
        try:
            with open(path, 'r') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            return Config.from_dict(data)
        except (json.JSONDecodeError, ValueError, IOError) as e:
            print(f"Warning: Could not load {path}: {e}", file=sys.stderr)
            return Config()

    def get_config_path(self) -> Optional[Path]:
        return self._config_path


@dataclass
class Settings:
    """Everything a run needs, after CLI > environment > config file precedence."""
    token: Optional[str]
    owner: Optional[str]
    repo: Optional[str]
    branch: str
    api_url: str
    graphql_url: Optional[str]
    tag_prefix: str
    per_page: int
    timeout: int


def _first_env(names) -> Optional[str]:
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    return None


def resolve_settings(config: Config, token=None, branch=None, repository=None,
                     api_url=None, tag_prefix=None) -> Settings:
    """Merge CLI values (may be None), environment and config file into Settings.

    Precedence: CLI args > environment variables > config file
    """
    repository = repository or os.environ.get('GITHUB_REPOSITORY') or config.repository
    owner, repo = None, None
    if repository and _is_repository(repository):
        owner, repo = repository.split('/')

    return Settings(
        token=token or _first_env(TOKEN_ENV_VARS),
        owner=owner,
        repo=repo,
        branch=branch or _first_env(BRANCH_ENV_VARS) or config.branch,
        api_url=api_url or os.environ.get('GITHUB_API_URL') or config.api_url,
        # An explicit --api-url wins over the runner's GraphQL endpoint
        graphql_url=None if api_url else (os.environ.get('GITHUB_GRAPHQL_URL') or config.graphql_url),
        tag_prefix=tag_prefix if tag_prefix is not None else config.tag_prefix,
        per_page=config.per_page,
        timeout=config.timeout,
    )


_manager = ConfigManager()


def load_config() -> Config:
    return _manager.load()


def get_config_path() -> Optional[Path]:
    return _manager.get_config_path()


__all__ = [
    "Config",
    "ConfigManager",
    "Settings",
    "load_config",
    "get_config_path",
    "resolve_settings",
    "TOKEN_ENV_VARS",
    "BRANCH_ENV_VARS",
    "DEFAULT_API_URL",
]
