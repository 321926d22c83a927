"""Configuration models for the push tool."""

import fnmatch
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


DEFAULT_MESSAGE = "Update"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_WEB_URL = "https://github.com"
DEFAULT_BRANCH = "main"
DEFAULT_BASE_BRANCH = "main"
SETTINGS_FILENAME = ".apipush.yaml"


class SettingsError(Exception):
    """Raised when the settings file cannot be read."""
    pass


@dataclass
class PushOptions:
    """Options given explicitly on the command line.

    ``None`` means "not given" for every field, so that lower precedence
    sources can fill it in.
    """

    branch: str | None = None
    repo: str | None = None
    token: str | None = None
    files: str | None = None  # Comma-separated list
    message: str | None = None
    proxy: str | None = None
    create: bool | None = None
    base_branch: str | None = None
    api_url: str | None = None
    dry_run: bool = False


@dataclass
class PushSettings:
    """Project defaults read from a YAML settings file.

    The token is not a settings key; it comes from the
    command line or the environment only.
    """

    repo: str | None = None
    branch: str | None = None
    base_branch: str | None = None
    message: str | None = None
    create: bool | None = None
    proxy: str | None = None
    api_url: str | None = None
    exclude: list[str] = field(default_factory=list)  # Glob patterns to exclude

    def should_exclude(self, path: str) -> bool:
        """Check if a path matches any exclude pattern.

        Args:
            path: Relative path to check (e.g., "docs/notes.md")

        Returns:
            True if path should be excluded
        """
        for pattern in self.exclude:
            if fnmatch.fnmatch(path, pattern):
                return True
            # Also check just the name portion
            if fnmatch.fnmatch(path.split('/')[-1], pattern):
                return True
        return False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PushSettings":
        """Create from dictionary."""
        exclude = data.get("exclude") or []
        if isinstance(exclude, str):
            exclude = [exclude]

        create = data.get("create")
        return cls(
            repo=data.get("repo"),
            branch=data.get("branch"),
            base_branch=data.get("base_branch"),
            message=data.get("message"),
            create=None if create is None else bool(create),
            proxy=data.get("proxy"),
            api_url=data.get("api_url"),
            exclude=[str(p) for p in exclude],
        )

    @classmethod
    def load(cls, settings_path: Path) -> "PushSettings":
        """Load settings from YAML file."""
        try:
            with open(settings_path) as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise SettingsError(f"Cannot read settings file {settings_path}: {e}") from e
        except yaml.YAMLError as e:
            raise SettingsError(f"Invalid YAML in {settings_path}: {e}") from e

        if not isinstance(data, dict):
            raise SettingsError(f"Settings file {settings_path} must contain a mapping")

        return cls.from_dict(data)

    @classmethod
    def discover(cls, base_dir: Path, settings_path: Path | None = None) -> "PushSettings":
        """Load an explicit settings file, or the default one if present.

        An explicitly named file must exist; the default file is optional.
        """
        if settings_path is not None:
            return cls.load(settings_path)

        default_path = base_dir / SETTINGS_FILENAME
        if default_path.is_file():
            return cls.load(default_path)
        return cls()


@dataclass(frozen=True)
class PushConfig:
    """Fully resolved configuration for one run."""

    branch: str
    repo: str  # owner/name
    token: str
    files: tuple[str, ...]
    message: str = DEFAULT_MESSAGE
    create: bool = True
    dry_run: bool = False
    proxy: str | None = None
    base_branch: str = DEFAULT_BASE_BRANCH
    api_url: str = DEFAULT_API_URL
    web_url: str = DEFAULT_WEB_URL

    @property
    def browse_url(self) -> str:
        """URL to view the target branch in a browser."""
        return f"{self.web_url.rstrip('/')}/{self.repo}/tree/{self.branch}"

    def commit_message(self, path: str) -> str:
        """Commit message for uploading a single file."""
        return f"{self.message} {path}"
