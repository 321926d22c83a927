"""Resolution of the run configuration and the file set to upload.

Each field is taken from the first source that provides it, in order:
explicit options, environment, settings file, local repository, built-in
default.
"""

from typing import Iterator, Mapping

from ..models.config import (
    DEFAULT_API_URL,
    DEFAULT_BASE_BRANCH,
    DEFAULT_BRANCH,
    DEFAULT_MESSAGE,
    DEFAULT_WEB_URL,
    PushConfig,
    PushOptions,
    PushSettings,
)
from .git import LocalRepository
from .url_parser import RemoteInfo, RemoteUrlParseError, parse_remote_url, parse_repo_slug, web_url_for_api


TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")
REPO_ENV_VARS = ("GITHUB_REPOSITORY",)
API_URL_ENV_VARS = ("GITHUB_API_URL",)
PROXY_ENV_VARS = ("HTTPS_PROXY", "https_proxy", "HTTP_PROXY", "http_proxy")


class ConfigError(Exception):
    """Base class for configuration errors that abort the run."""
    pass


class MissingCredential(ConfigError):
    """No token was given and none is set in the environment."""
    pass


class MissingRepository(ConfigError):
    """The target repository could not be determined."""
    pass


class EmptyFileSet(ConfigError):
    """There are no files to upload."""
    pass


def _first(*values: str | None) -> str | None:
    """Return the first non-empty value."""
    for value in values:
        if value:
            return value
    return None


def _from_env(env: Mapping[str, str], names: tuple[str, ...]) -> str | None:
    return _first(*(env.get(name) for name in names))


def split_file_list(value: str) -> list[str]:
    """Split a comma-separated file list, dropping blank entries."""
    return [entry.strip() for entry in value.split(",") if entry.strip()]


def resolve_file_set(
    override: str | None,
    repository: LocalRepository,
    settings: PushSettings | None = None,
) -> Iterator[str]:
    """Yield the files to upload.

    An explicit list is returned as given. Otherwise every tracked file is
    yielded in index order, minus paths matching the settings exclude
    patterns. Exclude patterns match paths relative to the repository top
    level; the yielded paths are relative to the working directory.

    Args:
        override: Comma-separated file list from the command line
        repository: Local repository to enumerate
        settings: Settings carrying exclude patterns

    Yields:
        File paths relative to the working directory
    """
    if override is not None:
        yield from split_file_list(override)
        return

    for path in repository.tracked_files():
        if settings and settings.should_exclude(path):
            continue
        yield repository.work_path(path)


def _resolve_repo(
    options: PushOptions,
    env: Mapping[str, str],
    settings: PushSettings,
    remote: RemoteInfo | None,
) -> str:
    explicit = _first(options.repo, _from_env(env, REPO_ENV_VARS), settings.repo)
    if explicit:
        try:
            return parse_repo_slug(explicit)
        except RemoteUrlParseError as e:
            raise MissingRepository(f"{e}. Use --repo owner/repo") from e

    if remote is not None:
        return remote.slug

    raise MissingRepository("Could not determine repository. Use --repo owner/repo")


def _discover_remote(repository: LocalRepository, web_url: str) -> RemoteInfo | None:
    """Origin remote, if it is hosted on the server the run talks to.

    A remote on any other host is ignored so the token is never sent there.
    """
    url = repository.remote_url()
    if url is None:
        return None
    try:
        remote = parse_remote_url(url)
    except RemoteUrlParseError:
        return None
    return remote if remote.served_by(web_url) else None


def resolve_config(
    options: PushOptions,
    env: Mapping[str, str],
    repository: LocalRepository,
    settings: PushSettings | None = None,
) -> PushConfig:
    """Merge every configuration source into one immutable PushConfig.

    Args:
        options: Explicit command-line options
        env: Snapshot of the process environment
        repository: Local repository to inspect for defaults
        settings: Project settings file contents

    Returns:
        Resolved PushConfig

    Raises:
        MissingCredential: If no token is available
        MissingRepository: If the repository cannot be determined
        EmptyFileSet: If there are no files to upload
    """
    settings = settings or PushSettings()

    token = _first(options.token, _from_env(env, TOKEN_ENV_VARS))
    if not token:
        raise MissingCredential(
            "GitHub token required. Set GITHUB_TOKEN env var or use --token"
        )

    api_url = _first(options.api_url, _from_env(env, API_URL_ENV_VARS), settings.api_url)
    if api_url:
        try:
            web_url = web_url_for_api(api_url)
        except RemoteUrlParseError as e:
            raise ConfigError(str(e)) from e
    else:
        api_url, web_url = DEFAULT_API_URL, DEFAULT_WEB_URL

    remote = _discover_remote(repository, web_url)
    repo = _resolve_repo(options, env, settings, remote)

    branch = _first(options.branch, settings.branch) or repository.current_branch() or DEFAULT_BRANCH

    files = tuple(resolve_file_set(options.files, repository, settings))
    if not files:
        raise EmptyFileSet("No files to push")

    if options.create is not None:
        create = options.create
    elif settings.create is not None:
        create = settings.create
    else:
        create = True

    return PushConfig(
        branch=branch,
        repo=repo,
        token=token,
        files=files,
        message=_first(options.message, settings.message) or DEFAULT_MESSAGE,
        create=create,
        dry_run=options.dry_run,
        proxy=_first(options.proxy, _from_env(env, PROXY_ENV_VARS), settings.proxy),
        base_branch=_first(options.base_branch, settings.base_branch) or DEFAULT_BASE_BRANCH,
        api_url=api_url.rstrip("/"),
        web_url=web_url,
    )
