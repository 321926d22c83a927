"""Core push functionality."""

from .auth import GitHubAuth
from .client import Failure, Found, GitHubAPIError, GitHubClient, NotFound, Written
from .git import LocalRepository
from .operations import (
    BaseBranchNotFound,
    BranchCreateFailed,
    BranchError,
    BranchLookupFailed,
    BranchNotFound,
    PushOperations,
)
from .report import Reporter
from .resolver import ConfigError, EmptyFileSet, MissingCredential, MissingRepository, resolve_config
from .transport import create_session

__all__ = [
    "BaseBranchNotFound",
    "BranchCreateFailed",
    "BranchError",
    "BranchLookupFailed",
    "BranchNotFound",
    "ConfigError",
    "EmptyFileSet",
    "Failure",
    "Found",
    "GitHubAPIError",
    "GitHubAuth",
    "GitHubClient",
    "LocalRepository",
    "MissingCredential",
    "MissingRepository",
    "NotFound",
    "PushOperations",
    "Reporter",
    "Written",
    "create_session",
    "resolve_config",
]
