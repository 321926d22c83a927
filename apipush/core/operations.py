"""Branch and file upload operations against the GitHub content API."""

import os
from pathlib import Path, PurePath
from typing import Iterable

from ..models.config import PushConfig
from ..models.results import FileUploadResult, RemoteFileState, UploadStatus, UploadSummary
from .client import Failure, Found, GitHubAPIError, GitHubClient, NotFound, Written
from .report import Reporter


class BranchError(Exception):
    """Base class for errors that stop the run before any upload."""
    pass


class BranchLookupFailed(BranchError):
    """The target branch could not be queried."""
    pass


class BranchNotFound(BranchError):
    """The target branch does not exist and creation is disabled."""
    pass


class BaseBranchNotFound(BranchError):
    """The branch to create the target branch from does not exist."""
    pass


class BranchCreateFailed(BranchError):
    """The remote rejected creation of the target branch."""
    pass


def to_remote_path(path: str, base_dir: Path | None = None, repo_root: Path | None = None) -> str:
    """Map a local path to its path in the repository.

    With a repository root, the path is taken relative to base_dir and
    re-expressed relative to the root, so running from a subdirectory
    addresses the same remote file. Without one it is used as given.
    """
    if base_dir is None or repo_root is None:
        return PurePath(path).as_posix()

    local = os.path.normpath(os.path.join(os.path.realpath(base_dir), path))
    return Path(os.path.relpath(local, os.path.realpath(repo_root))).as_posix()


class PushOperations:
    """Handles branch setup and file uploads for one run."""

    def __init__(
        self,
        config: PushConfig,
        client: GitHubClient,
        reporter: Reporter | None = None,
        base_dir: Path | None = None,
        repo_root: Path | None = None,
    ) -> None:
        """Initialize push operations.

        Args:
            config: Resolved configuration
            client: GitHub API client
            reporter: Receives progress as files are processed
            base_dir: Directory file paths are relative to
            repo_root: Top level of the local repository, if known
        """
        self.config = config
        self.client = client
        self.reporter = reporter
        self.base_dir = base_dir or Path.cwd()
        self.repo_root = repo_root

    # =========================================================================
    # Branch
    # =========================================================================

    def ensure_branch(self) -> bool:
        """Make sure the target branch exists on the remote.

        Returns:
            True if the branch was created, False if it already existed

        Raises:
            BranchLookupFailed: If the branch query itself fails
            BranchNotFound: If the branch is missing and creation is disabled
            BaseBranchNotFound: If the base branch is missing
            BranchCreateFailed: If the remote rejects the new ref
        """
        repo, branch, base = self.config.repo, self.config.branch, self.config.base_branch

        current = self.client.get_branch_ref(repo, branch)
        if isinstance(current, Found):
            return False
        if isinstance(current, Failure):
            raise BranchLookupFailed(f"Could not look up branch '{branch}': {current}")

        if not self.config.create:
            raise BranchNotFound(f"Branch '{branch}' does not exist. Use --create to create it.")

        if self.reporter:
            self.reporter.branch_creating(branch, base)

        base_ref = self.client.get_branch_ref(repo, base)
        if not isinstance(base_ref, Found):
            raise BaseBranchNotFound(f"Could not find {base} branch")

        created = self.client.create_branch_ref(repo, branch, base_ref.sha)
        if isinstance(created, Failure):
            raise BranchCreateFailed(f"Failed to create branch: {created}")

        if self.reporter:
            self.reporter.branch_created(branch)
        return True

    # =========================================================================
    # Files
    # =========================================================================

    def get_remote_state(self, remote_path: str) -> RemoteFileState | Failure:
        """Fetch the current blob hash of a file on the target branch."""
        existing = self.client.get_file(self.config.repo, remote_path, self.config.branch)
        if isinstance(existing, Found):
            return RemoteFileState(remote_path, existing.sha)
        if isinstance(existing, NotFound):
            return RemoteFileState(remote_path)
        return existing

    def upload_file(self, file: str) -> FileUploadResult:
        """Create or update one file on the target branch.

        Never raises for per-file problems; they are returned as a failed
        result.

        Args:
            file: Path relative to base_dir

        Returns:
            FileUploadResult
        """
        local_path = self.base_dir / file

        if not local_path.exists():
            return FileUploadResult(file, UploadStatus.SKIPPED, "not found")
        if local_path.is_dir():
            return FileUploadResult(file, UploadStatus.SKIPPED, "is a directory")

        remote_path = to_remote_path(file, self.base_dir, self.repo_root)
        if remote_path == ".." or remote_path.startswith("../"):
            return FileUploadResult(file, UploadStatus.FAILED, "outside the repository")

        try:
            remote_path.encode("utf-8")
        except UnicodeEncodeError:
            return FileUploadResult(file, UploadStatus.FAILED, "path is not valid UTF-8")

        try:
            content = local_path.read_bytes()

            state = self.get_remote_state(remote_path)
            if isinstance(state, Failure):
                return FileUploadResult(file, UploadStatus.FAILED, str(state))

            written = self.client.put_file(
                self.config.repo,
                remote_path,
                content,
                message=self.config.commit_message(remote_path),
                branch=self.config.branch,
                sha=state.sha,
            )
        except (GitHubAPIError, OSError) as e:
            return FileUploadResult(file, UploadStatus.FAILED, str(e))

        if isinstance(written, Written):
            return FileUploadResult(file, UploadStatus.UPLOADED, created=not state.exists)
        return FileUploadResult(file, UploadStatus.FAILED, str(written))

    def push_files(self, files: Iterable[str] | None = None) -> UploadSummary:
        """Upload files one at a time.

        Args:
            files: Paths to upload (defaults to the configured file set)

        Returns:
            UploadSummary with counters and per-file results
        """
        summary = UploadSummary()

        for file in self.config.files if files is None else files:
            result = self.upload_file(file)
            summary.record(result)
            if self.reporter:
                self.reporter.file_result(result)

        return summary

    def push_all(self) -> UploadSummary:
        """Ensure the branch exists, then upload every configured file."""
        self.ensure_branch()
        return self.push_files()
