"""Tests for branch setup and file upload operations."""

import os
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from apipush.core.client import Failure, Found, GitHubAPIError, GitHubClient, NotFound, Written
from apipush.core.operations import (
    BaseBranchNotFound,
    BranchCreateFailed,
    BranchLookupFailed,
    BranchNotFound,
    PushOperations,
    to_remote_path,
)
from apipush.core.report import Reporter
from apipush.models.config import PushConfig
from apipush.models.results import UploadStatus


def _config(files: tuple[str, ...] = ("a.txt",), create: bool = True) -> PushConfig:
    return PushConfig(
        branch="feature/x",
        repo="octo/demo",
        token="ghp_test",
        files=files,
        message="Update",
        create=create,
    )


@pytest.fixture
def client() -> MagicMock:
    return MagicMock(spec=GitHubClient)


class TestEnsureBranch:
    """Tests for the branch-ensure protocol."""

    def test_existing_branch(self, client: MagicMock) -> None:
        client.get_branch_ref.return_value = Found("c0ffee")
        ops = PushOperations(_config(), client)

        assert ops.ensure_branch() is False
        client.create_branch_ref.assert_not_called()

    def test_missing_branch_creation_disabled(self, client: MagicMock) -> None:
        client.get_branch_ref.return_value = NotFound()
        ops = PushOperations(_config(create=False), client)

        with pytest.raises(BranchNotFound, match="--create"):
            ops.ensure_branch()
        client.create_branch_ref.assert_not_called()

    def test_missing_branch_created_from_base(self, client: MagicMock) -> None:
        client.get_branch_ref.side_effect = [NotFound(), Found("base-sha")]
        client.create_branch_ref.return_value = Found("base-sha")
        reporter = MagicMock(spec=Reporter)
        ops = PushOperations(_config(), client, reporter=reporter)

        assert ops.ensure_branch() is True

        assert client.get_branch_ref.call_args_list[1].args == ("octo/demo", "main")
        client.create_branch_ref.assert_called_once_with("octo/demo", "feature/x", "base-sha")
        reporter.branch_creating.assert_called_once_with("feature/x", "main")
        reporter.branch_created.assert_called_once_with("feature/x")

    def test_base_branch_missing(self, client: MagicMock) -> None:
        client.get_branch_ref.side_effect = [NotFound(), NotFound()]
        ops = PushOperations(_config(), client)

        with pytest.raises(BaseBranchNotFound, match="main"):
            ops.ensure_branch()
        client.create_branch_ref.assert_not_called()

    def test_base_branch_lookup_failure(self, client: MagicMock) -> None:
        client.get_branch_ref.side_effect = [NotFound(), Failure("Server Error", 500)]
        ops = PushOperations(_config(), client)

        with pytest.raises(BaseBranchNotFound):
            ops.ensure_branch()

    def test_create_rejected(self, client: MagicMock) -> None:
        client.get_branch_ref.side_effect = [NotFound(), Found("base-sha")]
        client.create_branch_ref.return_value = Failure("Resource not accessible by integration", 403)
        ops = PushOperations(_config(), client)

        with pytest.raises(BranchCreateFailed, match="Resource not accessible"):
            ops.ensure_branch()

    def test_lookup_failure_is_not_absence(self, client: MagicMock) -> None:
        client.get_branch_ref.return_value = Failure("Bad credentials", 401)
        ops = PushOperations(_config(), client)

        with pytest.raises(BranchLookupFailed, match="HTTP 401: Bad credentials"):
            ops.ensure_branch()
        client.create_branch_ref.assert_not_called()


class TestUploadFile:
    """Tests for single file uploads."""

    def test_create_new_file(self, client: MagicMock, tmp_path: Path) -> None:
        (tmp_path / "a.txt").write_bytes(b"hello")
        client.get_file.return_value = NotFound()
        client.put_file.return_value = Written("blob1", "a.txt")
        ops = PushOperations(_config(), client, base_dir=tmp_path)

        result = ops.upload_file("a.txt")

        assert result.status == UploadStatus.UPLOADED
        assert result.created is True
        client.get_file.assert_called_once_with("octo/demo", "a.txt", "feature/x")
        client.put_file.assert_called_once_with(
            "octo/demo",
            "a.txt",
            b"hello",
            message="Update a.txt",
            branch="feature/x",
            sha=None,
        )

    def test_update_existing_file(self, client: MagicMock, tmp_path: Path) -> None:
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "app.py").write_bytes(b"print()")
        client.get_file.return_value = Found("old-blob")
        client.put_file.return_value = Written("new-blob", "src/app.py")
        ops = PushOperations(_config(), client, base_dir=tmp_path)

        result = ops.upload_file("src/app.py")

        assert result.uploaded
        assert result.created is False
        assert client.put_file.call_args.kwargs["sha"] == "old-blob"

    def test_binary_content(self, client: MagicMock, tmp_path: Path) -> None:
        payload = bytes(range(256))
        (tmp_path / "logo.png").write_bytes(payload)
        client.get_file.return_value = NotFound()
        client.put_file.return_value = Written("blob", "logo.png")
        ops = PushOperations(_config(), client, base_dir=tmp_path)

        ops.upload_file("logo.png")

        assert client.put_file.call_args.args[2] == payload

    def test_missing_local_file_skipped(self, client: MagicMock, tmp_path: Path) -> None:
        ops = PushOperations(_config(), client, base_dir=tmp_path)

        result = ops.upload_file("missing.txt")

        assert result.status == UploadStatus.SKIPPED
        assert result.detail == "not found"
        client.get_file.assert_not_called()
        client.put_file.assert_not_called()

    def test_directory_skipped(self, client: MagicMock, tmp_path: Path) -> None:
        (tmp_path / "vendor").mkdir()
        ops = PushOperations(_config(), client, base_dir=tmp_path)

        result = ops.upload_file("vendor")

        assert result.skipped
        client.get_file.assert_not_called()

    def test_rejected_update_fails(self, client: MagicMock, tmp_path: Path) -> None:
        (tmp_path / "a.txt").write_bytes(b"x")
        client.get_file.return_value = Found("stale")
        client.put_file.return_value = Failure("a.txt does not match stale", 409)
        ops = PushOperations(_config(), client, base_dir=tmp_path)

        result = ops.upload_file("a.txt")

        assert result.status == UploadStatus.FAILED
        assert result.detail == "HTTP 409: a.txt does not match stale"

    def test_remote_lookup_failure(self, client: MagicMock, tmp_path: Path) -> None:
        (tmp_path / "a.txt").write_bytes(b"x")
        client.get_file.return_value = Failure("API rate limit exceeded", 403)
        ops = PushOperations(_config(), client, base_dir=tmp_path)

        result = ops.upload_file("a.txt")

        assert result.failed
        assert "rate limit" in (result.detail or "")
        client.put_file.assert_not_called()

    def test_transport_error_fails(self, client: MagicMock, tmp_path: Path) -> None:
        (tmp_path / "a.txt").write_bytes(b"x")
        client.get_file.side_effect = GitHubAPIError("Request failed: timed out")
        ops = PushOperations(_config(), client, base_dir=tmp_path)

        result = ops.upload_file("a.txt")

        assert result.failed
        assert result.detail == "Request failed: timed out"

    def test_to_remote_path(self) -> None:
        assert to_remote_path("./docs/a.md") == "docs/a.md"
        assert to_remote_path("a.txt") == "a.txt"

    def test_to_remote_path_from_subdirectory(self, tmp_path: Path) -> None:
        sub = tmp_path / "sub"

        assert to_remote_path("x.py", sub, tmp_path) == "sub/x.py"
        assert to_remote_path("../README.md", sub, tmp_path) == "README.md"
        assert to_remote_path("./docs/a.md", tmp_path, tmp_path) == "docs/a.md"

    def test_upload_from_subdirectory(self, client: MagicMock, tmp_path: Path) -> None:
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "x.py").write_bytes(b"print()")
        client.get_file.return_value = NotFound()
        client.put_file.return_value = Written("blob", "sub/x.py")
        ops = PushOperations(_config(("x.py",)), client, base_dir=tmp_path / "sub", repo_root=tmp_path)

        result = ops.upload_file("x.py")

        assert result.uploaded
        assert result.path == "x.py"
        client.get_file.assert_called_once_with("octo/demo", "sub/x.py", "feature/x")
        assert client.put_file.call_args.args[1] == "sub/x.py"
        assert client.put_file.call_args.kwargs["message"] == "Update sub/x.py"

    def test_path_outside_repository_fails(self, client: MagicMock, tmp_path: Path) -> None:
        (tmp_path / "repo").mkdir()
        (tmp_path / "outside.txt").write_bytes(b"x")
        ops = PushOperations(_config(), client, base_dir=tmp_path / "repo", repo_root=tmp_path / "repo")

        result = ops.upload_file("../outside.txt")

        assert result.failed
        assert result.detail == "outside the repository"
        client.get_file.assert_not_called()

    @pytest.mark.skipif(sys.platform != "linux", reason="needs byte file names")
    def test_non_utf8_path_fails(self, client: MagicMock, tmp_path: Path) -> None:
        name = os.fsdecode(b"caf\xe9.txt")
        (tmp_path / name).write_bytes(b"x")
        ops = PushOperations(_config((name,)), client, base_dir=tmp_path)

        result = ops.upload_file(name)

        assert result.failed
        assert result.detail == "path is not valid UTF-8"
        client.get_file.assert_not_called()


class TestPushFiles:
    """Tests for the sequential upload loop."""

    def test_failure_does_not_stop_later_files(self, client: MagicMock, tmp_path: Path) -> None:
        for name in ("a.txt", "b.txt", "c.txt"):
            (tmp_path / name).write_bytes(name.encode())
        client.get_file.side_effect = [Found("sha-a"), NotFound(), NotFound()]
        client.put_file.side_effect = [
            Failure("Unexpected response", 200),
            GitHubAPIError("Request failed: reset"),
            Written("sha-c", "c.txt"),
        ]
        reporter = MagicMock(spec=Reporter)
        ops = PushOperations(_config(("a.txt", "b.txt", "c.txt")), client, reporter=reporter, base_dir=tmp_path)

        summary = ops.push_files()

        assert (summary.uploaded, summary.failed, summary.skipped) == (1, 2, 0)
        assert [r.status for r in summary.results] == [
            UploadStatus.FAILED,
            UploadStatus.FAILED,
            UploadStatus.UPLOADED,
        ]
        assert reporter.file_result.call_count == 3

    def test_push_all_scenario(self, client: MagicMock, tmp_path: Path) -> None:
        (tmp_path / "a.txt").write_bytes(b"alpha")
        client.get_branch_ref.return_value = Found("head")
        client.get_file.return_value = NotFound()
        client.put_file.return_value = Written("blob", "a.txt")
        ops = PushOperations(_config(("a.txt", "missing.txt")), client, base_dir=tmp_path)

        summary = ops.push_all()

        assert (summary.uploaded, summary.failed, summary.skipped) == (1, 0, 1)
        assert summary.summary_line() == "1 uploaded, 0 failed, 1 skipped"
        client.get_file.assert_called_once_with("octo/demo", "a.txt", "feature/x")
        assert "sha" not in client.put_file.call_args.kwargs or client.put_file.call_args.kwargs["sha"] is None

    def test_branch_failure_prevents_uploads(self, client: MagicMock, tmp_path: Path) -> None:
        (tmp_path / "a.txt").write_bytes(b"alpha")
        client.get_branch_ref.return_value = NotFound()
        ops = PushOperations(_config(create=False), client, base_dir=tmp_path)

        with pytest.raises(BranchNotFound):
            ops.push_all()
        client.get_file.assert_not_called()
        client.put_file.assert_not_called()
