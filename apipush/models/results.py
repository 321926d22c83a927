"""Result models for upload runs."""

from dataclasses import dataclass, field


class UploadStatus:
    """Outcome of a single file upload."""

    UPLOADED = "uploaded"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class RemoteFileState:
    """Remote state of a file just before it is uploaded."""

    path: str
    sha: str | None = None  # Blob hash if the file exists on the branch

    @property
    def exists(self) -> bool:
        return self.sha is not None


@dataclass(frozen=True)
class FileUploadResult:
    """Result of uploading one file."""

    path: str
    status: str  # UploadStatus value
    detail: str | None = None
    created: bool = False  # True when the file did not exist remotely

    @property
    def uploaded(self) -> bool:
        return self.status == UploadStatus.UPLOADED

    @property
    def failed(self) -> bool:
        return self.status == UploadStatus.FAILED

    @property
    def skipped(self) -> bool:
        return self.status == UploadStatus.SKIPPED


@dataclass
class UploadSummary:
    """Running counters for an upload run."""

    uploaded: int = 0
    failed: int = 0
    skipped: int = 0
    results: list[FileUploadResult] = field(default_factory=list)

    def record(self, result: FileUploadResult) -> None:
        """Count a file result."""
        if result.uploaded:
            self.uploaded += 1
        elif result.failed:
            self.failed += 1
        else:
            self.skipped += 1
        self.results.append(result)

    @property
    def total(self) -> int:
        return self.uploaded + self.failed + self.skipped

    def summary_line(self) -> str:
        return f"{self.uploaded} uploaded, {self.failed} failed, {self.skipped} skipped"
