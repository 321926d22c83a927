"""Read-only queries against the local git working copy."""

import os
import subprocess
from functools import cached_property
from pathlib import Path
from typing import Iterator


GIT_DIR = ".git"


class LocalRepository:
    """Inspects the git repository containing a working directory.

    Every query returns ``None`` (or nothing) when git is unavailable or
    the directory is not a repository; the caller decides on defaults.
    """

    def __init__(self, work_dir: Path | None = None) -> None:
        self.work_dir = work_dir or Path.cwd()

    def _git(self, *args: str, cwd: Path | None = None) -> str | None:
        """Run a git command and return its stdout, or None on failure.

        Output is decoded with the filesystem encoding, so a path that is
        not valid UTF-8 comes back with surrogate escapes and still names
        the file on disk.
        """
        try:
            proc = subprocess.run(
                ["git", *args],
                cwd=cwd or self.work_dir,
                capture_output=True,
                check=True,
            )
        except (OSError, subprocess.CalledProcessError):
            return None
        return os.fsdecode(proc.stdout)

    @cached_property
    def top_level(self) -> Path | None:
        """Root of the working tree containing work_dir."""
        output = self._git("rev-parse", "--show-toplevel")
        if output is None:
            return None

        top = output.rstrip("\n")
        return Path(top) if top else None

    def current_branch(self) -> str | None:
        """Name of the checked-out branch (None when detached or unknown)."""
        output = self._git("rev-parse", "--abbrev-ref", "HEAD")
        if output is None:
            return None

        branch = output.strip()
        if not branch or branch == "HEAD":
            return None
        return branch

    def remote_url(self, remote: str = "origin") -> str | None:
        """URL configured for a remote."""
        output = self._git("remote", "get-url", remote)
        if output is None:
            return None
        return output.strip() or None

    def tracked_files(self) -> Iterator[str]:
        """Yield every path in the index, relative to the top level.

        The listing covers the whole repository even when work_dir is a
        subdirectory. Paths inside the ``.git`` metadata directory are never
        yielded; ``.gitignore`` and ``.github/`` are ordinary tracked files.
        """
        top = self.top_level
        if top is None:
            return

        output = self._git("ls-files", "-z", "--full-name", cwd=top)
        if output is None:
            return

        for entry in output.split("\0"):
            if not entry:
                continue
            if entry.split("/", 1)[0] == GIT_DIR:
                continue
            yield entry

    def work_path(self, repo_path: str) -> str:
        """Express a top-level-relative path relative to work_dir."""
        top = self.top_level
        if top is None:
            return repo_path

        local = os.path.join(top, repo_path)
        return Path(os.path.relpath(local, os.path.realpath(self.work_dir))).as_posix()
