"""HTTP client wrapper for the GitHub REST API."""

import base64
from dataclasses import dataclass
from typing import Any, Union

import requests

from .auth import GitHubAuth


class GitHubAPIError(Exception):
    """Exception raised when a request cannot be completed at all."""

    def __init__(self, message: str, status_code: int | None = None, response: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response = response


@dataclass(frozen=True)
class Found:
    """The requested ref or file exists; ``sha`` is its commit or blob hash."""

    sha: str


@dataclass(frozen=True)
class NotFound:
    """The requested ref or file does not exist."""


@dataclass(frozen=True)
class Written:
    """A file was created or updated."""

    sha: str
    path: str
    html_url: str = ""


@dataclass(frozen=True)
class Failure:
    """The API answered, but not with the expected result."""

    message: str
    status_code: int | None = None

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"HTTP {self.status_code}: {self.message}"


LookupResult = Union[Found, NotFound, Failure]
CreateResult = Union[Found, Failure]
WriteResult = Union[Written, Failure]


@dataclass
class ApiResponse:
    """Status code and decoded JSON body of an API call."""

    status_code: int
    data: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def message(self) -> str:
        if isinstance(self.data, dict) and self.data.get("message"):
            return str(self.data["message"])
        return "Unexpected response"

    def failure(self) -> Failure:
        return Failure(self.message, self.status_code)


class GitHubClient:
    """HTTP client for the GitHub refs and contents APIs."""

    TIMEOUT = 30

    def __init__(self, auth: GitHubAuth, session: requests.Session | None = None) -> None:
        """Initialize client with authentication.

        Args:
            auth: GitHubAuth instance
            session: requests.Session to send requests through (created if not provided)
        """
        self.auth = auth
        self.session = session or requests.Session()

    def _request(
        self,
        method: str,
        path: str,
        query_params: dict[str, str] | None = None,
        json_data: dict[str, Any] | None = None,
    ) -> ApiResponse:
        """Make an authenticated request to the GitHub API.

        HTTP error statuses are returned, not raised; callers map them to
        result types.

        Args:
            method: HTTP method
            path: API path (without base URL)
            query_params: Optional query parameters
            json_data: Optional JSON body data

        Returns:
            ApiResponse with status code and parsed JSON body

        Raises:
            GitHubAPIError: On transport errors or non-JSON bodies
        """
        headers = self.auth.get_headers(
            content_type="application/json" if json_data is not None else None,
        )
        url = self.auth.get_full_url(path, query_params)

        try:
            response = self.session.request(
                method=method,
                url=url,
                headers=headers,
                json=json_data,
                timeout=self.TIMEOUT,
            )
        except requests.RequestException as e:
            raise GitHubAPIError(f"Request failed: {e}") from e

        # Handle empty responses
        if not response.content:
            return ApiResponse(response.status_code, {})

        try:
            data = response.json()
        except ValueError as e:
            raise GitHubAPIError(
                f"API error {response.status_code}: {response.text[:500]}",
                response.status_code,
                response,
            ) from e

        return ApiResponse(response.status_code, data)

    def get(self, path: str, query_params: dict[str, str] | None = None) -> ApiResponse:
        """Make a GET request."""
        return self._request("GET", path, query_params)

    def post(self, path: str, json_data: dict[str, Any]) -> ApiResponse:
        """Make a POST request."""
        return self._request("POST", path, json_data=json_data)

    def put(self, path: str, json_data: dict[str, Any]) -> ApiResponse:
        """Make a PUT request."""
        return self._request("PUT", path, json_data=json_data)

    # -------------------------------------------------------------------------
    # Ref Operations
    # -------------------------------------------------------------------------

    def get_branch_ref(self, repo: str, branch: str) -> LookupResult:
        """Look up the commit a branch points at.

        Args:
            repo: Repository slug (owner/name)
            branch: Branch name

        Returns:
            Found with the commit sha, NotFound, or Failure
        """
        response = self.get(f"/repos/{repo}/git/ref/heads/{branch}")

        if response.status_code == 404:
            return NotFound()
        if not response.ok:
            return response.failure()

        # A prefix match returns a list of refs instead of a single object
        data = response.data
        if isinstance(data, dict):
            sha = (data.get("object") or {}).get("sha")
            if sha and data.get("ref") == f"refs/heads/{branch}":
                return Found(sha)
        return NotFound()

    def create_branch_ref(self, repo: str, branch: str, sha: str) -> CreateResult:
        """Create a branch pointing at a commit.

        Args:
            repo: Repository slug (owner/name)
            branch: New branch name
            sha: Commit the branch should point at

        Returns:
            Found with the new ref's commit sha, or Failure
        """
        response = self.post(
            f"/repos/{repo}/git/refs",
            json_data={"ref": f"refs/heads/{branch}", "sha": sha},
        )

        if response.ok and isinstance(response.data, dict) and response.data.get("ref"):
            return Found((response.data.get("object") or {}).get("sha", sha))
        return response.failure()

    # -------------------------------------------------------------------------
    # Content Operations
    # -------------------------------------------------------------------------

    def get_file(self, repo: str, path: str, ref: str) -> LookupResult:
        """Look up the blob hash of a file on a branch.

        Args:
            repo: Repository slug (owner/name)
            path: File path within the repository
            ref: Branch name

        Returns:
            Found with the blob sha, NotFound, or Failure
        """
        response = self.get(f"/repos/{repo}/contents/{path}", {"ref": ref})

        if response.status_code == 404:
            return NotFound()
        if not response.ok:
            return response.failure()

        data = response.data
        if isinstance(data, list):
            return Failure(f"{path} is a directory in the repository", response.status_code)
        if isinstance(data, dict) and data.get("sha"):
            return Found(data["sha"])
        return response.failure()

    def put_file(
        self,
        repo: str,
        path: str,
        content: bytes,
        message: str,
        branch: str,
        sha: str | None = None,
    ) -> WriteResult:
        """Create or update a file on a branch.

        Args:
            repo: Repository slug (owner/name)
            path: File path within the repository
            content: Raw file bytes
            message: Commit message
            branch: Target branch
            sha: Blob hash of the version being replaced (required for updates)

        Returns:
            Written with the new blob metadata, or Failure
        """
        body: dict[str, Any] = {
            "message": message,
            "branch": branch,
            "content": base64.b64encode(content).decode("ascii"),
        }
        if sha:
            body["sha"] = sha

        response = self.put(f"/repos/{repo}/contents/{path}", json_data=body)

        data = response.data
        if response.ok and isinstance(data, dict) and isinstance(data.get("content"), dict):
            written = data["content"]
            return Written(
                sha=written.get("sha", ""),
                path=written.get("path", path),
                html_url=written.get("html_url", ""),
            )
        return response.failure()

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()
