"""Token authentication for the GitHub REST API."""

from urllib.parse import quote, urlencode

from ..models.config import DEFAULT_API_URL


class GitHubAuth:
    """Builds authenticated request headers and URLs for the GitHub API."""

    ACCEPT = "application/vnd.github.v3+json"
    USER_AGENT = "apipush"

    def __init__(self, token: str, api_url: str | None = None) -> None:
        """Initialize authentication with credentials.

        Args:
            token: Personal access token or fine-grained token
            api_url: API root (defaults to https://api.github.com)
        """
        self.token = token
        self.api_url = (api_url or DEFAULT_API_URL).rstrip("/")

        if not self.token:
            raise ValueError(
                "Missing GitHub token. Set GITHUB_TOKEN environment variable "
                "or pass --token."
            )

    def get_headers(self, content_type: str | None = None) -> dict[str, str]:
        """Generate authentication headers for an API request.

        Args:
            content_type: Content-Type header value for requests with a body

        Returns:
            Dictionary of headers including Authorization
        """
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Accept": self.ACCEPT,
            "User-Agent": self.USER_AGENT,
        }
        if content_type:
            headers["Content-Type"] = content_type
        return headers

    def get_full_url(self, path: str, query_params: dict[str, str] | None = None) -> str:
        """Build full URL from API root, path, and query params.

        Path segments are percent-encoded; slashes are kept so that nested
        file paths and branch names such as ``feature/x`` address correctly.

        Args:
            path: API path (e.g., /repos/owner/name/contents/README.md)
            query_params: Optional query parameters

        Returns:
            Full URL string
        """
        url = f"{self.api_url}{quote(path, safe='/')}"
        if query_params:
            url += "?" + urlencode(sorted(query_params.items()))
        return url
