"""Minimal GitHub REST API client used by the enumerator and the builder.

HTTP failures are mapped onto the sync error taxonomy:

- 401 → AuthenticationError
- 403, 429 → QuotaExceededError (with Retry-After when GitHub sends one)
- 404, 410 → ItemNotFoundError
- other statuses, timeouts and connection errors → TransientError
"""

import time
from collections.abc import Iterator
from typing import Any

import requests

from common.logger import get_logger
from sync.errors import AuthenticationError, ItemNotFoundError, QuotaExceededError, TransientError

from .rate_limiter import RateLimiter

logger = get_logger(__name__)


class GitHubClient:
    """Authenticated GitHub API client.

    Created once at startup and shared read-only by every traversal and
    build; requests.Session is safe for concurrent GETs.
    """

    DEFAULT_API_URL = "https://api.github.com"
    PAGE_SIZE = 100

    def __init__(
        self,
        user: str,
        token: str,
        api_url: str = DEFAULT_API_URL,
        requests_per_minute: int = 80,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ):
        """Initialize the client.

        Args:
            user: GitHub account name
            token: Personal access token for the account
            api_url: REST API base URL (GitHub Enterprise uses its own)
            requests_per_minute: Client-side request budget
            timeout: Per-request timeout in seconds
            session: Preconfigured session (tests)
        """
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.rate_limiter = RateLimiter(requests_per_period=requests_per_minute, period_seconds=60)
        self.session = session or requests.Session()
        self.session.auth = (user, token)
        self.session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "User-Agent": "repo-sync/0.1",
            }
        )

    def _url(self, path_or_url: str) -> str:
        if path_or_url.startswith(("http://", "https://")):
            return path_or_url
        return f"{self.api_url}/{path_or_url.lstrip('/')}"

    def _get(self, path_or_url: str, params: dict[str, Any] | None = None) -> requests.Response:
        url = self._url(path_or_url)
        self.rate_limiter.wait_if_needed()
        try:
            logger.debug(f"GET {url}")
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise TransientError(f"GitHub API timeout for {url}") from e
        except requests.exceptions.RequestException as e:
            raise TransientError(f"GitHub API request failed for {url}: {e}") from e

        self._raise_for_status(response, url)
        return response

    @staticmethod
    def _raise_for_status(response: requests.Response, url: str) -> None:
        status = response.status_code
        if status < 400:
            return
        if status == 401:
            raise AuthenticationError(f"GitHub rejected the credentials ({url})")
        if status in (403, 429):
            raise QuotaExceededError(
                f"GitHub quota exceeded ({status}) for {url}",
                retry_after=_retry_after(response),
            )
        if status in (404, 410):
            raise ItemNotFoundError(f"Not found on GitHub: {url}")
        raise TransientError(f"GitHub API error {status} for {url}")

    def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self._get(path, params).json()

    def paginate(self, path: str, params: dict[str, Any] | None = None) -> Iterator[dict[str, Any]]:
        """Yield every element of a paginated list endpoint, following Link headers."""
        query = {"per_page": self.PAGE_SIZE, **(params or {})}
        response = self._get(path, query)
        while True:
            yield from response.json()
            next_link = response.links.get("next")
            if not next_link:
                return
            # The next URL already carries the query string
            response = self._get(next_link["url"])

    def get_myself(self) -> dict[str, Any]:
        """Return the authenticated user; used to validate credentials."""
        return self.get_json("/user")

    def list_org_repositories(self, org: str) -> list[dict[str, Any]]:
        return list(self.paginate(f"/orgs/{org}/repos", {"type": "all"}))

    def get_repository(self, full_name: str) -> dict[str, Any]:
        return self.get_json(f"/repos/{full_name}")

    def list_issues(self, full_name: str) -> list[dict[str, Any]]:
        """List all issues of a repository, pull requests included."""
        return list(self.paginate(f"/repos/{full_name}/issues", {"state": "all"}))

    def get_issue(self, full_name: str, number: int) -> dict[str, Any]:
        return self.get_json(f"/repos/{full_name}/issues/{number}")

    def get_pull_request(self, full_name: str, number: int) -> dict[str, Any]:
        return self.get_json(f"/repos/{full_name}/pulls/{number}")

    def list_issue_comments(self, full_name: str, number: int) -> list[dict[str, Any]]:
        return list(self.paginate(f"/repos/{full_name}/issues/{number}/comments"))

    def get_directory(self, full_name: str, path: str = "", ref: str | None = None) -> list[dict[str, Any]]:
        """List a directory of the repository tree (metadata only, no content)."""
        params = {"ref": ref} if ref else None
        data = self.get_json(f"/repos/{full_name}/contents/{path.strip('/')}", params)
        # A file path returns a single object instead of a listing
        return data if isinstance(data, list) else [data]

    def download(self, url: str) -> bytes:
        """Download raw file content from a download_url."""
        return self._get(url).content


def _retry_after(response: requests.Response) -> float | None:
    retry_after = response.headers.get("Retry-After")
    if retry_after is not None:
        try:
            return float(retry_after)
        except ValueError:
            return None

    if response.headers.get("X-RateLimit-Remaining") == "0":
        reset = response.headers.get("X-RateLimit-Reset")
        if reset is not None:
            try:
                return max(0.0, float(reset) - time.time())
            except ValueError:
                return None
    return None
