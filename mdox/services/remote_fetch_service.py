"""
Remote Fetch Service
Fetches markdown documents over HTTP(S). GitHub repository URLs are mapped to
the repository README on raw.githubusercontent.com.
"""

import logging
import re
import unicodedata

import httpx

import config
from mdox.core.models import FetchedContent
from mdox.exceptions import NetworkError, RemoteContentError
from mdox.interfaces.service_interfaces import IRemoteFetchService

logger = logging.getLogger(__name__)

GITHUB_REPO_PATTERN = re.compile(r"^https://github\.com/([^/]+)/([^/]+?)(?:\.git)?/?$")
README_BRANCHES = ("main", "master")
TEXT_CONTENT_MARKERS = ("text", "markdown", "plain")


def github_readme_urls(url: str) -> list[str]:
    """Raw README candidates for a GitHub repository URL, empty for other URLs."""
    match = GITHUB_REPO_PATTERN.match(url)
    if not match:
        return []
    user, repo = match.groups()
    return [
        f"https://raw.githubusercontent.com/{user}/{repo}/refs/heads/{branch}/README.md"
        for branch in README_BRANCHES
    ]


class HttpRemoteFetchService(IRemoteFetchService):
    """
    {
        "name": "HttpRemoteFetchService",
        "version": "1.0.0",
        "description": "httpx-based fetching of remote markdown documents.",
        "dependencies": ["httpx"],
        "interface": {
            "inputs": ["url: str"],
            "outputs": "FetchedContent(content, canonical_url)"
        }
    }
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
    ):
        self._timeout = timeout or config.REMOTE_SETTINGS["timeout_seconds"]
        self._user_agent = user_agent or config.REMOTE_SETTINGS["user_agent"]
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers={"User-Agent": self._user_agent},
                follow_redirects=True,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str) -> FetchedContent:
        candidates = github_readme_urls(url)
        if not candidates:
            return await self._fetch_text(url)

        last_error: NetworkError | None = None
        for candidate in candidates:
            try:
                fetched = await self._fetch_text(candidate)
                logger.info(f"Resolved GitHub repository {url} to {candidate}")
                return fetched
            except NetworkError as e:
                last_error = e

        raise NetworkError(
            f"Could not find README.md in main or master branch: {last_error}",
            url=url,
            status_code=last_error.status_code if last_error else None,
        )

    async def _fetch_text(self, url: str) -> FetchedContent:
        try:
            response = await self._get_client().get(url)
        except httpx.HTTPError as e:
            raise NetworkError(f"Failed to fetch URL: {e}", url=url) from e

        if not response.is_success:
            raise NetworkError(
                f"HTTP error {response.status_code}: {response.reason_phrase or 'Unknown error'}",
                url=url,
                status_code=response.status_code,
            )

        content_type = response.headers.get("content-type", "")
        if content_type and not any(marker in content_type for marker in TEXT_CONTENT_MARKERS):
            raise RemoteContentError(
                f"Invalid content type: {content_type}. Expected text/markdown or text/plain",
                url=url,
            )

        text = response.text
        if not text:
            raise RemoteContentError("File is empty", url=url)

        non_printable = sum(
            1 for c in text if unicodedata.category(c) == "Cc" and c not in "\n\r\t"
        )
        if non_printable > len(text) // 10:
            raise RemoteContentError("File appears to be binary, not a text file", url=url)

        logger.debug(f"Fetched {len(text)} chars from {response.url}")
        return FetchedContent(content=text, canonical_url=str(response.url))
