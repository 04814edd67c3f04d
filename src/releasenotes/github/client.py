"""Thin GitHub REST client covering the calls releasenotes needs."""

from typing import Any, Dict, Iterator, List, Optional

import requests
from loguru import logger
from pydantic import ValidationError

from releasenotes.exceptions import DiffFailure, DiffFetchError, GitHubApiError
from releasenotes.types.base import CommitPage, CommitRecord, TagRecord

GITHUB_API_URL = "https://api.github.com"
PER_PAGE = 100
JSON_MEDIA_TYPE = "application/vnd.github+json"
DIFF_MEDIA_TYPE = "application/vnd.github.diff"


class GitHubClient:
    """Authenticated, sequential access to the GitHub REST API.

    Requests are issued one at a time with the library's default timeouts.
    Listings are paginated with a fixed page size and follow the ``next``
    relation of the ``Link`` header until it is absent.
    """

    def __init__(self, token: str, base_url: str = GITHUB_API_URL, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": JSON_MEDIA_TYPE,
                "X-GitHub-Api-Version": "2022-11-28",
            }
        )

    def _repo_url(self, owner: str, repo: str, path: str) -> str:
        return f"{self.base_url}/repos/{owner}/{repo}/{path}"

    def _get_json_page(self, url: str, params: Optional[Dict[str, Any]]) -> requests.Response:
        logger.debug(f"GET {url}")
        try:
            response = self.session.get(url, params=params)
            response.raise_for_status()
        except requests.RequestException as e:
            raise GitHubApiError(f"Request to {url} failed: {e}") from e
        return response

    def _iter_pages(self, url: str) -> Iterator[tuple[List[Dict[str, Any]], Optional[str]]]:
        params: Optional[Dict[str, Any]] = {"per_page": PER_PAGE}
        next_url: Optional[str] = url
        while next_url:
            response = self._get_json_page(next_url, params)
            # the next link already carries the query string
            params = None
            try:
                items = response.json()
            except ValueError as e:
                raise GitHubApiError(f"Malformed JSON from {next_url}: {e}") from e
            if not isinstance(items, list):
                raise GitHubApiError(f"Expected a list from {next_url}, got {type(items).__name__}")
            next_url = response.links.get("next", {}).get("url")
            yield items, next_url

    def iter_commit_pages(self, owner: str, repo: str) -> Iterator[CommitPage]:
        """Yield the repository's commits page by page, newest first."""
        for items, next_url in self._iter_pages(self._repo_url(owner, repo, "commits")):
            try:
                commits = [CommitRecord.from_api(item) for item in items]
            except (KeyError, TypeError, AttributeError, ValidationError) as e:
                raise GitHubApiError(f"Malformed commit payload for {owner}/{repo}: {e}") from e
            logger.debug(f"Fetched page of {len(commits)} commits for {owner}/{repo}")
            yield CommitPage(commits=commits, next_url=next_url)

    def iter_tags(self, owner: str, repo: str) -> Iterator[TagRecord]:
        """Yield every tag of the repository, following pagination."""
        for items, _ in self._iter_pages(self._repo_url(owner, repo, "tags")):
            try:
                tags = [TagRecord.from_api(item) for item in items]
            except (KeyError, TypeError, ValidationError) as e:
                raise GitHubApiError(f"Malformed tag payload for {owner}/{repo}: {e}") from e
            yield from tags

    def compare_diff(self, owner: str, repo: str, base: str, head: str) -> str:
        """Return the unified diff for ``base...head``.

        Raises DiffFetchError classified as launch, status or decode failure.
        """
        url = self._repo_url(owner, repo, f"compare/{base}...{head}")
        logger.debug(f"GET {url} as diff")
        try:
            response = self.session.get(url, headers={"Accept": DIFF_MEDIA_TYPE})
        except requests.RequestException as e:
            raise DiffFetchError(DiffFailure.LAUNCH, str(e)) from e

        if not response.ok:
            raise DiffFetchError(DiffFailure.STATUS, f"HTTP {response.status_code} from {url}")

        try:
            return response.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DiffFetchError(DiffFailure.DECODE, f"diff is not valid UTF-8 text ({e.reason})") from e
