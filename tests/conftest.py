"""Shared fixtures: an in-memory stand-in for the GitHub client."""

from typing import Iterator, List, Optional

import pytest

from releasenotes.exceptions import DiffFetchError
from releasenotes.types.base import CommitPage, CommitRecord, TagRecord


class FakeGitHubClient:
    """Serves commits and tags from memory with configurable page sizes."""

    def __init__(
        self,
        commits: List[CommitRecord],
        tags: Optional[List[TagRecord]] = None,
        diff: str = "",
        diff_error: Optional[DiffFetchError] = None,
        page_size: int = 2,
    ):
        self.commits = commits
        self.tags = tags or []
        self.diff = diff
        self.diff_error = diff_error
        self.page_size = page_size
        self.pages_served = 0
        self.diff_requests: List[tuple] = []

    def iter_commit_pages(self, owner: str, repo: str) -> Iterator[CommitPage]:
        for start in range(0, len(self.commits), self.page_size):
            end = start + self.page_size
            self.pages_served += 1
            next_url = f"page-{self.pages_served + 1}" if end < len(self.commits) else None
            yield CommitPage(commits=self.commits[start:end], next_url=next_url)

    def iter_tags(self, owner: str, repo: str) -> Iterator[TagRecord]:
        yield from self.tags

    def compare_diff(self, owner: str, repo: str, base: str, head: str) -> str:
        self.diff_requests.append((base, head))
        if self.diff_error:
            raise self.diff_error
        return self.diff


@pytest.fixture
def history() -> List[CommitRecord]:
    """Three commits, newest first: C3, C2, C1."""
    return [
        CommitRecord(sha="c3c3c3c3d4e5f60718293a4b5c6d7e8f90a1b2c3", message="Add feature C\n\nDetails", author_login="alice"),
        CommitRecord(sha="abc123ef99887766554433221100ffeeddccbbaa", message="Fix bug in B", author_login=None),
        CommitRecord(sha="c1c1c1c1000000000000000000000000000000aa", message="", author_login="bob"),
    ]


@pytest.fixture
def tags(history) -> List[TagRecord]:
    return [
        TagRecord(name="v1.1.0", target_sha=history[0].sha),
        TagRecord(name="v1.0.0", target_sha=history[2].sha),
    ]


@pytest.fixture
def fake_client(history, tags) -> FakeGitHubClient:
    return FakeGitHubClient(history, tags=tags, diff="diff --git a/x b/x\n+added line\n")


@pytest.fixture
def make_client():
    """Factory for clients with custom histories, tags or diff behavior."""
    return FakeGitHubClient
