"""
Commit range extraction between two references.

The full newest-first commit history is paged into memory, both references
are located by exact or prefix match, and the inclusive range between them is
rendered as display lines followed by a truncated compare diff.
"""

from datetime import datetime
from typing import Iterator, List, Optional, Protocol

from loguru import logger

from releasenotes.exceptions import DiffFetchError, ReleaseNotesError
from releasenotes.nodes.reference_resolver import TagSource, resolve_reference
from releasenotes.types.base import CommitPage, CommitRecord
from releasenotes.types.resolution import Resolution, ResolvedRange
from releasenotes.types.state import AgentState

NOT_FOUND_MESSAGE = "Could not find one or both of the specified commit references."
DIFF_LINE_LIMIT = 50


class RepositorySource(TagSource, Protocol):
    def iter_commit_pages(self, owner: str, repo: str) -> Iterator[CommitPage]: ...

    def compare_diff(self, owner: str, repo: str, base: str, head: str) -> str: ...


def matches_reference(commit: CommitRecord, reference: str) -> bool:
    """Exact or prefix match of a commit SHA against a reference."""
    return commit.sha == reference or commit.sha.startswith(reference)


class LazyCommitSequence:
    """Newest-first commit list fetched page by page on demand.

    Pages are appended to an in-memory list as they are pulled. ``index_of``
    searches what is loaded and only fetches further pages while the
    reference is still missing.
    """

    def __init__(self, pages: Iterator[CommitPage]):
        self._pages = iter(pages)
        self._commits: List[CommitRecord] = []
        self._exhausted = False

    def _fetch_next_page(self) -> bool:
        if self._exhausted:
            return False
        page = next(self._pages, None)
        if page is None:
            self._exhausted = True
            return False
        self._commits.extend(page.commits)
        if page.next_url is None:
            self._exhausted = True
        return True

    def materialize(self) -> "LazyCommitSequence":
        """Fetch every remaining page."""
        while self._fetch_next_page():
            pass
        logger.debug(f"Materialized {len(self._commits)} commits")
        return self

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def index_of(self, reference: str) -> Optional[int]:
        """Position of the first commit matching ``reference``, paging as needed."""
        position = 0
        while True:
            for index in range(position, len(self._commits)):
                if matches_reference(self._commits[index], reference):
                    return index
            position = len(self._commits)
            if not self._fetch_next_page():
                return None

    def count_matches(self, reference: str) -> int:
        """Number of loaded commits matching ``reference``."""
        return sum(1 for commit in self._commits if matches_reference(commit, reference))

    def __getitem__(self, index):
        return self._commits[index]

    def __len__(self) -> int:
        return len(self._commits)


def format_commit_line(commit: CommitRecord) -> str:
    author = commit.author_login or "Unknown"
    return f"- {commit.sha} by {author} : {commit.summary}"


def truncate_diff(diff: str, limit: int = DIFF_LINE_LIMIT) -> List[str]:
    """Keep at most ``limit`` diff lines, plus a summary of what was omitted."""
    lines = diff.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    if len(lines) <= limit:
        return lines
    omitted = len(lines) - limit
    return lines[:limit] + [f"... ({omitted} more lines in diff)"]


def _warn_if_ambiguous(commits: LazyCommitSequence, reference: str) -> None:
    matches = commits.count_matches(reference)
    if matches > 1:
        logger.warning(f"Reference {reference!r} matches {matches} commits, using the most recent one")


def extract_range(
    client: RepositorySource,
    owner: str,
    repo: str,
    from_ref: str,
    to_ref: str,
    from_resolution: Optional[Resolution] = None,
    to_resolution: Optional[Resolution] = None,
) -> List[str]:
    """List the commits between two references, followed by their diff.

    The whole commit history is loaded before searching. An unmatched
    reference yields the single not-found line. Diff failures are reported
    as a line in place of the diff.
    """
    from_resolution = from_resolution or resolve_reference(client, owner, repo, from_ref)
    to_resolution = to_resolution or resolve_reference(client, owner, repo, to_ref)
    from_sha, to_sha = from_resolution.sha, to_resolution.sha

    commits = LazyCommitSequence(client.iter_commit_pages(owner, repo)).materialize()
    logger.info(f"Fetched {len(commits)} commits from {owner}/{repo}")

    from_index = commits.index_of(from_sha)
    to_index = commits.index_of(to_sha)
    if from_index is None or to_index is None:
        logger.info(f"Could not locate {from_ref!r} (index {from_index}) or {to_ref!r} (index {to_index})")
        return [NOT_FOUND_MESSAGE]

    _warn_if_ambiguous(commits, from_sha)
    _warn_if_ambiguous(commits, to_sha)

    commit_range = ResolvedRange.between(from_index, to_index)
    logger.debug(f"Range spans {len(commit_range)} commits ({commit_range.start_index}..{commit_range.end_index})")
    result = [f"Commits between {from_ref} ({from_sha}) and {to_ref} ({to_sha}):"]
    for index in range(commit_range.start_index, commit_range.end_index + 1):
        result.append(format_commit_line(commits[index]))

    base = commits[commit_range.end_index].sha
    head = commits[commit_range.start_index].sha
    try:
        diff = client.compare_diff(owner, repo, base, head)
    except DiffFetchError as e:
        logger.warning(f"Diff fetch for {base}...{head} failed: {e}")
        result.append(f"Failed to fetch diff: {e}")
        return result

    result.append(f"Diff between {base} and {head}:")
    result.extend(truncate_diff(diff))
    return result


class CommitRangeNode:
    """Workflow node resolving both references and extracting the range."""

    def __init__(self, client: RepositorySource):
        self.client = client

    def run(self, state: AgentState) -> AgentState:
        logger.info("Executing Commit Range Node")
        owner, repo = state["owner"], state["repo"]
        try:
            from_resolution = resolve_reference(self.client, owner, repo, state["from_ref"])
            to_resolution = resolve_reference(self.client, owner, repo, state["to_ref"])
            logger.info(f"From: {from_resolution.describe()}")
            logger.info(f"To: {to_resolution.describe()}")
            lines = extract_range(
                self.client,
                owner,
                repo,
                state["from_ref"],
                state["to_ref"],
                from_resolution=from_resolution,
                to_resolution=to_resolution,
            )
        except ReleaseNotesError as e:
            logger.error(f"Error in Commit Range Node: {e}")
            errors = state.get("errors", [])
            errors.append({"node": "commit_range", "error": str(e), "timestamp": datetime.now()})
            return {**state, "errors": errors}

        return {
            **state,
            "from_resolution": from_resolution,
            "to_resolution": to_resolution,
            "commit_lines": lines,
        }


def load_commit_range_node(client: RepositorySource) -> CommitRangeNode:
    """Factory function to create a configured CommitRangeNode."""
    return CommitRangeNode(client)
