"""Reference resolution: map a tag name or SHA prefix to a commit SHA."""

from typing import Iterator, Protocol

from loguru import logger

from releasenotes.types.base import TagRecord
from releasenotes.types.resolution import PassthroughAsIs, Resolution, ResolvedFromTag


class TagSource(Protocol):
    def iter_tags(self, owner: str, repo: str) -> Iterator[TagRecord]: ...


def resolve_reference(client: TagSource, owner: str, repo: str, reference: str) -> Resolution:
    """Resolve a reference against the repository's tags.

    Every tag page is consulted before giving up. A reference that names no
    tag is passed through unchanged, to be matched later as a SHA or prefix.
    """
    for tag in client.iter_tags(owner, repo):
        if tag.name == reference:
            logger.debug(f"Reference {reference!r} is tag pointing at {tag.target_sha}")
            return ResolvedFromTag(reference=reference, sha=tag.target_sha)

    logger.debug(f"No tag named {reference!r}, treating it as a commit SHA")
    return PassthroughAsIs(reference=reference)


def resolve(client: TagSource, owner: str, repo: str, reference: str) -> str:
    """Resolve a reference to a SHA (or the unchanged input)."""
    return resolve_reference(client, owner, repo, reference).sha
