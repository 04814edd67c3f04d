"""Types describing how references were resolved and which range they span."""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class ResolvedFromTag:
    """The reference named a tag; sha is the tagged commit."""

    reference: str
    sha: str

    def describe(self) -> str:
        return f"tag {self.reference} -> {self.sha}"


@dataclass(frozen=True)
class PassthroughAsIs:
    """No tag matched; the reference is used as a SHA or SHA prefix."""

    reference: str

    @property
    def sha(self) -> str:
        return self.reference

    def describe(self) -> str:
        return f"{self.reference} (used as commit SHA)"


Resolution = Union[ResolvedFromTag, PassthroughAsIs]


@dataclass(frozen=True)
class ResolvedRange:
    """Inclusive slice of the newest-first commit list.

    Index 0 is the most recent commit, so start_index is the newer endpoint.
    """

    start_index: int
    end_index: int

    @classmethod
    def between(cls, first: int, second: int) -> "ResolvedRange":
        return cls(start_index=min(first, second), end_index=max(first, second))

    def __len__(self) -> int:
        return self.end_index - self.start_index + 1
