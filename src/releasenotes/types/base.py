"""Base types for GitHub records used across releasenotes."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CommitRecord(BaseModel):
    """A single commit as returned by the GitHub commits listing."""

    model_config = ConfigDict(frozen=True)

    sha: str = Field(..., description="The full commit hash")
    message: str = Field("", description="The complete commit message")
    author_login: Optional[str] = Field(None, description="GitHub login of the author, if linked")

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "CommitRecord":
        """Create a CommitRecord from a GitHub REST commit payload."""
        author = payload.get("author") or {}
        return cls(
            sha=payload["sha"],
            message=(payload.get("commit") or {}).get("message") or "",
            author_login=author.get("login"),
        )

    @property
    def summary(self) -> str:
        """First line of the commit message, or a placeholder."""
        first = self.message.split("\n", 1)[0].rstrip("\r")
        return first if first.strip() else "No message"


class TagRecord(BaseModel):
    """A repository tag and the commit it points at."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="The tag name")
    target_sha: str = Field(..., description="SHA of the tagged commit")

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "TagRecord":
        return cls(name=payload["name"], target_sha=payload["commit"]["sha"])


@dataclass
class CommitPage:
    """One page of the commit listing."""

    commits: List[CommitRecord] = field(default_factory=list)
    next_url: Optional[str] = None  # absent on the last page
