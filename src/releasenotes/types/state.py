"""State management types for the releasenotes workflow."""

from typing import Any, Dict, List, Optional, TypedDict

from .resolution import Resolution


class AgentState(TypedDict, total=False):
    """
    Shared state passed between workflow nodes.
    Each node adds or modifies specific fields.
    """

    # Inputs
    owner: str
    repo: str
    from_ref: str
    to_ref: str
    output_file: Optional[str]

    # Commit Range Node Output
    from_resolution: Resolution
    to_resolution: Resolution
    commit_lines: List[str]

    # Release Notes Node Output
    prompt_body: str
    release_notes: str

    # Global State
    errors: List[Dict[str, Any]]
