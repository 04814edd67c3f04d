"""Release Notes Node drafting prose release notes with LangChain and Groq."""

from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

from langchain_core.prompts import ChatPromptTemplate
from langchain_groq import ChatGroq
from loguru import logger

from releasenotes.exceptions import CompletionError, ConfigurationError, ReleaseNotesError
from releasenotes.types.state import AgentState

# Both parts are passed as variables so braces in a diff are never parsed
RELEASE_NOTES_PROMPT = ChatPromptTemplate.from_messages(
    [
        ("system", "{system_prompt}"),
        ("human", "{commit_summary}"),
    ]
)


def read_system_prompt(path: Path) -> str:
    """Read the system prompt template; a missing file is a configuration error."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read system prompt file {path}: {e}") from e


def build_prompt_body(lines: List[str]) -> str:
    return "\n".join(lines)


def save_prompt_body(body: str, output_file: str) -> None:
    """Persist the raw commit/diff text that will be sent to the model."""
    path = Path(output_file)
    try:
        path.write_text(body, encoding="utf-8")
    except OSError as e:
        raise ReleaseNotesError(f"Failed to write {path}: {e}") from e
    logger.info(f"Commit summary saved to: {path}")


def response_text(response: Any) -> str:
    """Text of a completion response; anything missing becomes an empty string."""
    content = getattr(response, "content", None)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(part.get("text", "") if isinstance(part, dict) else str(part) for part in content)
    return ""


class ReleaseNotesComposer:
    """Turns commit range lines into generated release notes."""

    def __init__(self, llm: Any, system_prompt: str):
        self.system_prompt = system_prompt
        self.chain = RELEASE_NOTES_PROMPT | llm

    def compose(self, lines: List[str], output_file: Optional[str] = None) -> str:
        body = build_prompt_body(lines)
        if output_file:
            save_prompt_body(body, output_file)

        logger.info("Requesting release notes from completion service")
        try:
            response = self.chain.invoke({"system_prompt": self.system_prompt, "commit_summary": body})
        except Exception as e:
            raise CompletionError(f"Completion request failed: {e}") from e
        return response_text(response)

    def run(self, state: AgentState) -> AgentState:
        """Execute the release notes generation."""
        logger.info("Executing Release Notes Node")
        try:
            notes = self.compose(state.get("commit_lines", []), state.get("output_file"))
        except ReleaseNotesError as e:
            logger.error(f"Error in Release Notes Node: {e}")
            errors = state.get("errors", [])
            errors.append({"node": "release_notes", "error": str(e), "timestamp": datetime.now()})
            return {**state, "errors": errors}

        return {**state, "prompt_body": build_prompt_body(state.get("commit_lines", [])), "release_notes": notes}


def load_release_notes_composer(groq_api_key: str, model: str, system_prompt_path: Path) -> ReleaseNotesComposer:
    """Factory function to create a composer backed by ChatGroq."""
    system_prompt = read_system_prompt(system_prompt_path)
    llm = ChatGroq(groq_api_key=groq_api_key, model=model)
    return ReleaseNotesComposer(llm, system_prompt)
