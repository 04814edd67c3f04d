"""Environment-driven configuration for the releasenotes CLI."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from releasenotes.exceptions import ConfigurationError

GITHUB_TOKEN_VAR = "GH_PAT"
GROQ_API_KEY_VAR = "GROQ_API_KEY"
GROQ_MODEL_VAR = "GROQ_MODEL"
SYSTEM_PROMPT_VAR = "RELEASE_NOTES_SYSTEM_PROMPT"
DEFAULT_SYSTEM_PROMPT_PATH = "prompts/system_prompt.txt"


@dataclass
class Settings:
    """Credentials and paths for a single CLI invocation."""

    github_token: str
    groq_api_key: Optional[str] = None
    model: Optional[str] = None
    system_prompt_path: Path = Path(DEFAULT_SYSTEM_PROMPT_PATH)


def _require(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ConfigurationError(f"{name} environment variable is not set")
    return value


def load_settings(require_completion: bool = False) -> Settings:
    """Load settings from the environment (and a .env file, if present).

    The GitHub token is always required. Completion credentials and the
    system prompt file are only checked when ``require_completion`` is set.
    """
    load_dotenv()

    settings = Settings(
        github_token=_require(GITHUB_TOKEN_VAR),
        system_prompt_path=Path(os.getenv(SYSTEM_PROMPT_VAR) or DEFAULT_SYSTEM_PROMPT_PATH),
    )
    if require_completion:
        settings.groq_api_key = _require(GROQ_API_KEY_VAR)
        settings.model = _require(GROQ_MODEL_VAR)
        if not settings.system_prompt_path.is_file():
            raise ConfigurationError(f"System prompt file not found: {settings.system_prompt_path}")
    return settings
