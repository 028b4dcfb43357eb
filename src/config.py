"""Runtime settings read from the environment."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from src.infrastructure.github_client import DEFAULT_BASE_URL

DEFAULT_SEARCH_QUERY = "stars:>100"
DEFAULT_LANGUAGE = "python"
DEFAULT_RESULT_COUNT = 100


@dataclass(frozen=True)
class Settings:
    """Settings for a starring run."""

    github_token: Optional[str] = None
    api_url: str = DEFAULT_BASE_URL
    search_query: str = DEFAULT_SEARCH_QUERY
    language: Optional[str] = DEFAULT_LANGUAGE
    result_count: int = DEFAULT_RESULT_COUNT
    dry_run: bool = False
    request_timeout: float = 30

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from. If None, uses os.environ.

        Raises:
            ValueError: If RESULT_COUNT or REQUEST_TIMEOUT is not a number
        """
        if environ is None:
            environ = os.environ

        # An empty SEARCH_LANGUAGE disables the language filter
        language = environ.get("SEARCH_LANGUAGE", DEFAULT_LANGUAGE) or None

        return cls(
            github_token=environ.get("GITHUB_TOKEN") or None,
            api_url=environ.get("GITHUB_API_URL", DEFAULT_BASE_URL),
            search_query=environ.get("SEARCH_QUERY", DEFAULT_SEARCH_QUERY),
            language=language,
            result_count=int(environ.get("RESULT_COUNT", str(DEFAULT_RESULT_COUNT))),
            dry_run=environ.get("DRY_RUN", "false").lower() == "true",
            request_timeout=float(environ.get("REQUEST_TIMEOUT", "30")),
        )
