"""GitHub REST API client for repository search and starring with rate-limit backoff."""

import time
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
import requests

from src.domain.repository import Repository

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.github.com"


class GitHubClientError(Exception):
    """Base class for errors raised by the GitHub client."""
    pass


class TransportError(GitHubClientError):
    """Raised when a request cannot be sent or the connection fails."""

    def __init__(self, message: str, attempts: int = 1, states: Optional[List["StarState"]] = None):
        self.attempts = attempts
        self.states = states or []
        super().__init__(message)


class UnexpectedStatusError(GitHubClientError):
    """Raised when the search endpoint answers with a status other than 200."""

    def __init__(self, status_code: int, url: str = ""):
        self.status_code = status_code
        self.url = url
        super().__init__(f"HTTP request failed with status code: {status_code}")


class DecodeError(GitHubClientError):
    """Raised when a response body is not the JSON shape we expect."""
    pass


class StarActionFailedError(GitHubClientError):
    """Raised when starring ends with a status that is neither success nor rate limiting."""

    def __init__(
        self,
        full_name: str,
        status_code: int,
        attempts: int = 1,
        states: Optional[List["StarState"]] = None
    ):
        self.full_name = full_name
        self.status_code = status_code
        self.attempts = attempts
        self.states = states or []
        super().__init__(f"Status Code: {status_code}")


class ParseError(GitHubClientError):
    """Raised when a rate-limit header cannot be read as an integer."""

    def __init__(
        self,
        header: str,
        value: Optional[str],
        attempts: int = 1,
        states: Optional[List["StarState"]] = None
    ):
        self.header = header
        self.value = value
        self.attempts = attempts
        self.states = states or []
        super().__init__(f"Cannot parse {header} header: {value!r}")


class StarState(Enum):
    """States of a single star action."""

    ATTEMPTING = "attempting"
    WAITING_FOR_RESET = "waiting_for_reset"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class StarResult:
    """Outcome of a successful star action."""

    full_name: str
    state: StarState
    attempts: int
    waited_seconds: float = 0.0
    states: List[StarState] = field(default_factory=list)


class GitHubRestClient:
    """Client for the GitHub REST API search and star endpoints."""

    # Search endpoint returns at most 100 items per page
    MAX_PER_PAGE = 100
    RATE_LIMIT_REMAINING_HEADER = "X-RateLimit-Remaining"
    RATE_LIMIT_RESET_HEADER = "X-RateLimit-Reset"

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30,
        sleep: Optional[Callable[[float], None]] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Initialize GitHub REST client.

        Args:
            token: GitHub personal access token. If None, uses GITHUB_TOKEN env var.
            base_url: API root, overridable for tests or GitHub Enterprise
            timeout: Per-request timeout in seconds
            sleep: Blocking wait used while the rate limit resets. Defaults to time.sleep.
            clock: Returns the current Unix time in seconds. Defaults to time.time.
        """
        if token is None:
            token = os.getenv("GITHUB_TOKEN")

        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._sleep = sleep or time.sleep
        self._clock = clock or time.time
        self.headers = {
            "Accept": "application/vnd.github+json",
        }

        if self.token:
            self.headers["Authorization"] = f"Bearer {self.token}"

    @staticmethod
    def build_search_query(query: str, language: Optional[str] = None) -> str:
        """Combine a popularity filter with an optional language filter."""
        if language:
            return f"{query} language:{language}"
        return query

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = requests.get(
                url,
                params=params,
                headers=self.headers,
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Request to {url} failed: {e}") from e

        if response.status_code != 200:
            raise UnexpectedStatusError(response.status_code, url)

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Response from {url} is not valid JSON: {e}") from e

    def search_repositories(
        self,
        query: str,
        count: int,
        language: Optional[str] = "python"
    ) -> List[Repository]:
        """
        Search repositories, least starred first.

        Args:
            query: Popularity filter such as "stars:>100"
            count: Page size, between 1 and 100
            language: Language filter, or None to search all languages

        Returns:
            Repositories in the order the endpoint returned them

        Raises:
            ValueError: If count is not positive
            TransportError: If the request fails
            UnexpectedStatusError: If the status code is not 200
            DecodeError: If the body is not a search result
        """
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise ValueError(f"count must be a positive integer, got {count!r}")

        per_page = min(count, self.MAX_PER_PAGE)
        if per_page != count:
            logger.warning(f"Requested {count} results; the search endpoint caps pages at {per_page}")

        search_query = self.build_search_query(query, language)
        params = {
            "q": search_query,
            "per_page": per_page,
            "sort": "stars",
            "order": "asc",
        }
        logger.info(f"Searching repositories: {search_query} (per_page={per_page})")
        data = self._get_json(f"{self.base_url}/search/repositories", params)

        if not isinstance(data, dict) or not isinstance(data.get("items"), list):
            raise DecodeError("Search response has no 'items' array")

        repositories = []
        for index, item in enumerate(data["items"]):
            try:
                repositories.append(Repository.from_api_item(item))
            except (KeyError, TypeError, ValueError) as e:
                raise DecodeError(f"Malformed repository at index {index}: {e}") from e

        logger.info(f"Search returned {len(repositories)} repositories")
        return repositories

    def get_rate_limit(self) -> Dict[str, Any]:
        """Return the core rate limit block (limit, remaining, reset)."""
        data = self._get_json(f"{self.base_url}/rate_limit")
        try:
            core = data["resources"]["core"]
        except (KeyError, TypeError) as e:
            raise DecodeError(f"Rate limit response is missing resources.core: {e}") from e
        if not isinstance(core, dict):
            raise DecodeError("Rate limit resources.core is not an object")
        return core

    def _seconds_until_reset(self, response: requests.Response) -> float:
        remaining = response.headers.get(self.RATE_LIMIT_REMAINING_HEADER)
        reset = response.headers.get(self.RATE_LIMIT_RESET_HEADER)
        logger.warning(f"Rate limit exceeded. Remaining requests: {remaining}. Reset time: {reset}")

        try:
            reset_time = int(reset)
        except (TypeError, ValueError) as e:
            raise ParseError(self.RATE_LIMIT_RESET_HEADER, reset) from e

        return max(reset_time - self._clock(), 0)

    def star_repository(self, full_name: str) -> StarResult:
        """
        Star a repository, waiting out rate limits until GitHub accepts it.

        A 401 carrying a reset time puts the action into WAITING_FOR_RESET and
        the same request is sent again once the window has reset. There is no
        cap on the number of retries.

        Args:
            full_name: Repository in owner/name form

        Returns:
            StarResult in the SUCCEEDED state

        Raises:
            ValueError: If the client has no token or full_name is empty
            TransportError: If a request fails
            ParseError: If a rate-limited response has an unreadable reset header
            StarActionFailedError: For any other status code
        """
        if not self.token:
            raise ValueError("A GitHub token is required to star repositories")
        if not full_name:
            raise ValueError("full_name must not be empty")

        url = f"{self.base_url}/user/starred/{full_name}"
        states: List[StarState] = []
        attempts = 0
        waited = 0.0

        while True:
            states.append(StarState.ATTEMPTING)
            attempts += 1
            logger.debug(f"Starring {full_name} (attempt {attempts})")

            try:
                response = requests.put(url, headers=self.headers, timeout=self.timeout)
            except requests.exceptions.RequestException as e:
                states.append(StarState.FAILED)
                raise TransportError(f"Request to {url} failed: {e}", attempts, states) from e

            if response.status_code == 204:
                states.append(StarState.SUCCEEDED)
                return StarResult(
                    full_name=full_name,
                    state=StarState.SUCCEEDED,
                    attempts=attempts,
                    waited_seconds=waited,
                    states=states,
                )

            if response.status_code == 401:
                try:
                    wait_time = self._seconds_until_reset(response)
                except ParseError as e:
                    states.append(StarState.FAILED)
                    raise ParseError(e.header, e.value, attempts, states) from e.__cause__

                states.append(StarState.WAITING_FOR_RESET)
                logger.warning(f"Waiting {wait_time:.0f} seconds before retrying {full_name}...")
                if wait_time > 0:
                    self._sleep(wait_time)
                    waited += wait_time
                continue

            states.append(StarState.FAILED)
            raise StarActionFailedError(full_name, response.status_code, attempts, states)
