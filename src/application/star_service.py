"""Application service for starring GitHub repositories found by a search."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from src.infrastructure.github_client import (
    GitHubRestClient,
    ParseError,
    StarActionFailedError,
    TransportError,
)

logger = logging.getLogger(__name__)


@dataclass
class StarReport:
    """Per-repository outcome of one run."""

    starred: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    skipped: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.starred) + len(self.failed) + len(self.skipped)


class StarService:
    """Service that searches repositories and stars each result in order."""

    def __init__(self, github_client: GitHubRestClient, dry_run: bool = False):
        """
        Initialize star service.

        Args:
            github_client: GitHub API client
            dry_run: Search and report without starring anything
        """
        self.github_client = github_client
        self.dry_run = dry_run

    def star_repositories(
        self,
        query: str,
        count: int,
        language: Optional[str] = "python"
    ) -> StarReport:
        """
        Search once and star every result, one at a time.

        Search errors propagate. A failure to star one repository is
        recorded and the remaining repositories are still processed.

        Args:
            query: Popularity filter such as "stars:>100"
            count: Number of repositories to fetch
            language: Language filter

        Returns:
            StarReport with starred, failed and skipped full names
        """
        repositories = self.github_client.search_repositories(query, count, language)
        report = StarReport()

        for repo in repositories:
            if self.dry_run:
                logger.info(f"[dry-run] Would star repository: {repo.full_name}")
                report.skipped.append(repo.full_name)
                continue

            try:
                result = self.github_client.star_repository(repo.full_name)
            except (StarActionFailedError, ParseError, TransportError) as e:
                logger.error(f"Failed to star repository {repo.full_name}. Error: {e}")
                report.failed[repo.full_name] = str(e)
                continue

            if result.attempts > 1:
                logger.info(
                    f"Starred repository: {repo.full_name} "
                    f"after {result.attempts} attempts ({result.waited_seconds:.0f}s waiting)"
                )
            else:
                logger.info(f"Starred repository: {repo.full_name}")
            report.starred.append(repo.full_name)

        logger.info(
            f"Run completed. {len(report.starred)} starred, "
            f"{len(report.failed)} failed, {len(report.skipped)} skipped"
        )
        return report
