#!/usr/bin/env python3
"""Script to search GitHub repositories and star each result."""

import logging
import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from dotenv import load_dotenv

from src.config import Settings
from src.infrastructure.github_client import GitHubClientError, GitHubRestClient
from src.application.star_service import StarService

logger = logging.getLogger(__name__)


def main(environ=None):
    """Search repositories and star them."""
    try:
        if environ is None:
            # Values already present in the environment win over .env
            load_dotenv()
        settings = Settings.from_env(environ)

        if not settings.github_token and not settings.dry_run:
            logger.error("GitHub token is missing. Please set GITHUB_TOKEN environment variable.")
            return 1

        github_client = GitHubRestClient(
            token=settings.github_token or "",
            base_url=settings.api_url,
            timeout=settings.request_timeout
        )

        if settings.github_token:
            try:
                core = github_client.get_rate_limit()
                logger.info(
                    f"API calls remaining: {core.get('remaining')}/{core.get('limit')} "
                    f"(resets at {core.get('reset')})"
                )
            except GitHubClientError as e:
                logger.warning(f"Could not read rate limit status: {e}")

        service = StarService(github_client, dry_run=settings.dry_run)
        report = service.star_repositories(
            settings.search_query,
            settings.result_count,
            settings.language
        )

        for full_name, error in report.failed.items():
            logger.warning(f"Not starred: {full_name} ({error})")

        return 0 if not report.failed else 1

    except Exception as e:
        logger.error(f"Starring run failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    sys.exit(main())
