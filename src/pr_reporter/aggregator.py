"""Organization-wide report pipeline."""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from pr_reporter.collector import MergedPRCollector
from pr_reporter.github.client import GitHubClient
from pr_reporter.github.errors import GitHubFetchError
from pr_reporter.github.repositories import list_organization_repositories
from pr_reporter.models.config import ReportConfig
from pr_reporter.models.pr import RepositoryRef
from pr_reporter.models.report import (
    AggregateSummary,
    RepositoryOutcome,
    RepositoryStatus,
)

logger = logging.getLogger(__name__)

OutcomeCallback = Callable[[int, int, RepositoryOutcome], None]


class ReportAggregator:
    """Run the merged-PR pipeline over every repository of an organization."""

    def __init__(self, client: GitHubClient, config: ReportConfig):
        self.client = client
        self.config = config
        self.collector = MergedPRCollector(
            client,
            branch=config.branch,
            date_range=config.date_range,
            per_page=config.per_page,
            max_pages=config.max_pages,
        )

    def is_excluded(self, repo: RepositoryRef) -> bool:
        """Check the skip-list against the repository short name."""
        return any(repo.matches(name) for name in self.config.skip_repos)

    async def process_repository(self, repo: RepositoryRef) -> RepositoryOutcome:
        """
        Run skip-list, branch check and collection for one repository.

        Fetch failures become warnings on the outcome; they never propagate.
        """
        if self.is_excluded(repo):
            logger.info("Skipping %s: excluded by caller", repo.full_name)
            return RepositoryOutcome(repository=repo, status=RepositoryStatus.EXCLUDED)

        warnings: list[str] = []
        branch = self.config.branch

        try:
            exists = await self.client.branch_exists(repo, branch)
        except GitHubFetchError as e:
            # Treated as a missing branch, but kept visible
            logger.warning("%s: could not check branch %s: %s", repo.full_name, branch, e)
            warnings.append(f"branch check failed, treated as missing: {e}")
            exists = False

        if not exists:
            logger.info("Skipping %s: %s branch does not exist", repo.full_name, branch)
            return RepositoryOutcome(
                repository=repo,
                status=RepositoryStatus.MISSING_BRANCH,
                warnings=tuple(warnings),
            )

        result = await self.collector.collect(repo)
        stats = result.stats
        if stats.error:
            warnings.append(f"collection stopped early, {stats.error}")
        if stats.malformed_items:
            warnings.append(f"ignored {stats.malformed_items} malformed PR item(s)")
        if stats.ceiling_hit:
            warnings.append(
                f"page limit ({self.config.max_pages}) reached, results may be truncated"
            )

        if not result.records:
            logger.info("Skipping %s: no PRs merged in date range", repo.full_name)
            return RepositoryOutcome(
                repository=repo,
                status=RepositoryStatus.NO_PRS_IN_RANGE,
                warnings=tuple(warnings),
            )

        logger.info(
            "%s: %d PRs found across %d page(s)",
            repo.full_name,
            stats.total_matched,
            stats.pages_with_matches,
        )
        return RepositoryOutcome(
            repository=repo,
            status=RepositoryStatus.REPORTED,
            result=result,
            warnings=tuple(warnings),
        )

    async def run(
        self,
        on_outcome: OutcomeCallback | None = None,
        generated_at: datetime | None = None,
    ) -> AggregateSummary:
        """
        Enumerate repositories and process each of them.

        Up to ``max_concurrency`` repositories are processed at once. Outcomes
        are recorded, and ``on_outcome`` is called, in enumeration order
        regardless of completion order.

        Args:
            on_outcome: Called with (position, total, outcome) per repository
            generated_at: Fixed generation timestamp (defaults to now)

        Returns:
            AggregateSummary for the whole organization

        Raises:
            FatalError: If the organization's repositories cannot be listed
        """
        summary = AggregateSummary(
            organization=self.config.organization,
            branch=self.config.branch,
            date_range=self.config.date_range,
            generated_at=generated_at or datetime.now().astimezone(),
        )

        repositories = await list_organization_repositories(
            self.client, self.config.organization, per_page=self.config.per_page
        )
        summary.repositories.extend(repositories)
        total = len(repositories)

        semaphore = asyncio.Semaphore(self.config.max_concurrency)

        async def _bounded(repo: RepositoryRef) -> RepositoryOutcome:
            async with semaphore:
                try:
                    return await self.process_repository(repo)
                except Exception as e:
                    logger.exception("%s: processing failed", repo.full_name)
                    return RepositoryOutcome(
                        repository=repo,
                        status=RepositoryStatus.NO_PRS_IN_RANGE,
                        warnings=(f"processing failed: {e}",),
                    )

        tasks = [asyncio.ensure_future(_bounded(repo)) for repo in repositories]
        try:
            for position, task in enumerate(tasks, start=1):
                outcome = await task
                summary.record(outcome)
                if on_outcome:
                    on_outcome(position, total, outcome)
        finally:
            # Cancelled or failed run: unfinished repositories are discarded
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        return summary
