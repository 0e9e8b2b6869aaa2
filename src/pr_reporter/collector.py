"""Merged pull request collection for a single repository."""

import logging
from typing import Any

from pr_reporter.github.client import GitHubClient
from pr_reporter.github.errors import GitHubFetchError
from pr_reporter.models.config import PAGE_CEILING, PAGE_SIZE
from pr_reporter.models.pr import PullRequestRecord, RepositoryRef
from pr_reporter.models.report import CollectionResult, DateRange, FetchStats

logger = logging.getLogger(__name__)


class MergedPRCollector:
    """Collect pull requests merged into a branch within a date window."""

    def __init__(
        self,
        client: GitHubClient,
        branch: str,
        date_range: DateRange,
        per_page: int = PAGE_SIZE,
        max_pages: int = PAGE_CEILING,
    ):
        """
        Initialize collector.

        Args:
            client: GitHub client
            branch: Base branch the pull requests were merged into
            date_range: Inclusive merge date window
            per_page: Page size
            max_pages: Hard ceiling on pages fetched per repository
        """
        if not 0 < max_pages <= PAGE_CEILING:
            raise ValueError(f"max_pages must be between 1 and {PAGE_CEILING}")

        self.client = client
        self.branch = branch
        self.date_range = date_range
        self.per_page = per_page
        self.max_pages = max_pages

    def request_params(self) -> dict[str, Any]:
        """Server-side filters for the pull request listing."""
        return {
            "state": "closed",
            "base": self.branch,
            "sort": "updated",
            "direction": "desc",
        }

    def select(self, items: list[dict[str, Any]]) -> tuple[list[PullRequestRecord], int]:
        """
        Keep the items merged inside the date window, in page order.

        Returns:
            Matching records and the number of items that could not be parsed
        """
        records: list[PullRequestRecord] = []
        malformed = 0
        for item in items:
            try:
                if not self.date_range.contains(item.get("merged_at")):
                    continue
                records.append(PullRequestRecord.from_api(item))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                malformed += 1
                logger.warning("Ignoring malformed pull request item: %s", e)
        return records, malformed

    async def collect(self, repo: RepositoryRef) -> CollectionResult:
        """
        Collect merged pull requests for one repository.

        A failed page ends collection early; records from earlier pages are
        kept and the failure is reported in the stats.

        Args:
            repo: Repository

        Returns:
            CollectionResult sorted by merge time, newest first
        """
        path = f"repos/{repo.full_name}/pulls"
        params = self.request_params()

        records: list[PullRequestRecord] = []
        pages_fetched = 0
        pages_with_matches = 0
        malformed_items = 0
        ceiling_hit = False
        error: str | None = None

        for page in range(1, self.max_pages + 1):
            try:
                items = await self.client.fetch_page(
                    path, params, page=page, per_page=self.per_page
                )
            except GitHubFetchError as e:
                error = f"page {page} fetch failed: {e}"
                logger.warning("%s: %s", repo.full_name, error)
                break

            if not items:
                break
            pages_fetched += 1

            matched, malformed = self.select(items)
            malformed_items += malformed
            if matched:
                records.extend(matched)
                pages_with_matches += 1

            if len(items) < self.per_page:
                break
            if page == self.max_pages:
                # A full last page means more data may remain
                ceiling_hit = True
                logger.warning(
                    "%s: reached page limit (%d), results may be truncated",
                    repo.full_name,
                    self.max_pages,
                )

        # Listing is ordered by update time, which differs from merge time
        records.sort(key=lambda record: record.merged_at, reverse=True)

        return CollectionResult(
            records=tuple(records),
            stats=FetchStats(
                total_matched=len(records),
                pages_fetched=pages_fetched,
                pages_with_matches=pages_with_matches,
                malformed_items=malformed_items,
                ceiling_hit=ceiling_hit,
                error=error,
            ),
        )
