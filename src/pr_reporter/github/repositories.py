"""Organization repository enumeration."""

import logging

from pr_reporter.github.client import GitHubClient
from pr_reporter.github.errors import FatalError, GitHubFetchError
from pr_reporter.models.config import PAGE_SIZE
from pr_reporter.models.pr import RepositoryRef

logger = logging.getLogger(__name__)


async def list_organization_repositories(
    client: GitHubClient, organization: str, per_page: int = PAGE_SIZE
) -> list[RepositoryRef]:
    """
    List every repository of an organization.

    Pages through ``orgs/{org}/repos`` until a short or empty page.

    Args:
        client: GitHub client
        organization: Organization login
        per_page: Page size

    Returns:
        Deduplicated repositories sorted by full name (case-sensitive)

    Raises:
        FatalError: If the first page cannot be fetched or there are no repositories
    """
    path = f"orgs/{organization}/repos"
    full_names: set[str] = set()
    page = 1

    while True:
        try:
            items = await client.fetch_page(path, {"type": "all"}, page=page, per_page=per_page)
        except GitHubFetchError as e:
            if page == 1:
                raise FatalError.repositories_unavailable(organization, e) from e
            logger.warning(
                "Stopped listing %s repositories at page %d: %s", organization, page, e
            )
            break

        if not items:
            break

        full_names.update(item["full_name"] for item in items if item.get("full_name"))

        if len(items) < per_page:
            break
        page += 1

    if not full_names:
        raise FatalError.no_repositories(organization)

    logger.info("Found %d repositories in %s", len(full_names), organization)
    return [RepositoryRef(full_name=name) for name in sorted(full_names)]
