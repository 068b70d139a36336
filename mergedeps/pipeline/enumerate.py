"""Enumerates the repositories and Dependabot pull requests a run operates on."""

from typing import AsyncIterator

import structlog

from mergedeps.github.abc import OrganizationClientBase
from mergedeps.pipeline.exceptions import EnumerationError
from mergedeps.pipeline.models import PullRequest, Repository
from mergedeps.utils.constants import DEPENDABOT_USER_ID

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def is_mergeable_repository(repository: Repository) -> bool:
    """Return True if the current user can merge pull requests in the repository."""
    return not repository.archived and repository.can_push


async def iter_mergeable_repositories(client: OrganizationClientBase, org: str) -> AsyncIterator[Repository]:
    """Yield each unarchived repository in the organization that the current user can push to.

    Listing failures are not retried: pagination cannot be resumed safely
    after a partial failure, so the error ends the enumeration.
    """
    try:
        async for repository in client.iter_repositories(org):
            if not is_mergeable_repository(repository):
                logger.debug(
                    "Skipping repository",
                    repository=repository.full_name,
                    archived=repository.archived,
                    can_push=repository.can_push,
                )
                continue
            yield repository
    except Exception as exc:
        logger.error("Failed to list repositories", org=org, error=str(exc))
        raise EnumerationError(f"repositories of organization {org}", exc) from exc


async def iter_bot_pull_requests(
    client: OrganizationClientBase,
    repository: Repository,
    bot_user_id: int = DEPENDABOT_USER_ID,
) -> AsyncIterator[PullRequest]:
    """Yield each open pull request against the repository's default branch authored by the bot."""
    try:
        async for pull_request in client.iter_open_pull_requests(repository, base=repository.default_branch):
            if pull_request.author_id != bot_user_id:
                continue
            yield pull_request
    except Exception as exc:
        logger.error("Failed to list pull requests", repository=repository.full_name, error=str(exc))
        raise EnumerationError(f"pull requests of {repository.full_name}", exc) from exc
