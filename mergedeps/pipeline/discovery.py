"""Discovers Dependabot pull requests across every repository of an organization."""

import asyncio

import structlog
from structlog.contextvars import bound_contextvars

from mergedeps.github.abc import OrganizationClientBase
from mergedeps.pipeline.enumerate import iter_bot_pull_requests, iter_mergeable_repositories
from mergedeps.pipeline.models import Repository
from mergedeps.pipeline.scope import FirstErrorScope
from mergedeps.pipeline.stream import PullRequestStream
from mergedeps.utils.constants import DEPENDABOT_USER_ID

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def forward_pull_requests(
    client: OrganizationClientBase,
    repository: Repository,
    stream: PullRequestStream,
    bot_user_id: int = DEPENDABOT_USER_ID,
) -> int:
    """Send every bot pull request of a repository to the stream, returning how many were sent."""
    sent = 0
    with bound_contextvars(repository=repository.full_name):
        async for pull_request in iter_bot_pull_requests(client, repository, bot_user_id):
            logger.debug("Discovered pull request", number=pull_request.number, title=pull_request.title)
            await stream.send(pull_request)
            sent += 1
        logger.debug("Finished listing pull requests", pull_request_count=sent)
    return sent


async def discover_pull_requests(
    client: OrganizationClientBase,
    org: str,
    stream: PullRequestStream,
    scope: FirstErrorScope,
    bot_user_id: int = DEPENDABOT_USER_ID,
) -> int:
    """Fan out pull request discovery over the organization's repositories.

    One task per repository is started as soon as the repository is listed,
    so a slow repository never holds up the others. The stream is closed only
    once every repository has been listed and every task has finished without
    error; on failure the task group cancels the remaining tasks and the
    stream is left open for the supervisor to tear down.
    """
    repository_count = 0
    async with asyncio.TaskGroup() as tg:
        try:
            async for repository in iter_mergeable_repositories(client, org):
                repository_count += 1
                tg.create_task(
                    scope.guard(forward_pull_requests(client, repository, stream, bot_user_id)),
                    name=f"discover:{repository.full_name}",
                )
        except Exception as exc:
            scope.record(exc)
            raise
        logger.info("Listed repositories", org=org, repository_count=repository_count)

    await stream.close()
    logger.info("Finished discovering pull requests", org=org, repository_count=repository_count)
    return repository_count
