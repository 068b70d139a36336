"""Triggers Dependabot merges by commenting on pull requests."""

import structlog

from mergedeps.github.abc import OrganizationClientBase
from mergedeps.pipeline.exceptions import MergeTriggerError
from mergedeps.pipeline.models import PullRequest
from mergedeps.utils.constants import DEFAULT_MERGE_COMMAND

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def trigger_merge(
    client: OrganizationClientBase,
    pull_request: PullRequest,
    merge_command: str = DEFAULT_MERGE_COMMAND,
    dry_run: bool = False,
) -> None:
    """Instruct Dependabot to merge a pull request once its checks pass.

    Only the comment is posted; the merge itself is left to Dependabot and is
    not awaited. A failed post is not retried, since a failure seen from here
    does not prove the comment was not created.
    """
    if dry_run:
        logger.info("Dry run, not posting merge command", pull_request=pull_request.reference, merge_command=merge_command)
        return
    try:
        await client.create_comment(pull_request.repository, pull_request.number, merge_command)
    except Exception as exc:
        logger.error("Failed to post merge command", pull_request=pull_request.reference, error=str(exc))
        raise MergeTriggerError(pull_request.reference, exc) from exc
    logger.info("Posted merge command", pull_request=pull_request.reference, merge_command=merge_command)
