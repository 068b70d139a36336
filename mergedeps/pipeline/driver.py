"""Orchestrates a merge-dependencies run across an organization."""

import asyncio
import time

import structlog

from mergedeps.configuration.models import MergeDependenciesConfig
from mergedeps.github.abc import OrganizationClientBase
from mergedeps.github.adapter import GitHubKitAdapter
from mergedeps.pipeline.coordinator import DecisionCallback, DecisionCoordinator, DrainedCallback
from mergedeps.pipeline.discovery import discover_pull_requests
from mergedeps.pipeline.models import MergeDependenciesResult
from mergedeps.pipeline.scope import FirstErrorScope
from mergedeps.pipeline.stream import PullRequestStream
from mergedeps.prompt import ConfirmFunc, ask_operator
from mergedeps.utils.constants import (
    DEFAULT_MERGE_COMMAND,
    DEFAULT_STREAM_BUFFER_SIZE,
    DEPENDABOT_USER_ID,
)

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def merge_dependencies(
    client: OrganizationClientBase,
    org: str,
    confirm: ConfirmFunc = ask_operator,
    bot_user_id: int = DEPENDABOT_USER_ID,
    merge_command: str = DEFAULT_MERGE_COMMAND,
    buffer_size: int = DEFAULT_STREAM_BUFFER_SIZE,
    dry_run: bool = False,
    on_decision: DecisionCallback | None = None,
    on_drained: DrainedCallback | None = None,
) -> MergeDependenciesResult:
    """Discover Dependabot pull requests in an organization, ask the operator, and trigger merges.

    Discovery and decision-making run concurrently under a single task group.
    The first failure anywhere cancels every other task and is raised as-is;
    errors raised while the remaining tasks unwind are discarded.
    """
    scope = FirstErrorScope()
    stream = PullRequestStream(maxsize=buffer_size)
    coordinator = DecisionCoordinator(
        client=client,
        confirm=confirm,
        scope=scope,
        merge_command=merge_command,
        dry_run=dry_run,
        on_decision=on_decision,
        on_drained=on_drained,
    )

    start_time = time.time()
    logger.info("Merging dependencies", org=org, dry_run=dry_run)
    try:
        async with asyncio.TaskGroup() as tg:
            tg.create_task(scope.guard(discover_pull_requests(client, org, stream, scope, bot_user_id)), name="discovery")
            tg.create_task(scope.guard(coordinator.run(stream)), name="coordinator")
    except BaseExceptionGroup as exc_group:
        if scope.error is None:
            raise
        logger.error(
            "Merging dependencies failed",
            org=org,
            error=str(scope.error),
            error_type=type(scope.error).__name__,
            merges_triggered=coordinator.merges_triggered,
        )
        raise scope.error from None

    end_time = time.time()
    logger.info(
        "Merged dependencies",
        org=org,
        duration=round(end_time - start_time, 2),
        decisions=len(coordinator.decisions),
        identities=len(coordinator.verdicts),
        merges_triggered=coordinator.merges_triggered,
    )
    return MergeDependenciesResult(
        decisions=coordinator.decisions,
        verdicts=dict(coordinator.verdicts),
        merges_triggered=coordinator.merges_triggered,
    )


async def run_merge_dependencies_workflow(
    config: MergeDependenciesConfig,
    confirm: ConfirmFunc = ask_operator,
    on_decision: DecisionCallback | None = None,
    on_drained: DrainedCallback | None = None,
) -> MergeDependenciesResult:
    """Create the GitHub client from configuration and run merge_dependencies with it."""
    client = await GitHubKitAdapter.create(
        org=config.org,
        github_auth_type=config.github_authentication_type,
        github_pat_token=config.github_pat_token,
        github_app_id=config.github_app_id,
        github_app_private_key_path=config.github_app_private_key_path,
        github_app_installation_id=config.github_app_installation_id,
        github_api_url=config.github_api_url,
    )
    return await merge_dependencies(
        client,
        config.org,
        confirm=confirm,
        bot_user_id=config.bot_user_id,
        merge_command=config.merge_command,
        buffer_size=config.buffer_size,
        dry_run=config.dry_run,
        on_decision=on_decision,
        on_drained=on_drained,
    )
