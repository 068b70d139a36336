"""Decides which discovered pull requests to merge and triggers the merges."""

import asyncio
from enum import Enum
from typing import Callable

import structlog

from mergedeps.github.abc import OrganizationClientBase
from mergedeps.pipeline.identity import parse_upgrade_identity
from mergedeps.pipeline.merge import trigger_merge
from mergedeps.pipeline.models import MergeAction, MergeDecision, PullRequest, UpgradeIdentity
from mergedeps.pipeline.scope import FirstErrorScope
from mergedeps.pipeline.stream import PullRequestStream
from mergedeps.prompt import ConfirmFunc
from mergedeps.utils.constants import DEFAULT_MERGE_COMMAND, UPDATE_PROMPT_TEMPLATE

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

DecisionCallback = Callable[[MergeDecision], None]
DrainedCallback = Callable[[], None]


class CoordinatorState(str, Enum):
    """States of the decision and merge coordinator."""

    AWAITING_ITEM = "awaiting_item"
    DECIDING = "deciding"
    DISPATCHING = "dispatching"
    DRAINING = "draining"
    DONE = "done"
    FAILED = "failed"


class DecisionCoordinator:
    """Consumes discovered pull requests one at a time and acts on the operator's verdicts.

    The operator is asked once per distinct upgrade identity; every pull
    request with that identity, in any repository, follows the same verdict.
    Items are handled strictly one after another, so the verdict table needs
    no locking even while discovery is still running.
    """

    def __init__(
        self,
        client: OrganizationClientBase,
        confirm: ConfirmFunc,
        scope: FirstErrorScope,
        merge_command: str = DEFAULT_MERGE_COMMAND,
        dry_run: bool = False,
        on_decision: DecisionCallback | None = None,
        on_drained: DrainedCallback | None = None,
    ) -> None:
        self.client = client
        self.confirm = confirm
        self.scope = scope
        self.merge_command = merge_command
        self.dry_run = dry_run
        self.on_decision = on_decision
        self.on_drained = on_drained
        self.state = CoordinatorState.AWAITING_ITEM
        self.verdicts: dict[str, bool] = {}
        self.decisions: list[MergeDecision] = []
        self.merges_triggered = 0

    async def run(self, stream: PullRequestStream) -> list[MergeDecision]:
        """Process the stream until it is closed, then wait for every triggered merge."""
        try:
            async with asyncio.TaskGroup() as tg:
                while True:
                    self.state = CoordinatorState.AWAITING_ITEM
                    pull_request = await stream.receive()
                    if pull_request is None:
                        break
                    self.scope.raise_if_failed()

                    self.state = CoordinatorState.DECIDING
                    try:
                        identity = parse_upgrade_identity(pull_request.title)
                        approved = await self.decide(identity)
                    except Exception as exc:
                        self.scope.record(exc)
                        raise

                    self.state = CoordinatorState.DISPATCHING
                    self.dispatch(tg, pull_request, identity, approved)

                self.state = CoordinatorState.DRAINING
                if self.on_drained is not None:
                    self.on_drained()
                logger.info("All pull requests decided, waiting for merges", merges_started=self.merge_count)
        except BaseException:
            self.state = CoordinatorState.FAILED
            raise

        self.state = CoordinatorState.DONE
        return self.decisions

    @property
    def merge_count(self) -> int:
        """Number of merge triggers started so far."""
        return sum(1 for decision in self.decisions if decision.action == MergeAction.MERGE)

    async def decide(self, identity: UpgradeIdentity) -> bool:
        """Return the verdict for an upgrade identity, asking the operator on first sight."""
        approved = self.verdicts.get(identity.key)
        if approved is not None:
            return approved

        approved = await self.confirm(UPDATE_PROMPT_TEMPLATE.format(package=identity.package, version=identity.version))
        # The prompt is a suspension point; a failure elsewhere may have been
        # recorded while the operator was answering.
        self.scope.raise_if_failed()
        self.verdicts[identity.key] = approved
        logger.info("Recorded operator decision", identity=identity.key, approved=approved)
        return approved

    def dispatch(
        self,
        tg: asyncio.TaskGroup,
        pull_request: PullRequest,
        identity: UpgradeIdentity,
        approved: bool,
    ) -> None:
        """Start a merge for an approved pull request, or record that it was skipped."""
        action = MergeAction.MERGE if approved else MergeAction.SKIP
        decision = MergeDecision(pull_request=pull_request, identity=identity, action=action)
        self.decisions.append(decision)
        if self.on_decision is not None:
            self.on_decision(decision)

        if not approved:
            logger.debug("Skipping pull request", pull_request=pull_request.reference, identity=identity.key)
            return

        tg.create_task(
            self.scope.guard(self._merge(pull_request)),
            name=f"merge:{pull_request.reference}",
        )

    async def _merge(self, pull_request: PullRequest) -> None:
        # Tasks only start running after dispatch returns; another stage may have failed since.
        self.scope.raise_if_failed()
        await trigger_merge(self.client, pull_request, merge_command=self.merge_command, dry_run=self.dry_run)
        self.merges_triggered += 1
