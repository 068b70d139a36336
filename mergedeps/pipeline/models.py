"""Data models for the dependency merge pipeline."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Repository(BaseModel):
    """A repository in the organization, as reported by GitHub for the current run."""

    model_config = ConfigDict(frozen=True)

    owner: str
    name: str
    default_branch: str
    archived: bool = False
    can_push: bool = False

    @property
    def full_name(self) -> str:
        """Return the repository in 'owner/repo' format."""
        return f"{self.owner}/{self.name}"


class PullRequest(BaseModel):
    """An open pull request discovered in a repository."""

    model_config = ConfigDict(frozen=True)

    repository: Repository
    number: int
    title: str
    author_id: int | None = None
    author_login: str | None = None

    @property
    def reference(self) -> str:
        """Return the pull request in 'owner/repo#number' format."""
        return f"{self.repository.full_name}#{self.number}"


class UpgradeIdentity(BaseModel):
    """The (package, target version) pair an upgrade pull request proposes."""

    model_config = ConfigDict(frozen=True)

    package: str
    version: str

    @property
    def key(self) -> str:
        """Return the canonical 'package@version' key."""
        return f"{self.package}@{self.version}"

    def __str__(self) -> str:
        return self.key


class MergeAction(str, Enum):
    """Action taken for a discovered pull request."""

    MERGE = "merge"
    SKIP = "skip"


class MergeDecision(BaseModel):
    """Progress record emitted for every pull request the coordinator handles."""

    model_config = ConfigDict(frozen=True)

    pull_request: PullRequest
    identity: UpgradeIdentity
    action: MergeAction


class MergeDependenciesResult(BaseModel):
    """Result of a completed merge-dependencies run."""

    decisions: list[MergeDecision] = Field(default_factory=list)
    verdicts: dict[str, bool] = Field(default_factory=dict)
    merges_triggered: int = 0

    @property
    def merged(self) -> list[MergeDecision]:
        """Return the decisions that resulted in a merge trigger."""
        return [decision for decision in self.decisions if decision.action == MergeAction.MERGE]

    @property
    def skipped(self) -> list[MergeDecision]:
        """Return the decisions that were declined by the operator."""
        return [decision for decision in self.decisions if decision.action == MergeAction.SKIP]
