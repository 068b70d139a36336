"""Base ABC for GitHub organization clients."""

from abc import ABC, abstractmethod
from typing import AsyncIterator

from mergedeps.pipeline.models import PullRequest, Repository


class OrganizationClientBase(ABC):
    """Base ABC for the GitHub operations the merge pipeline depends on."""

    # Repository listing
    @abstractmethod
    def iter_repositories(self, org: str) -> AsyncIterator[Repository]:
        """Iterate over every repository in an organization, handling pagination."""
        pass

    # Pull Request listing
    @abstractmethod
    def iter_open_pull_requests(self, repository: Repository, base: str) -> AsyncIterator[PullRequest]:
        """Iterate over the open pull requests of a repository targeting a base branch."""
        pass

    # Issue comments
    @abstractmethod
    async def create_comment(self, repository: Repository, issue_number: int, body: str) -> None:
        """Post a comment on an issue or pull request."""
        pass
