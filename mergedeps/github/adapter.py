"""GitHub client adapter for the githubkit library."""

from functools import wraps
from pathlib import Path
from typing import Any, AsyncIterator, Awaitable, Callable, Self, TypeVar

import structlog
from githubkit import Response
from githubkit.exception import RequestFailed
from githubkit.versions.latest.models import IssueComment, MinimalRepository, PullRequestSimple

from mergedeps.configuration.models import GitHubAuthenticationType
from mergedeps.pipeline.models import PullRequest, Repository
from mergedeps.utils.constants import DEFAULT_GITHUB_API_URL, DEFAULT_PER_PAGE

from .abc import OrganizationClientBase
from .client import GitHubClient, get_github_client

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def handle_github_422(func: F) -> F:
    """Decorator to handle GitHub 422 Unprocessable Entity errors, logging and raising with details."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except RequestFailed as exc:
            if exc.response.status_code == 422:
                try:
                    error_data = exc.response.json()
                except Exception:
                    error_data = {}
                message = error_data.get("message", "Unprocessable Entity")
                errors = error_data.get("errors", [])
                logger.error(
                    "GitHub 422 Unprocessable Entity",
                    function=func.__name__,
                    message=message,
                    errors=errors,
                    url=getattr(exc.response, "url", None),
                    status_code=422,
                )
                raise ValueError(
                    f"GitHub 422 error in {func.__name__}: {message} | errors: {errors} | url: {getattr(exc.response, 'url', None)}"
                ) from exc
            raise

    return wrapper  # type: ignore


def repository_from_github(repo: MinimalRepository) -> Repository:
    """Convert a githubkit repository model into a pipeline Repository."""
    permissions = repo.permissions or None
    return Repository(
        owner=repo.owner.login,
        name=repo.name,
        default_branch=repo.default_branch or "",
        archived=bool(repo.archived),
        can_push=bool(permissions and permissions.push),
    )


def pull_request_from_github(repository: Repository, pr: PullRequestSimple) -> PullRequest:
    """Convert a githubkit pull request model into a pipeline PullRequest."""
    return PullRequest(
        repository=repository,
        number=pr.number,
        title=pr.title,
        author_id=pr.user.id if pr.user else None,
        author_login=pr.user.login if pr.user else None,
    )


class GitHubKitAdapter(OrganizationClientBase):
    """GitHub client adapter for the githubkit library."""

    def __init__(self, client: GitHubClient, per_page: int = DEFAULT_PER_PAGE) -> None:
        """Initialize the GitHub client adapter with an already-initialized client."""
        self.client = client
        self.per_page = per_page

    @classmethod
    async def create(
        cls,
        org: str,
        github_auth_type: GitHubAuthenticationType,
        github_pat_token: str | None = None,
        github_app_id: int | None = None,
        github_app_private_key_path: Path | None = None,
        github_app_installation_id: int | None = None,
        github_api_url: str = DEFAULT_GITHUB_API_URL,
    ) -> Self:
        """Create a new GitHub client adapter for an organization.

        Args:
            org: Organization whose repositories will be processed
            github_auth_type: Type of authentication (PAT or APP)
            github_pat_token: Personal access token (required for PAT auth)
            github_app_id: GitHub App ID (required for APP auth)
            github_app_private_key_path: Path to private key file (required for APP auth)
            github_app_installation_id: Installation ID (looked up from the organization if omitted)
            github_api_url: GitHub API URL (defaults to https://api.github.com)

        Returns:
            Configured GitHubKitAdapter instance
        """
        logger.info(
            "Creating client for GitHub instance and organization",
            github_api_url=github_api_url,
            org=org,
            github_auth_type=github_auth_type.value,
        )
        client = await get_github_client(
            org=org,
            github_auth_type=github_auth_type,
            github_pat_token=github_pat_token,
            github_app_id=github_app_id,
            github_app_private_key_path=github_app_private_key_path,
            github_app_installation_id=github_app_installation_id,
            github_api_url=github_api_url,
        )
        return cls(client)

    # Repository listing
    async def list_repositories_page(self, org: str, page: int) -> list[MinimalRepository]:
        """Fetch a single page of an organization's repositories."""
        response: Response[list[MinimalRepository]] = await self.client.rest.repos.async_list_for_org(
            org=org,
            per_page=self.per_page,
            page=page,
        )
        return response.parsed_data

    async def iter_repositories(self, org: str) -> AsyncIterator[Repository]:
        """Iterate over every repository in an organization, handling pagination."""
        page: int = 1
        while True:
            logger.debug("Fetching repositories page", org=org, page=page)
            repositories = await self.list_repositories_page(org, page)
            for repo in repositories:
                yield repository_from_github(repo)
            if len(repositories) < self.per_page:
                break
            page += 1

    # Pull Request listing
    async def list_open_pull_requests_page(self, repository: Repository, base: str, page: int) -> list[PullRequestSimple]:
        """Fetch a single page of a repository's open pull requests against a base branch."""
        response: Response[list[PullRequestSimple]] = await self.client.rest.pulls.async_list(
            owner=repository.owner,
            repo=repository.name,
            state="open",
            base=base,
            per_page=self.per_page,
            page=page,
        )
        return response.parsed_data

    async def iter_open_pull_requests(self, repository: Repository, base: str) -> AsyncIterator[PullRequest]:
        """Iterate over the open pull requests of a repository targeting a base branch, handling pagination."""
        page: int = 1
        while True:
            logger.debug("Fetching pull requests page", repository=repository.full_name, base=base, page=page)
            pull_requests = await self.list_open_pull_requests_page(repository, base, page)
            for pr in pull_requests:
                yield pull_request_from_github(repository, pr)
            if len(pull_requests) < self.per_page:
                break
            page += 1

    # Issue comments
    @handle_github_422
    async def create_comment(self, repository: Repository, issue_number: int, body: str) -> None:
        """Post a comment on an issue or pull request."""
        response: Response[IssueComment] = await self.client.rest.issues.async_create_comment(
            owner=repository.owner,
            repo=repository.name,
            issue_number=issue_number,
            body=body,
        )
        logger.debug(
            "Created comment",
            repository=repository.full_name,
            issue_number=issue_number,
            comment_id=response.parsed_data.id,
        )
