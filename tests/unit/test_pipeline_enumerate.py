"""Unit tests for repository and pull request enumeration."""

import pytest

from mergedeps.pipeline.enumerate import is_mergeable_repository, iter_bot_pull_requests, iter_mergeable_repositories
from mergedeps.pipeline.exceptions import EnumerationError
from tests.unit.fakes import FakeOrganizationClient, make_pull_request, make_repository


@pytest.mark.parametrize(
    "archived,can_push,expected",
    [
        pytest.param(False, True, True, id="active writable"),
        pytest.param(True, True, False, id="archived"),
        pytest.param(False, False, False, id="read only"),
        pytest.param(True, False, False, id="archived read only"),
    ],
)
def test_is_mergeable_repository(archived: bool, can_push: bool, expected: bool) -> None:
    """Test that only unarchived repositories with push permission are mergeable."""
    assert is_mergeable_repository(make_repository("api", archived=archived, can_push=can_push)) is expected


@pytest.mark.asyncio
async def test_iter_mergeable_repositories_filters(left_pad_org: FakeOrganizationClient) -> None:
    """Test that archived and read-only repositories are skipped."""
    repositories = [repository async for repository in iter_mergeable_repositories(left_pad_org, "acme")]

    assert [repository.full_name for repository in repositories] == ["acme/B"]


@pytest.mark.asyncio
async def test_iter_mergeable_repositories_wraps_errors() -> None:
    """Test that listing failures surface as EnumerationError after yielding what was listed."""
    client = FakeOrganizationClient(repositories=[make_repository("api")], repository_error=ConnectionError("boom"))
    seen: list[str] = []

    with pytest.raises(EnumerationError) as exc_info:
        async for repository in iter_mergeable_repositories(client, "acme"):
            seen.append(repository.full_name)

    assert seen == ["acme/api"]
    assert "repositories of organization acme" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, ConnectionError)


@pytest.mark.asyncio
async def test_iter_bot_pull_requests_filters_author_and_uses_default_branch() -> None:
    """Test that only bot pull requests are yielded and the default branch is used as base."""
    repository = make_repository("api", default_branch="develop")
    bot_pr = make_pull_request(repository, 1, "Bump left-pad from 1.0.0 to 1.0.1")
    human_pr = make_pull_request(repository, 2, "Add feature", author_id=1)
    client = FakeOrganizationClient(repositories=[repository], pull_requests={"acme/api": [bot_pr, human_pr]})

    pull_requests = [pr async for pr in iter_bot_pull_requests(client, repository)]

    assert pull_requests == [bot_pr]
    assert client.listed_bases == {"acme/api": "develop"}


@pytest.mark.asyncio
async def test_iter_bot_pull_requests_custom_bot() -> None:
    """Test that a different bot account can be configured."""
    repository = make_repository("api")
    renovate_pr = make_pull_request(repository, 7, "Bump left-pad from 1.0.0 to 1.0.1", author_id=29139614)
    client = FakeOrganizationClient(repositories=[repository], pull_requests={"acme/api": [renovate_pr]})

    pull_requests = [pr async for pr in iter_bot_pull_requests(client, repository, bot_user_id=29139614)]

    assert [pr.number for pr in pull_requests] == [7]


@pytest.mark.asyncio
async def test_iter_bot_pull_requests_wraps_errors() -> None:
    """Test that pull request listing failures surface as EnumerationError naming the repository."""
    repository = make_repository("api")
    client = FakeOrganizationClient(repositories=[repository], pull_request_errors={"acme/api": TimeoutError("slow")})

    with pytest.raises(EnumerationError, match="pull requests of acme/api"):
        async for _ in iter_bot_pull_requests(client, repository):
            pass
