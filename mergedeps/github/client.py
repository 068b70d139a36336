# This file is intended to hold the setup for the authenticated githubkit client.

"""Sets up the authenticated githubkit client for an organization."""

from pathlib import Path
from typing import TypeAlias

from githubkit import GitHub
from githubkit.auth import (
    AppAuthStrategy,
    AppInstallationAuthStrategy,
    TokenAuthStrategy,
)
from githubkit.versions.latest.models import Installation

from mergedeps.configuration.models import GitHubAuthenticationType

GitHubClient: TypeAlias = GitHub[AppInstallationAuthStrategy] | GitHub[TokenAuthStrategy]


async def get_github_app_client(
    org: str,
    github_app_id: int,
    github_app_private_key_path: Path,
    github_app_installation_id: int | None,
    github_api_url: str,
) -> GitHub[AppInstallationAuthStrategy]:
    """Returns an authenticated GitHub client for the organization's GitHub App installation.

    When no installation ID is configured, the installation is looked up from
    the organization.
    """
    if not (github_app_id and github_app_private_key_path):
        raise RuntimeError("GitHub App authentication requires app_id and private_key_path in config.")
    try:
        private_key = Path(github_app_private_key_path).read_text()
        auth = AppAuthStrategy(
            app_id=github_app_id,
            private_key=private_key,
        )
        # Disable HTTP caching to always get fresh data
        app_client = GitHub(auth=auth, base_url=github_api_url, http_cache=False)

        installation_id = github_app_installation_id
        if not installation_id:
            resp = await app_client.rest.apps.async_get_org_installation(org=org)
            org_installation: Installation = resp.parsed_data
            installation_id = org_installation.id
        return app_client.with_auth(app_client.auth.as_installation(installation_id))
    except Exception as e:
        raise ValueError(f"Failed to get GitHub App installation for organization {org}: {e}") from e


def get_github_pat_client(github_pat_token: str, github_api_url: str) -> GitHub[TokenAuthStrategy]:
    """Returns an authenticated GitHub client using GitHub PAT credentials."""
    if not github_pat_token:
        raise RuntimeError("GitHub PAT authentication requires github_pat_token in config.")
    # Disable HTTP caching to always get fresh data
    return GitHub(auth=TokenAuthStrategy(github_pat_token), base_url=github_api_url, http_cache=False)


async def get_github_client(
    org: str,
    github_auth_type: GitHubAuthenticationType,
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
    github_api_url: str,
) -> GitHubClient:
    """Returns an authenticated GitHub client using either GitHub App or PAT credentials.

    Supports custom base URL for GitHub Enterprise Server (GHES).
    """
    if github_auth_type == GitHubAuthenticationType.APP:
        if not (github_app_id and github_app_private_key_path):
            raise RuntimeError("GitHub App authentication requires app_id and private_key_path in config.")
        return await get_github_app_client(org, github_app_id, github_app_private_key_path, github_app_installation_id, github_api_url)
    if not github_pat_token:
        raise RuntimeError("GitHub PAT authentication requires github_pat_token in config.")
    return get_github_pat_client(github_pat_token, github_api_url)
