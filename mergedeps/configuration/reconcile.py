"""Reconcile configuration provided through CLI arguments and environment variables."""

from pathlib import Path

from mergedeps.configuration.exceptions import (
    GitHubAuthenticationConfigurationUndefinedError,
    InvalidConfigurationValueError,
)
from mergedeps.configuration.models import GitHubAuthenticationType, MergeDependenciesConfig
from mergedeps.utils.constants import (
    DEFAULT_GITHUB_API_URL,
    DEFAULT_MERGE_COMMAND,
    DEFAULT_STREAM_BUFFER_SIZE,
    DEPENDABOT_USER_ID,
)


async def validate_github_authentication_configuration(
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
) -> GitHubAuthenticationType:
    """Validates the GitHub authentication configuration.

    The installation ID is optional for GitHub App authentication because the
    installation can be looked up from the organization.

    Args:
        github_pat_token (str | None): The GitHub PAT token.
        github_app_id (int | None): The GitHub App ID.
        github_app_private_key_path (Path | None): The path to the GitHub App private key.
        github_app_installation_id (int | None): The GitHub App installation ID.

    Raises:
        GitHubAuthenticationConfigurationUndefinedError: If both or neither of PAT and App configurations are defined,
            or if the App configuration is incomplete.

    Returns:
        GitHubAuthenticationType: The type of GitHub authentication used.
    """
    app_settings_given = bool(github_app_id or github_app_private_key_path or github_app_installation_id)
    if github_pat_token and app_settings_given:
        raise GitHubAuthenticationConfigurationUndefinedError("Both PAT and GitHub App configurations are defined. Please use one or the other.")

    if github_pat_token:
        return GitHubAuthenticationType.PAT

    if github_app_id and github_app_private_key_path:
        return GitHubAuthenticationType.APP
    elif app_settings_given:
        missing_settings: list[dict[str, str]] = []
        if not github_app_id:
            missing_settings.append({"name": "GitHub App ID", "cli_name": "github_app_id", "env_name": "GITHUB_APP_ID"})
        if not github_app_private_key_path:
            missing_settings.append(
                {
                    "name": "GitHub App private key path",
                    "cli_name": "github_app_private_key_path",
                    "env_name": "GITHUB_APP_PRIVATE_KEY_PATH",
                }
            )
        msg = "Incomplete GitHub App configuration - missing settings include " + ", ".join(
            f"{setting['name']} (command line option {setting['cli_name']}, environment variable {setting['env_name']})"
            for setting in missing_settings
        )
        raise GitHubAuthenticationConfigurationUndefinedError(msg)
    else:
        raise GitHubAuthenticationConfigurationUndefinedError(
            "No GitHub authentication configuration provided. Please set GITHUB_TOKEN or provide a GitHub App configuration."
        )


async def reconcile_merge_dependencies_configuration(
    org: str,
    github_pat_token: str | None = None,
    github_app_id: int | None = None,
    github_app_private_key_path: Path | None = None,
    github_app_installation_id: int | None = None,
    github_api_url: str = DEFAULT_GITHUB_API_URL,
    bot_user_id: int = DEPENDABOT_USER_ID,
    merge_command: str = DEFAULT_MERGE_COMMAND,
    buffer_size: int = DEFAULT_STREAM_BUFFER_SIZE,
    dry_run: bool = False,
    debug: bool = False,
) -> MergeDependenciesConfig:
    """Validate authentication and run settings and build the run configuration."""
    org = org.strip().strip("/")
    if not org or "/" in org:
        raise InvalidConfigurationValueError("org", org, "expected a GitHub organization name")
    if buffer_size < 1:
        raise InvalidConfigurationValueError("buffer_size", buffer_size, "must be at least 1")
    if not merge_command.strip():
        raise InvalidConfigurationValueError("merge_command", merge_command, "must not be empty")

    github_auth_type = await validate_github_authentication_configuration(
        github_pat_token=github_pat_token,
        github_app_id=github_app_id,
        github_app_private_key_path=github_app_private_key_path,
        github_app_installation_id=github_app_installation_id,
    )
    return MergeDependenciesConfig(
        org=org,
        github_authentication_type=github_auth_type,
        github_pat_token=github_pat_token,
        github_app_id=github_app_id,
        github_app_private_key_path=github_app_private_key_path,
        github_app_installation_id=github_app_installation_id,
        github_api_url=github_api_url,
        bot_user_id=bot_user_id,
        merge_command=merge_command,
        buffer_size=buffer_size,
        dry_run=dry_run,
        debug=debug,
    )
