"""Models for configuration between CLI arguments and environment variables."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from mergedeps.utils.constants import (
    DEFAULT_GITHUB_API_URL,
    DEFAULT_MERGE_COMMAND,
    DEFAULT_STREAM_BUFFER_SIZE,
    DEPENDABOT_USER_ID,
)


class GitHubAuthenticationType(str, Enum):
    """Enum for GitHub authentication types."""

    PAT = "pat"
    APP = "app"


@dataclass
class MergeDependenciesConfig:
    """Configuration for a merge-dependencies run."""

    org: str
    github_authentication_type: GitHubAuthenticationType
    github_pat_token: str | None = None
    github_app_id: int | None = None
    github_app_private_key_path: Path | None = None
    github_app_installation_id: int | None = None
    github_api_url: str = DEFAULT_GITHUB_API_URL
    bot_user_id: int = DEPENDABOT_USER_ID
    merge_command: str = DEFAULT_MERGE_COMMAND
    buffer_size: int = DEFAULT_STREAM_BUFFER_SIZE
    dry_run: bool = False
    debug: bool = False
