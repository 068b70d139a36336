"""Shared constants used across the application."""

import re

# Dependabot Constants
# --------------------

DEPENDABOT_USER_ID = 49699333
"""GitHub user ID of the dependabot[bot] account that authors upgrade pull requests."""

DEPENDABOT_TITLE_PATTERN = re.compile(r"^Bump (.+) from .+ to (.+)$")
"""Pattern to match Dependabot pull request titles (e.g., Bump left-pad from 1.0.0 to 1.0.1)."""

DEFAULT_MERGE_COMMAND = "@dependabot merge"
"""Comment body instructing Dependabot to merge a pull request once its checks pass."""

# GitHub API Settings
# -------------------

DEFAULT_GITHUB_API_URL = "https://api.github.com"

DEFAULT_PER_PAGE = 100
"""Page size used when listing repositories and pull requests."""

# Pipeline Settings
# -----------------

DEFAULT_STREAM_BUFFER_SIZE = 100
"""Number of discovered pull requests that may wait for a decision before discovery blocks."""

UPDATE_PROMPT_TEMPLATE = "Update {package} to {version}?"
"""Question asked once per distinct upgrade identity."""
