"""Utility modules for shared functionality."""

from .constants import (
    DEFAULT_MERGE_COMMAND,
    DEPENDABOT_TITLE_PATTERN,
    DEPENDABOT_USER_ID,
)

__all__ = [
    "DEPENDABOT_USER_ID",
    "DEPENDABOT_TITLE_PATTERN",
    "DEFAULT_MERGE_COMMAND",
]
