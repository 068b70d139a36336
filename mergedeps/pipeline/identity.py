"""Parses upgrade identities out of Dependabot pull request titles."""

import structlog

from mergedeps.pipeline.exceptions import TitleFormatMismatchError
from mergedeps.pipeline.models import UpgradeIdentity
from mergedeps.utils.constants import DEPENDABOT_TITLE_PATTERN

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def parse_upgrade_identity(title: str) -> UpgradeIdentity:
    """Extract the (package, target version) identity from a pull request title.

    Titles must look like ``Bump <package> from <old> to <new>``. Anything else
    means the bot changed its format, and approving blindly would be unsafe, so
    a TitleFormatMismatchError is raised rather than skipping the pull request.
    """
    match = DEPENDABOT_TITLE_PATTERN.match(title)
    if match is None:
        logger.error("Pull request title does not match Dependabot format", title=title)
        raise TitleFormatMismatchError(title)
    return UpgradeIdentity(package=match.group(1), version=match.group(2))
