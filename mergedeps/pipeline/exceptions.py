"""Custom exceptions for the dependency merge pipeline."""


class MergeDependenciesError(Exception):
    """Base class for fatal errors that abort a merge-dependencies run."""

    pass


class TitleFormatMismatchError(MergeDependenciesError):
    """Raised when an upgrade pull request title does not match the expected Dependabot format."""

    def __init__(self, title: str) -> None:
        """Initializes the exception with the offending title."""
        super().__init__(f"PR title did not match expected pattern: {title}")
        self.title = title


class EnumerationError(MergeDependenciesError):
    """Raised when listing repositories or pull requests fails."""

    def __init__(self, target: str, cause: Exception) -> None:
        """Initializes the exception with the organization or repository being listed."""
        super().__init__(f"Failed to list {target}: {cause}")
        self.target = target


class MergeTriggerError(MergeDependenciesError):
    """Raised when the merge command could not be posted on a pull request."""

    def __init__(self, reference: str, cause: Exception) -> None:
        """Initializes the exception with the pull request reference."""
        super().__init__(f"Failed to trigger merge of {reference}: {cause}")
        self.reference = reference


class RunAbortedError(MergeDependenciesError):
    """Raised by a task that stops because another task already failed the run."""

    pass
