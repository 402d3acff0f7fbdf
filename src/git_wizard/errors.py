"""
Error kinds raised by the interactive git helpers.

Every error is terminal for the current invocation. The command entry
points translate a :class:`WizardError` into an error line on stderr and
the process exit code stored on the exception.
"""

from __future__ import annotations

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class WizardError(Exception):
    """Base class for failures that end a wizard run."""

    exit_code = EXIT_FAILURE


class EmptySelection(WizardError):
    """Raised when at least one item had to be chosen but none was."""


class NoMatch(WizardError):
    """Raised when a pattern or extension filter selects nothing."""


class NoStagedFiles(WizardError):
    """Raised when a commit is attempted with an empty index."""


class ValidationFailed(WizardError):
    """Raised when user input does not satisfy the commit conventions."""


class UserCancelled(WizardError):
    """Raised when the user aborts a prompt or declines a confirmation."""


class ExternalOperationFailed(WizardError):
    """Raised when an underlying git operation exits non-zero."""


class StagingFailed(ExternalOperationFailed):
    pass


class CommitFailed(ExternalOperationFailed):
    pass


class PushFailed(ExternalOperationFailed):
    """Raised when ``git push`` fails.

    The combined output of the push process is kept on :attr:`output` so
    the caller can dump it verbatim.
    """

    def __init__(self, message: str, output: str = "") -> None:
        super().__init__(message)
        self.output = output
