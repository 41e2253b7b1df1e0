"""Error taxonomy for example execution."""

from enum import Enum
from typing import Optional

from speccore.core.location import Location


class FailureKind(str, Enum):
    """Kind of error that ended an example."""

    ASSERTION_FAILURE = "assertion_failure"
    UNEXPECTED_ERROR = "unexpected_error"


class SpecError(Exception):
    """Base class for errors raised by speccore itself."""

    pass


class ConfigurationError(SpecError):
    """Raised when the example tree is declared illegally.

    This is a setup error, not a test result: the runner never turns it
    into an example status and lets it terminate the run.
    """

    pass


class AssertionFailure(AssertionError):
    """Raised by ``fail`` to mark the running example as failed."""

    def __init__(self, message: str, location: Optional[Location] = None):
        super().__init__(message)
        self.message = message
        self.location = location


def classify(error: BaseException) -> FailureKind:
    """Map an exception raised during an example to its failure kind."""
    if isinstance(error, AssertionError):
        return FailureKind.ASSERTION_FAILURE
    return FailureKind.UNEXPECTED_ERROR
