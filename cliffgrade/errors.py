"""
Exceptions raised by the grading engine.

Every error here is a precondition violation on caller input; none of them
describe a recoverable runtime state.
"""


class GradingError(Exception):
    """Base class for all engine errors."""


class MalformedLiftTargetError(GradingError, ValueError):
    """A module map handed to ``lift`` does not satisfy f(v)^2 = Q(v)."""


class GradeIndexOutOfRangeError(GradingError, ValueError):
    """A grade index outside {0, 1} was supplied."""


class IncompleteHandlerSetError(GradingError, TypeError):
    """An induction handler record is missing a callable case."""


class GradeMembershipError(GradingError, ValueError):
    """An element was used as a member of a graded piece it does not lie in."""


class FiltrationDidNotStabilizeError(GradingError, RuntimeError):
    """The word-length filtration kept growing past the configured bound."""


class InvariantViolationError(GradingError, AssertionError):
    """A structural fact the engine certifies turned out to be false."""
