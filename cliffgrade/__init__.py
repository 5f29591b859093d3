"""
cliffgrade: even/odd decomposition of Clifford algebras.

Integral quadratic form -> exact Clifford algebra -> graded pieces as
suprema of generator powers -> certified direct sum decomposition ->
induction principles over each piece.
"""

__version__ = '1.0.0'

from . import algebra
from . import grading
from .config import EngineConfig, get_default_config
from .engine import EvenOddEngine, get_engine
from .errors import (
    GradingError,
    MalformedLiftTargetError,
    GradeIndexOutOfRangeError,
    IncompleteHandlerSetError,
    GradeMembershipError,
    FiltrationDidNotStabilizeError,
    InvariantViolationError,
)
