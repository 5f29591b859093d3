"""
Entry point tying the grading components together.

Components are derived lazily in dependency order
(lattice -> monoid laws -> decomposition) and cached; none of them carries
per-call state.
"""

import logging
from functools import cached_property, lru_cache
from typing import List

from .algebra.clifford import CliffordAlgebra, get_algebra
from .algebra.quadratic_form import QuadraticForm
from .config import EngineConfig, get_default_config
from .grading import facts, induction
from .grading.certificate import Certificate
from .grading.decomposition import DecompositionEngine, GradedDecomposition
from .grading.grade import GradeIndex
from .grading.lattice import GradedPiece, GradingLattice
from .grading.monoid import GradedMonoidWitness

logger = logging.getLogger(__name__)


class EvenOddEngine:
    """
    Graded-decomposition engine for one Clifford algebra.

    Args:
        algebra: CliffordAlgebra to grade
        config: EngineConfig, defaults to get_default_config()
    """

    def __init__(self, algebra: CliffordAlgebra, config: EngineConfig = None):
        self.algebra = algebra
        self.config = config or get_default_config()

    @cached_property
    def lattice(self) -> GradingLattice:
        return GradingLattice(self.algebra, self.config)

    @cached_property
    def monoid(self) -> GradedMonoidWitness:
        return GradedMonoidWitness(self.lattice)

    @cached_property
    def _decomposition(self) -> GradedDecomposition:
        logger.debug("deriving decomposition for %r", self.algebra)
        return DecompositionEngine(self.lattice, self.monoid, self.config).build()

    def graded_piece(self, grade) -> GradedPiece:
        return self.lattice.graded_piece(grade)

    def is_graded(self) -> GradedMonoidWitness:
        """Monoid witness; its certificates are checked once, on first access."""
        self.monoid.certify()
        return self.monoid

    def decomposition(self) -> GradedDecomposition:
        return self._decomposition

    def even_odd_induction(self, grade, handlers: induction.EvenOddHandlers) -> induction.GradedFold:
        return induction.even_odd_induction(self._decomposition, grade, handlers)

    def even_induction(self, handlers: induction.EvenHandlers) -> induction.GradedFold:
        return induction.even_induction(self._decomposition, handlers)

    def odd_induction(self, handlers: induction.OddHandlers) -> induction.GradedFold:
        return induction.odd_induction(self._decomposition, handlers)

    def complementary(self) -> Certificate:
        return facts.complementary(self._decomposition)

    def generators_exhaust_algebra(self) -> Certificate:
        return facts.generators_exhaust_algebra(self.lattice)

    def certificates(self) -> List[Certificate]:
        """Every certificate the engine can issue."""
        return list(self._decomposition.certificates) + [
            self.complementary(),
            self.generators_exhaust_algebra(),
        ]

    def __repr__(self):
        return f"EvenOddEngine({self.algebra!r})"


# Cached engine instances
@lru_cache(maxsize=8)
def get_engine(form: QuadraticForm, device: str = 'cpu') -> EvenOddEngine:
    """Get cached EvenOddEngine for the Clifford algebra of ``form``."""
    return EvenOddEngine(get_algebra(form, device))
