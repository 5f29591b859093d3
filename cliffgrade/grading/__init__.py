"""
Even/odd grading of Clifford algebras.

Provides, in dependency order:
- GradeIndex: the grading group Z/2
- Submodule: Z-submodules with exact lattice membership
- GradingLattice / GradedPiece: the two graded pieces as suprema of powers
- GradedMonoidWitness: unit and product closure laws
- DecompositionEngine / GradedDecomposition: Cl(Q) = P0 ⊕ P1
- Induction principles and derived facts
"""

from .grade import GradeIndex, GRADES
from .certificate import Certificate
from .submodule import Submodule
from .lattice import GradingLattice, GradedPiece, MembershipWitness
from .monoid import GradedMonoidWitness
from .direct_sum import GradedDirectSum, DirectSumElement
from .decomposition import DecompositionEngine, GradedDecomposition
from .induction import (
    Base,
    Sum,
    PairMul,
    EvenOddHandlers,
    EvenHandlers,
    OddHandlers,
    GradedFold,
    derivation,
    even_odd_induction,
    even_induction,
    odd_induction,
)
from .facts import complementary, generators_exhaust_algebra, round_trip

__all__ = [
    'GradeIndex',
    'GRADES',
    'Certificate',
    'Submodule',
    'GradingLattice',
    'GradedPiece',
    'MembershipWitness',
    'GradedMonoidWitness',
    'GradedDirectSum',
    'DirectSumElement',
    'DecompositionEngine',
    'GradedDecomposition',
    'Base',
    'Sum',
    'PairMul',
    'EvenOddHandlers',
    'EvenHandlers',
    'OddHandlers',
    'GradedFold',
    'derivation',
    'even_odd_induction',
    'even_induction',
    'odd_induction',
    'complementary',
    'generators_exhaust_algebra',
    'round_trip',
]
