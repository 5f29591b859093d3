"""
Decomposition of Cl(Q) as the internal direct sum of its even and odd pieces.

Construction:
1. aux(v) = (0, ι(v)) in P0 ⊕ P1 squares to (Q(v), 0), so it satisfies the
   Clifford relation.
2. φ = lift(aux): Cl(Q) -> P0 ⊕ P1.
3. collapse ∘ φ = id: both sides are algebra maps Cl(Q) -> Cl(Q) sending
   ι(e_k) to ι(e_k), so they agree by uniqueness of the lift.
4. φ ∘ collapse = id: each piece is spanned by its word-length powers;
   induct on the length (scalar, single generator, one more generator pair)
   and extend to sums by linearity.
"""

import logging
import torch
from typing import Dict, List, Optional

from ..algebra.target import AlgebraHom
from ..config import EngineConfig, get_default_config
from ..errors import InvariantViolationError
from .certificate import Certificate
from .direct_sum import DirectSumElement, GradedDirectSum
from .grade import GRADES, GradeIndex
from .lattice import GradedPiece, GradingLattice
from .monoid import GradedMonoidWitness

logger = logging.getLogger(__name__)


class GradedDecomposition:
    """
    Witness that Cl(Q) = GradedPiece(0) ⊕ GradedPiece(1) internally.

    Attributes:
        lattice: GradingLattice the pieces come from
        direct_sum: External direct sum P0 ⊕ P1
        to_direct_sum: Algebra isomorphism φ: Cl(Q) -> P0 ⊕ P1
        certificates: Monoid laws and both inverse laws
    """

    def __init__(self, lattice: GradingLattice, direct_sum: GradedDirectSum,
                 to_direct_sum: AlgebraHom, certificates: List[Certificate]):
        self.lattice = lattice
        self.algebra = lattice.algebra
        self.direct_sum = direct_sum
        self.to_direct_sum = to_direct_sum
        self.certificates = tuple(certificates)

    def piece(self, grade) -> GradedPiece:
        return self.lattice.graded_piece(grade)

    def decompose(self, x: torch.Tensor) -> DirectSumElement:
        """Unique (even, odd) pair summing to x."""
        return self.to_direct_sum(x)

    def component(self, x: torch.Tensor, grade) -> torch.Tensor:
        return self.decompose(x).component(grade)

    def recombine(self, element: DirectSumElement) -> torch.Tensor:
        return self.direct_sum.collapse(element)

    def parity(self, x: torch.Tensor) -> Optional[GradeIndex]:
        """
        Grade of a homogeneous element, None for a mixed one.

        Zero lies in both pieces and is reported as even.
        """
        parts = self.decompose(x)
        if not torch.any(parts.odd):
            return GradeIndex.EVEN
        if not torch.any(parts.even):
            return GradeIndex.ODD
        return None


class DecompositionEngine:
    """Builds and certifies the GradedDecomposition of a GradingLattice."""

    def __init__(self, lattice: GradingLattice, monoid: GradedMonoidWitness = None,
                 config: EngineConfig = None):
        self.lattice = lattice
        self.algebra = lattice.algebra
        self.monoid = monoid or GradedMonoidWitness(lattice)
        self.config = config or lattice.config or get_default_config()

    def build(self) -> GradedDecomposition:
        certificates = self.monoid.certify()

        direct_sum = GradedDirectSum(self.lattice, check_invariants=self.config.check_invariants)
        algebra = self.algebra

        # Steps 1 and 2: the odd injection of ι satisfies the Clifford relation
        to_direct_sum = algebra.lift(direct_sum, lambda v: direct_sum.of(GradeIndex.ODD, algebra.embed(v)))

        certificates.append(self._check_left_inverse(direct_sum, to_direct_sum))
        certificates.append(self._check_right_inverse(direct_sum, to_direct_sum))

        logger.debug("built graded decomposition of %r", algebra)
        return GradedDecomposition(self.lattice, direct_sum, to_direct_sum, certificates)

    def _check_left_inverse(self, direct_sum: GradedDirectSum, phi: AlgebraHom) -> Certificate:
        """collapse ∘ φ = id on Cl(Q)."""
        algebra = self.algebra

        # collapse ∘ φ is the lift of collapse ∘ aux; compare it with lift(ι) = id
        composite = algebra.lift(algebra, lambda v: direct_sum.collapse(phi.on_vector(v)))
        identity = algebra.lift(algebra, algebra.embed)
        if not composite.agrees_on_generators(identity):
            raise InvariantViolationError("collapse ∘ φ differs from the identity on generators")

        blades_checked = 0
        if self.config.verify_on_basis:
            for mask in range(algebra.dim):
                blade = algebra.blade(mask)
                if not torch.equal(direct_sum.collapse(phi(blade)), blade):
                    raise InvariantViolationError(f"collapse ∘ φ moves blade {mask}")
                blades_checked += 1

        return Certificate(
            statement="collapse ∘ φ = id",
            evidence={'generators': algebra.d, 'blades': blades_checked},
        )

    def _check_right_inverse(self, direct_sum: GradedDirectSum, phi: AlgebraHom) -> Certificate:
        """φ ∘ collapse = id on P0 ⊕ P1."""
        cases: Dict[str, int] = {'scalar': 0, 'generator': 0, 'pair': 0}
        for grade in GRADES:
            piece = self.lattice.graded_piece(grade)
            for n in piece.lengths:
                case = 'scalar' if n == 0 else 'generator' if n == 1 else 'pair'
                for x in self.lattice.power(n).basis:
                    if not direct_sum.equal(phi(x), direct_sum.of(grade, x)):
                        raise InvariantViolationError(
                            f"φ does not send {x.tolist()} to its {grade} injection"
                        )
                    cases[case] += 1

        return Certificate(
            statement="φ ∘ collapse = id",
            evidence=cases,
        )
