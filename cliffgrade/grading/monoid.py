"""
Graded monoid structure of the even/odd pieces.

Certifies the two closure facts that make the pieces a grading:
- the unit lies in the even piece
- GradedPiece(i) * GradedPiece(j) ⊆ GradedPiece(i + j)

Closure is shown on word lengths: a product of an n-word and an m-word is an
(n + m)-word, so ι(M)^n ι(M)^m ⊆ ι(M)^(n+m), and ι(M)^(n+m) sits inside the
piece of parity n + m. Since each piece is spanned by its contributing
powers, bilinearity extends this to the whole pieces.
"""

import logging
from typing import List, Optional, Tuple

from ..errors import InvariantViolationError
from .certificate import Certificate
from .grade import GRADES, GradeIndex
from .lattice import GradingLattice

logger = logging.getLogger(__name__)


class GradedMonoidWitness:
    """Checks and certifies the graded monoid laws for a GradingLattice."""

    def __init__(self, lattice: GradingLattice):
        self.lattice = lattice
        self._certificates: Optional[Tuple[Certificate, ...]] = None

    def unit_in_even(self) -> Certificate:
        """The unit of Cl(Q) is the 0-fold product, hence even."""
        algebra = self.lattice.algebra
        even = self.lattice.graded_piece(GradeIndex.EVEN)
        if not self.lattice.power(0).contains(algebra.one()) or not even.contains(algebra.one()):
            raise InvariantViolationError("1 is not in the even piece")
        certificate = Certificate(
            statement="1 ∈ GradedPiece(0)",
            evidence={'word_length': 0},
        )
        logger.debug("certified %s", certificate)
        return certificate

    def closure_under_product(self, i, j) -> Certificate:
        """
        Certify GradedPiece(i) * GradedPiece(j) ⊆ GradedPiece(i + j).

        Raises:
            GradeIndexOutOfRangeError: for grades outside {0, 1}
            InvariantViolationError: if any containment fails
        """
        i = GradeIndex.coerce(i)
        j = GradeIndex.coerce(j)
        target_grade = i + j
        left = self.lattice.graded_piece(i)
        right = self.lattice.graded_piece(j)
        target = self.lattice.graded_piece(target_grade)

        checked = []
        for n in left.lengths:
            for m in right.lengths:
                word_product = self.lattice.power(n) * self.lattice.power(m)
                if not word_product <= self.lattice.power(n + m):
                    raise InvariantViolationError(
                        f"ι(M)^{n} * ι(M)^{m} is not contained in ι(M)^{n + m}"
                    )
                if not self.lattice.power(n + m) <= target.submodule:
                    raise InvariantViolationError(
                        f"ι(M)^{n + m} is not contained in GradedPiece({int(target_grade)})"
                    )
                checked.append((n, m))

        certificate = Certificate(
            statement=f"GradedPiece({int(i)}) * GradedPiece({int(j)}) ⊆ GradedPiece({int(target_grade)})",
            evidence={'length_pairs': checked},
        )
        logger.debug("certified %s over %d length pairs", certificate, len(checked))
        return certificate

    def certify(self) -> List[Certificate]:
        """
        Unit law plus closure for all four grade pairs.

        The checks run once; later calls return a fresh list of the same
        certificates.
        """
        if self._certificates is None:
            certificates = [self.unit_in_even()]
            for i in GRADES:
                for j in GRADES:
                    certificates.append(self.closure_under_product(i, j))
            self._certificates = tuple(certificates)
        return list(self._certificates)
