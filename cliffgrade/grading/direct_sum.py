"""
External direct sum GradedPiece(0) ⊕ GradedPiece(1) as an algebra.

Multiplication follows the grading:

    (e1, o1) (e2, o2) = (e1 e2 + o1 o2, e1 o2 + o1 e2)

which is well defined because of the graded monoid laws.
"""

import torch
from dataclasses import dataclass

from ..algebra.integral import as_integer_scalar
from ..algebra.target import AlgebraTarget
from .grade import GradeIndex
from .lattice import GradingLattice


@dataclass(frozen=True, eq=False)
class DirectSumElement:
    """Pair (even component, odd component)."""
    even: torch.Tensor
    odd: torch.Tensor

    def component(self, grade) -> torch.Tensor:
        grade = GradeIndex.coerce(grade)
        return self.even if grade == GradeIndex.EVEN else self.odd


class GradedDirectSum(AlgebraTarget):
    """
    P0 ⊕ P1 with graded multiplication.

    Args:
        lattice: GradingLattice supplying the two pieces
        check_invariants: Re-check piece membership on every constructed element
    """

    def __init__(self, lattice: GradingLattice, check_invariants: bool = True):
        self.lattice = lattice
        self.algebra = lattice.algebra
        self.check_invariants = check_invariants
        self.pieces = {
            GradeIndex.EVEN: lattice.graded_piece(GradeIndex.EVEN),
            GradeIndex.ODD: lattice.graded_piece(GradeIndex.ODD),
        }

    def _pair(self, even: torch.Tensor, odd: torch.Tensor) -> DirectSumElement:
        if self.check_invariants:
            self.pieces[GradeIndex.EVEN].require(even)
            self.pieces[GradeIndex.ODD].require(odd)
        return DirectSumElement(even, odd)

    def of(self, grade, x: torch.Tensor) -> DirectSumElement:
        """
        Injection of GradedPiece(grade) into the direct sum.

        Raises:
            GradeMembershipError: if x is not in the piece
        """
        grade = GradeIndex.coerce(grade)
        self.pieces[grade].require(x)
        zero = self.algebra.zero()
        if grade == GradeIndex.EVEN:
            return DirectSumElement(x, zero)
        return DirectSumElement(zero, x)

    def collapse(self, element: DirectSumElement) -> torch.Tensor:
        """Forget the grading: (e, o) -> e + o."""
        return element.even + element.odd

    def one(self) -> DirectSumElement:
        return DirectSumElement(self.algebra.one(), self.algebra.zero())

    def zero(self) -> DirectSumElement:
        return DirectSumElement(self.algebra.zero(), self.algebra.zero())

    def add(self, a: DirectSumElement, b: DirectSumElement) -> DirectSumElement:
        return DirectSumElement(a.even + b.even, a.odd + b.odd)

    def mul(self, a: DirectSumElement, b: DirectSumElement) -> DirectSumElement:
        gp = self.algebra.geometric_product
        even = gp(a.even, b.even) + gp(a.odd, b.odd)
        odd = gp(a.even, b.odd) + gp(a.odd, b.even)
        return self._pair(even, odd)

    def smul(self, r: int, a: DirectSumElement) -> DirectSumElement:
        r = as_integer_scalar(r)
        return DirectSumElement(r * a.even, r * a.odd)

    def equal(self, a: DirectSumElement, b: DirectSumElement) -> bool:
        return torch.equal(a.even, b.even) and torch.equal(a.odd, b.odd)

    def __repr__(self):
        return f"GradedDirectSum({self.algebra!r})"
