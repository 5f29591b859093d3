"""
Facts derived from the graded decomposition.
"""

import logging
import torch

from ..errors import InvariantViolationError
from .certificate import Certificate
from .decomposition import GradedDecomposition
from .grade import GRADES, GradeIndex
from .lattice import GradingLattice
from .submodule import Submodule

logger = logging.getLogger(__name__)


def complementary(decomposition: GradedDecomposition) -> Certificate:
    """
    GradedPiece(0) and GradedPiece(1) are complementary submodules.

    Their sum is the whole algebra and their intersection is zero. The
    decomposition additionally sends every basis element of a piece to that
    piece's own slot, which is the internal direct sum statement for the two
    distinct grades.
    """
    if len(set(GRADES)) != 2 or GradeIndex.EVEN == GradeIndex.ODD:
        raise InvariantViolationError("GradeIndex must have exactly two distinct members")

    algebra = decomposition.algebra
    even = decomposition.piece(GradeIndex.EVEN).submodule
    odd = decomposition.piece(GradeIndex.ODD).submodule

    if not (even + odd) == Submodule.top(algebra):
        raise InvariantViolationError("GradedPiece(0) + GradedPiece(1) is not the whole algebra")
    if not even.is_disjoint(odd):
        raise InvariantViolationError("GradedPiece(0) and GradedPiece(1) intersect nontrivially")

    for grade, piece in ((GradeIndex.EVEN, even), (GradeIndex.ODD, odd)):
        other = GradeIndex.ODD if grade == GradeIndex.EVEN else GradeIndex.EVEN
        for x in piece.basis:
            if torch.any(decomposition.component(x, other)):
                raise InvariantViolationError(
                    f"{grade} element {x.tolist()} has a nonzero {other} component"
                )

    certificate = Certificate(
        statement="GradedPiece(0) ⊕ GradedPiece(1) = Cl(Q)",
        evidence={'even_rank': even.rank(), 'odd_rank': odd.rank(), 'dim': algebra.dim},
    )
    logger.debug("certified %s", certificate)
    return certificate


def generators_exhaust_algebra(lattice: GradingLattice) -> Certificate:
    """
    The supremum of ι(M)^n over all n is the whole algebra.

    The sigma family of pairs (i, n) with n = i mod 2 maps onto the word
    lengths 0..N by (i, n) -> n, so the double supremum over grades and
    compatible lengths equals the single supremum over lengths.
    """
    pairs = [
        (grade, n)
        for grade in GRADES
        for n in lattice.graded_piece(grade).lengths
    ]
    longest = max(n for _, n in pairs)
    image = {n for _, n in pairs}
    for n in range(longest + 1):
        if n not in image:
            # Lengths past a piece's stable point add nothing to it
            piece = lattice.graded_piece(GradeIndex.of_length(n))
            if not lattice.power(n) <= piece.submodule:
                raise InvariantViolationError(f"ι(M)^{n} escapes its graded piece")

    double_sup = Submodule.bottom(lattice.algebra)
    for _, n in pairs:
        double_sup = double_sup + lattice.power(n)
    single_sup = lattice.filtration(longest)
    top = Submodule.top(lattice.algebra)

    if not double_sup == single_sup:
        raise InvariantViolationError("reindexed supremum differs from the word-length supremum")
    if not single_sup == top:
        raise InvariantViolationError("products of generators do not span the algebra")

    certificate = Certificate(
        statement="sup_n ι(M)^n = Cl(Q)",
        evidence={'pairs': [(int(g), n) for g, n in pairs], 'max_length': longest},
    )
    logger.debug("certified %s", certificate)
    return certificate


def round_trip(decomposition: GradedDecomposition, x: torch.Tensor) -> torch.Tensor:
    """Decompose x into its graded parts and add them back together."""
    return decomposition.recombine(decomposition.decompose(x))
