"""
The grading lattice: even and odd pieces of Cl(Q).

GradedPiece(i) is the supremum, over all word lengths n with n = i mod 2, of
the n-fold product submodule ι(M)^n. The supremum is computed as the limit
of the partial sums

    S_n = ι(M)^i + ι(M)^(i+2) + ... + ι(M)^n

which is reached as soon as S_{n+2} = S_n: then
ι(M)^(n+4) = ι(M)^(n+2) ι(M)^2 ⊆ S_n ι(M)^2 ⊆ S_{n+2}, and so on upwards.
"""

import logging
import torch
from dataclasses import dataclass
from typing import Dict, List, Tuple

from ..algebra.clifford import CliffordAlgebra
from ..config import EngineConfig, get_default_config
from ..errors import FiltrationDidNotStabilizeError, GradeMembershipError
from .grade import GradeIndex
from .submodule import Submodule

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class MembershipWitness:
    """
    Constructive evidence that an element lies in a graded piece.

    Attributes:
        algebra: Ambient algebra
        grade: Piece the element belongs to
        terms: (coefficient, word) pairs; every word has length = grade mod 2
    """
    algebra: CliffordAlgebra
    grade: GradeIndex
    terms: Tuple[Tuple[int, Tuple[int, ...]], ...]

    @property
    def lengths(self) -> List[int]:
        return sorted({len(word) for _, word in self.terms})

    def evaluate(self) -> torch.Tensor:
        """Recombine the terms by multiplying out the generator images."""
        result = self.algebra.zero()
        for coef, word in self.terms:
            result = result + coef * self.algebra.word_product(word)
        return result


class GradedPiece:
    """
    Supremum of ι(M)^n over n = grade mod 2.

    Attributes:
        grade: GradeIndex of the piece
        lengths: Word lengths whose powers were needed to reach the supremum
        submodule: The supremum as a Submodule
    """

    def __init__(self, lattice: 'GradingLattice', grade: GradeIndex,
                 lengths: Tuple[int, ...], submodule: Submodule):
        self.lattice = lattice
        self.grade = grade
        self.lengths = lengths
        self.submodule = submodule

    @property
    def algebra(self) -> CliffordAlgebra:
        return self.lattice.algebra

    def contains(self, x: torch.Tensor) -> bool:
        return self.submodule.contains(x)

    def __contains__(self, x: torch.Tensor) -> bool:
        return self.contains(x)

    def require(self, x: torch.Tensor) -> torch.Tensor:
        """Return x unchanged, or raise if it is not in this piece."""
        if not self.contains(x):
            raise GradeMembershipError(f"Element {x.tolist()} is not in the {self.grade} piece")
        return x

    def witness(self, x: torch.Tensor) -> MembershipWitness:
        """
        Write x as a combination of generator words of this piece's parity.

        Raises:
            GradeMembershipError: if x is not in the piece
        """
        self.require(x)
        terms = tuple(self.algebra.blade_terms(x))
        for _, word in terms:
            if len(word) % 2 != int(self.grade):
                raise GradeMembershipError(
                    f"Word {word} of length {len(word)} found in the {self.grade} piece"
                )
        return MembershipWitness(self.algebra, self.grade, terms)

    def __repr__(self):
        return f"GradedPiece({self.grade}, lengths={self.lengths}, rank={self.submodule.rank()})"


class GradingLattice:
    """
    Word-length filtration of Cl(Q) and the two graded pieces built from it.

    Attributes:
        algebra: CliffordAlgebra being graded
        generator_range: ι(M) as a Submodule
    """

    def __init__(self, algebra: CliffordAlgebra, config: EngineConfig = None):
        self.algebra = algebra
        self.config = config or get_default_config()
        self.generator_range = Submodule.span(
            algebra, [algebra.generator(k) for k in range(algebra.d)]
        )
        self._powers: Dict[int, Submodule] = {
            0: Submodule.span(algebra, [algebra.one()]),
        }
        self._pieces: Dict[GradeIndex, GradedPiece] = {}

    def power(self, n: int) -> Submodule:
        """ι(M)^n, cached; ι(M)^0 is the scalar submodule Z * 1."""
        if n < 0:
            raise ValueError(f"Word length must be non-negative, got {n}")
        if n not in self._powers:
            self._powers[n] = self.power(n - 1) * self.generator_range
        return self._powers[n]

    def graded_piece(self, grade) -> GradedPiece:
        """GradedPiece(grade), computed once."""
        grade = GradeIndex.coerce(grade)
        if grade not in self._pieces:
            self._pieces[grade] = self._stabilize(grade)
        return self._pieces[grade]

    def _stabilize(self, grade: GradeIndex) -> GradedPiece:
        n = int(grade)
        lengths = [n]
        partial = self.power(n)
        while True:
            if n + 2 > self.config.max_word_length:
                raise FiltrationDidNotStabilizeError(
                    f"{grade} filtration still growing at word length {n}"
                )
            extended = partial + self.power(n + 2)
            if extended == partial:
                break
            n += 2
            lengths.append(n)
            partial = extended

        logger.debug(
            "%s piece of %r stabilized at word length %d (rank %d)",
            grade, self.algebra, n, partial.rank(),
        )
        return GradedPiece(self, grade, tuple(lengths), partial)

    def filtration(self, max_length: int) -> Submodule:
        """Sum of ι(M)^n for all n <= max_length, regardless of parity."""
        result = Submodule.bottom(self.algebra)
        for n in range(max_length + 1):
            result = result + self.power(n)
        return result
