"""
Tests for the grading lattice and the graded monoid laws.
"""

import pytest
import torch

from cliffgrade.algebra import CliffordAlgebra, QuadraticForm, even_part, odd_part
from cliffgrade.config import EngineConfig
from cliffgrade.errors import (
    FiltrationDidNotStabilizeError,
    GradeIndexOutOfRangeError,
    GradeMembershipError,
)
from cliffgrade.grading import GradeIndex, GradedMonoidWitness, GradingLattice, Submodule

from .helpers import random_element, random_member, random_vector


@pytest.fixture
def lattice(algebra) -> GradingLattice:
    return GradingLattice(algebra)


# =============================================================================
# Graded pieces
# =============================================================================

class TestGradedPieces:

    def test_unit_is_even_not_odd(self, lattice):
        one = lattice.algebra.one()
        assert one in lattice.graded_piece(0)
        assert one not in lattice.graded_piece(1)

    def test_generator_images_are_odd(self, lattice, rng):
        algebra = lattice.algebra
        for _ in range(5):
            v = random_vector(algebra, rng)
            assert algebra.embed(v) in lattice.graded_piece(GradeIndex.ODD)

    def test_generator_pairs_are_even(self, lattice, rng):
        algebra = lattice.algebra
        for _ in range(5):
            v1, v2 = random_vector(algebra, rng), random_vector(algebra, rng)
            product = algebra.geometric_product(algebra.embed(v1), algebra.embed(v2))
            assert product in lattice.graded_piece(GradeIndex.EVEN)

    def test_pieces_match_blade_parity(self, lattice, rng):
        algebra = lattice.algebra
        x = random_element(algebra, rng)
        assert even_part(x, algebra) in lattice.graded_piece(0)
        assert odd_part(x, algebra) in lattice.graded_piece(1)
        assert Submodule.span(algebra, [even_part(algebra.blade(m), algebra) for m in range(algebra.dim)]) \
            == lattice.graded_piece(0).submodule

    def test_even_piece_includes_empty_word(self):
        """For Q = 2x^2 the square ι(M)^2 misses 1, the supremum does not."""
        lattice = GradingLattice(CliffordAlgebra(QuadraticForm.diagonal([2])))
        one = lattice.algebra.one()
        assert not lattice.power(2).contains(one)
        assert lattice.graded_piece(0).contains(one)
        assert lattice.graded_piece(0).lengths == (0,)

    def test_exterior_algebra_needs_length_two(self):
        lattice = GradingLattice(CliffordAlgebra(QuadraticForm.diagonal([0, 0])))
        assert lattice.graded_piece(0).lengths == (0, 2)
        assert lattice.graded_piece(1).lengths == (1,)
        assert lattice.power(3).is_bottom()

    def test_trivial_module_has_no_odd_part(self):
        lattice = GradingLattice(CliffordAlgebra(QuadraticForm.diagonal([])))
        assert lattice.graded_piece(1).submodule.is_bottom()
        assert lattice.graded_piece(0).submodule.rank() == 1

    def test_fractional_unit_is_rejected_by_both_pieces(self, euclidean):
        lattice = GradingLattice(euclidean)
        half = 0.5 * euclidean.one().double()
        for grade in (0, 1):
            with pytest.raises(ValueError, match="integers"):
                lattice.graded_piece(grade).contains(half)

    def test_batched_element_is_rejected(self, euclidean):
        lattice = GradingLattice(euclidean)
        batch = torch.stack([euclidean.one(), euclidean.generator(0)])
        with pytest.raises(ValueError, match="shape"):
            lattice.graded_piece(0).contains(batch)

    def test_piece_is_cached(self, lattice):
        assert lattice.graded_piece(0) is lattice.graded_piece(GradeIndex.EVEN)

    def test_bad_grade_rejected(self, lattice):
        with pytest.raises(GradeIndexOutOfRangeError):
            lattice.graded_piece(2)

    def test_small_length_bound_raises(self, euclidean):
        lattice = GradingLattice(euclidean, EngineConfig(max_word_length=1))
        with pytest.raises(FiltrationDidNotStabilizeError):
            lattice.graded_piece(0)


# =============================================================================
# Membership witnesses
# =============================================================================

class TestMembershipWitness:

    def test_witness_recombines_exactly(self, lattice, rng):
        for grade in (0, 1):
            piece = lattice.graded_piece(grade)
            x = random_member(piece.submodule, rng)
            witness = piece.witness(x)
            assert torch.equal(witness.evaluate(), x)
            assert all(n % 2 == grade for n in witness.lengths)

    def test_witness_of_non_member_raises(self, euclidean):
        piece = GradingLattice(euclidean).graded_piece(GradeIndex.ODD)
        with pytest.raises(GradeMembershipError):
            piece.witness(euclidean.one())


# =============================================================================
# Graded monoid laws
# =============================================================================

class TestGradedMonoid:

    def test_certify_issues_five_certificates(self, lattice):
        certificates = GradedMonoidWitness(lattice).certify()
        assert len(certificates) == 5
        assert certificates[0].statement == "1 ∈ GradedPiece(0)"

    def test_odd_times_odd_statement(self, lattice):
        certificate = GradedMonoidWitness(lattice).closure_under_product(1, 1)
        assert certificate.statement == "GradedPiece(1) * GradedPiece(1) ⊆ GradedPiece(0)"
        assert certificate.evidence['length_pairs']

    @pytest.mark.parametrize("i,j", [(0, 0), (0, 1), (1, 0), (1, 1)])
    def test_random_products_land_in_sum_grade(self, lattice, rng, i, j):
        algebra = lattice.algebra
        target = lattice.graded_piece(GradeIndex(i) + GradeIndex(j))
        for _ in range(5):
            a = random_member(lattice.graded_piece(i).submodule, rng)
            b = random_member(lattice.graded_piece(j).submodule, rng)
            assert algebra.geometric_product(a, b) in target

    def test_certify_runs_once(self, lattice):
        witness = GradedMonoidWitness(lattice)
        first, second = witness.certify(), witness.certify()
        assert first is not second
        assert all(a is b for a, b in zip(first, second))

    def test_out_of_range_grade(self, lattice):
        with pytest.raises(GradeIndexOutOfRangeError):
            GradedMonoidWitness(lattice).closure_under_product(0, 2)
