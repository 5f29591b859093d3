"""
Tests for the Clifford algebra collaborators: quadratic forms, the
generator embedding, structure constants and the lift operator.
"""

import pytest
import torch

from cliffgrade.algebra import (
    CliffordAlgebra,
    MatrixAlgebra,
    QuadraticForm,
    get_algebra,
    grade_involution,
    involution_hom,
    even_part,
    odd_part,
)
from cliffgrade.errors import MalformedLiftTargetError

from .helpers import random_element, random_vector


# =============================================================================
# Quadratic forms
# =============================================================================

class TestQuadraticForm:

    def test_lower_triangle_folds_into_upper(self):
        folded = QuadraticForm([[1, 0], [3, 2]])
        assert folded == QuadraticForm([[1, 3], [0, 2]])
        assert hash(folded) == hash(QuadraticForm([[1, 3], [0, 2]]))

    def test_evaluation(self):
        form = QuadraticForm([[1, 1, 0], [0, 2, 1], [0, 0, -1]])
        v = torch.tensor([1, 2, 0])
        # 1 + 1*2 + 2*4
        assert int(form(v)) == 11

    def test_batched_evaluation(self):
        form = QuadraticForm.diagonal([1, -1])
        values = form(torch.tensor([[1, 0], [0, 1], [2, 3]]))
        assert values.tolist() == [1, -1, -5]

    def test_scaling_law(self):
        form = QuadraticForm([[1, 1, 0], [0, 2, 1], [0, 0, -1]])
        v = torch.tensor([1, -2, 3])
        assert int(form(3 * v)) == 9 * int(form(v))

    def test_polar_matches_matrix(self):
        form = QuadraticForm([[1, 1, 0], [0, 2, 1], [0, 0, -1]])
        gram = form.polar_matrix()
        x = torch.tensor([1, 0, 2])
        y = torch.tensor([0, 3, -1])
        expected = (x.unsqueeze(-1) * gram * y.unsqueeze(-2)).sum()
        assert int(form.polar(x, y)) == int(expected)

    def test_rejects_float_coefficients(self):
        with pytest.raises(ValueError, match="integers"):
            QuadraticForm(torch.eye(2))

    def test_rejects_non_square(self):
        with pytest.raises(ValueError, match="square"):
            QuadraticForm([[1, 2, 3]])

    def test_basis_vector_out_of_range(self):
        with pytest.raises(ValueError):
            QuadraticForm.diagonal([1, 1]).basis_vector(2)

    def test_rejects_float_vectors(self):
        form = QuadraticForm.diagonal([1, 1])
        with pytest.raises(ValueError, match="integers"):
            form(torch.tensor([0.5, 1.7]))
        with pytest.raises(ValueError, match="integers"):
            form.polar(torch.tensor([1, 0]), torch.tensor([0.0, 1.0]))
        with pytest.raises(ValueError, match="integers"):
            QuadraticForm.diagonal([0.5, 1])


# =============================================================================
# Multiplication
# =============================================================================

class TestGeometricProduct:

    def test_dimension(self, algebra):
        assert algebra.dim == 2 ** algebra.d
        assert algebra.cayley_table.shape == (algebra.dim,) * 3

    def test_defining_relation(self, algebra, rng):
        """ι(v)^2 = Q(v) * 1 for every vector."""
        for _ in range(10):
            v = random_vector(algebra, rng)
            square = algebra.geometric_product(algebra.embed(v), algebra.embed(v))
            assert torch.equal(square, algebra.algebra_map(algebra.form(v)))

    def test_associativity(self, algebra, rng):
        for _ in range(5):
            x, y, z = (random_element(algebra, rng) for _ in range(3))
            gp = algebra.geometric_product
            assert torch.equal(gp(gp(x, y), z), gp(x, gp(y, z)))

    def test_unit(self, algebra, rng):
        x = random_element(algebra, rng)
        assert torch.equal(algebra.geometric_product(algebra.one(), x), x)
        assert torch.equal(algebra.geometric_product(x, algebra.one()), x)

    def test_euclidean_anticommutation(self, euclidean):
        e0, e1 = euclidean.generator(0), euclidean.generator(1)
        assert torch.equal(euclidean.geometric_product(e0, e1), euclidean.blade(3))
        assert torch.equal(euclidean.geometric_product(e1, e0), -euclidean.blade(3))
        assert torch.equal(euclidean.geometric_product(e0, e0), euclidean.one())

    def test_non_diagonal_anticommutator_is_polar_form(self, non_diagonal):
        gram = non_diagonal.form.polar_matrix()
        for a in range(3):
            for b in range(3):
                ea, eb = non_diagonal.generator(a), non_diagonal.generator(b)
                anti = non_diagonal.geometric_product(ea, eb) + non_diagonal.geometric_product(eb, ea)
                assert torch.equal(anti, non_diagonal.algebra_map(gram[a, b]))

    def test_batched_product(self, euclidean, rng):
        xs = torch.stack([random_element(euclidean, rng) for _ in range(4)])
        ys = torch.stack([random_element(euclidean, rng) for _ in range(4)])
        batched = euclidean.geometric_product(xs, ys)
        for k in range(4):
            assert torch.equal(batched[k], euclidean.geometric_product(xs[k], ys[k]))

    def test_blade_is_word_product(self, algebra):
        for mask in range(algebra.dim):
            word = algebra.blade_indices(mask)
            assert torch.equal(algebra.word_product(word), algebra.blade(mask))

    def test_embed_extract_roundtrip(self, algebra, rng):
        v = random_vector(algebra, rng)
        assert torch.equal(algebra.extract_vector(algebra.embed(v)), v)

    def test_embedding_rejects_floats(self, euclidean):
        with pytest.raises(ValueError, match="integers"):
            euclidean.embed(torch.tensor([0.5, 1.7]))
        with pytest.raises(ValueError, match="integers"):
            euclidean.algebra_map(0.5)
        with pytest.raises(ValueError, match="integers"):
            euclidean.smul(0.5, euclidean.one())

    def test_neg_is_additive_inverse(self, algebra, rng):
        x = random_element(algebra, rng)
        assert torch.equal(algebra.add(x, algebra.neg(x)), algebra.zero())

    def test_get_algebra_is_cached(self):
        form = QuadraticForm.diagonal([1, 1])
        assert get_algebra(form) is get_algebra(QuadraticForm.diagonal([1, 1]))


# =============================================================================
# Lift operator
# =============================================================================

SIGMA_Z = torch.tensor([[1, 0], [0, -1]])
J = torch.tensor([[0, 1], [-1, 0]])


class TestLift:

    def test_lift_into_matrices_is_multiplicative(self, rng):
        algebra = CliffordAlgebra(QuadraticForm.diagonal([1, -1]))
        matrices = MatrixAlgebra(2)
        hom = algebra.lift(matrices, lambda v: int(v[0]) * SIGMA_Z + int(v[1]) * J)

        for _ in range(5):
            x = random_element(algebra, rng)
            y = random_element(algebra, rng)
            assert torch.equal(
                hom(algebra.geometric_product(x, y)),
                matrices.mul(hom(x), hom(y)),
            )
        assert torch.equal(hom(algebra.one()), matrices.one())

    def test_lift_extends_the_map(self):
        algebra = CliffordAlgebra(QuadraticForm.diagonal([1, -1]))
        hom = algebra.lift(MatrixAlgebra(2), lambda v: int(v[0]) * SIGMA_Z + int(v[1]) * J)
        v = torch.tensor([2, -5])
        assert torch.equal(hom(algebra.embed(v)), 2 * SIGMA_Z - 5 * J)
        assert torch.equal(hom.on_vector(v), 2 * SIGMA_Z - 5 * J)

    def test_wrong_square_is_rejected(self):
        algebra = CliffordAlgebra(QuadraticForm.diagonal([1, -1]))
        sigma_x = torch.tensor([[0, 1], [1, 0]])
        with pytest.raises(MalformedLiftTargetError, match="e_1"):
            algebra.lift(MatrixAlgebra(2), lambda v: int(v[0]) * SIGMA_Z + int(v[1]) * sigma_x)

    def test_wrong_anticommutator_is_rejected(self):
        algebra = CliffordAlgebra(QuadraticForm.diagonal([1, 1]))
        with pytest.raises(MalformedLiftTargetError, match="B\\(e_0, e_1\\)"):
            algebra.lift(MatrixAlgebra(2), lambda v: int(v.sum()) * SIGMA_Z)

    def test_lift_of_embedding_is_identity(self, algebra, rng):
        identity = algebra.lift(algebra, algebra.embed)
        x = random_element(algebra, rng)
        assert torch.equal(identity(x), x)

    def test_hom_rejects_batches_and_floats(self, euclidean):
        hom = euclidean.lift(euclidean, euclidean.embed)
        batch = torch.stack([euclidean.one(), euclidean.generator(0)])
        with pytest.raises(ValueError, match="shape"):
            hom(batch)
        with pytest.raises(ValueError, match="integers"):
            hom(0.5 * euclidean.one().double())
        with pytest.raises(ValueError, match="shape"):
            hom.on_vector(torch.tensor([1, 0, 0]))
        with pytest.raises(ValueError, match="integers"):
            hom.on_vector(torch.tensor([0.5, 0.0]))

    def test_uniqueness_by_generators(self, algebra):
        first = algebra.lift(algebra, algebra.embed)
        second = algebra.lift(algebra, lambda v: algebra.embed(v))
        assert first.agrees_on_generators(second)


# =============================================================================
# Parity operations
# =============================================================================

class TestParityOperations:

    def test_involution_hom_matches_sign_flip(self, algebra, rng):
        alpha = involution_hom(algebra)
        for _ in range(5):
            x = random_element(algebra, rng)
            assert torch.equal(alpha(x), grade_involution(x, algebra))

    def test_parts_sum_to_element(self, algebra, rng):
        x = random_element(algebra, rng)
        assert torch.equal(even_part(x, algebra) + odd_part(x, algebra), x)

    def test_involution_fixes_even_negates_odd(self, algebra, rng):
        x = random_element(algebra, rng)
        assert torch.equal(grade_involution(even_part(x, algebra), algebra), even_part(x, algebra))
        assert torch.equal(grade_involution(odd_part(x, algebra), algebra), -odd_part(x, algebra))
