"""
Clifford algebra Cl(Q) of an integral quadratic form, with exact arithmetic.

The algebra is the free associative Z-algebra on generators ι(e_0), ...,
ι(e_{d-1}) modulo ι(v)^2 = Q(v). As a Z-module it is free of rank 2^d.

Key insight: Basis elements are indexed by subsets of {0,1,...,d-1}.
- Index 0 = scalar (empty set)
- Index 1 = e_0, Index 2 = e_1, Index 4 = e_2, etc. (single generators)
- Index 3 = e_0 e_1, Index 5 = e_0 e_2, etc. (ordered products)

For a non-diagonal form the product of two blades is generally a
combination of several blades, so the multiplication table holds full
structure constants rather than a single sign per pair.
"""

import torch
import numpy as np
from functools import lru_cache
from typing import Callable, Dict, List, Sequence, Tuple

from ..errors import MalformedLiftTargetError
from .integral import as_integer_scalar, as_integer_tensor
from .quadratic_form import QuadraticForm
from .target import AlgebraHom, AlgebraTarget


Word = Tuple[int, ...]


class CliffordAlgebra(AlgebraTarget):
    """
    Clifford algebra Cl(Q) over the integers with precomputed multiplication.

    Elements are long tensors [..., dim] of blade coefficients.

    Attributes:
        form: QuadraticForm defining the relation ι(v)^2 = Q(v)
        d: Number of generators
        dim: Total algebra rank = 2^d
        cayley_table: [dim, dim, dim] structure constants, e_I e_J = sum_K c_IJK e_K
        grades: [dim] word length of each basis blade
        parity_masks: Dict[int, Tensor] boolean mask for even (0) / odd (1) blades
    """

    def __init__(self, form: QuadraticForm, device: str = 'cpu'):
        """
        Initialize Cl(Q).

        Args:
            form: Integral quadratic form on Z^d
            device: Device for tensors ('cpu' or 'cuda')
        """
        self.form = form
        self.d = form.d
        self.dim = 2 ** form.d
        self.device = device

        self._diagonal = [int(q) for q in torch.diagonal(form.coefficients).tolist()]
        self._polar = form.polar_matrix().tolist()
        self._word_cache: Dict[Word, Dict[int, int]] = {}

        # Build Cayley table and grade structure
        self.cayley_table = self._build_cayley_table().to(device)
        self.grades = self._compute_grades().to(device)
        self.parity_masks = {
            parity: (self.grades % 2) == parity
            for parity in (0, 1)
        }

    # ------------------------------------------------------------------
    # Multiplication structure
    # ------------------------------------------------------------------

    def _build_cayley_table(self) -> torch.Tensor:
        """
        Build the structure constants of the geometric product.

        Returns:
            [dim, dim, dim] long tensor with table[i, j, k] the coefficient of
            e_k in e_i * e_j
        """
        dim = self.dim
        table = np.zeros((dim, dim, dim), dtype=np.int64)

        for i in range(dim):
            for j in range(dim):
                for k, coef in self._multiply_basis(i, j).items():
                    table[i, j, k] = coef

        return torch.from_numpy(table)

    def _multiply_basis(self, i: int, j: int) -> Dict[int, int]:
        """
        Multiply two basis blades represented as bit patterns.

        Args:
            i: Bit pattern for first blade
            j: Bit pattern for second blade

        Returns:
            {blade_index: coefficient} expansion of e_i * e_j
        """
        word = tuple(self._bits_to_indices(i)) + tuple(self._bits_to_indices(j))
        return self._reduce_word(word)

    def _reduce_word(self, word: Word) -> Dict[int, int]:
        """
        Rewrite a word in the generators into normal form.

        Uses e_a e_a = Q(e_a) and e_a e_b = -e_b e_a + B(e_a, e_b) for a > b.
        Each rewrite either removes an inversion or shortens the word by two,
        so the recursion terminates.
        """
        cached = self._word_cache.get(word)
        if cached is not None:
            return cached

        result: Dict[int, int] = {}
        for k in range(len(word) - 1):
            a, b = word[k], word[k + 1]
            if a < b:
                continue
            rest = word[:k] + word[k + 2:]
            if a == b:
                _accumulate(result, self._reduce_word(rest), self._diagonal[a])
            else:
                swapped = word[:k] + (b, a) + word[k + 2:]
                _accumulate(result, self._reduce_word(swapped), -1)
                _accumulate(result, self._reduce_word(rest), self._polar[a][b])
            break
        else:
            result[self._indices_to_bits(word)] = 1

        result = {blade: coef for blade, coef in result.items() if coef != 0}
        self._word_cache[word] = result
        return result

    def _bits_to_indices(self, n: int) -> list:
        """Convert bit pattern to list of set indices."""
        indices = []
        pos = 0
        while n:
            if n & 1:
                indices.append(pos)
            n >>= 1
            pos += 1
        return indices

    @staticmethod
    def _indices_to_bits(indices: Sequence[int]) -> int:
        bits = 0
        for k in indices:
            bits |= 1 << k
        return bits

    def _compute_grades(self) -> torch.Tensor:
        """Compute grade (number of generators) for each blade."""
        grades = torch.zeros(self.dim, dtype=torch.long)
        for i in range(self.dim):
            grades[i] = bin(i).count('1')
        return grades

    # ------------------------------------------------------------------
    # AlgebraTarget interface
    # ------------------------------------------------------------------

    def geometric_product(self, x: torch.Tensor, y: torch.Tensor) -> torch.Tensor:
        """
        Compute geometric product of multivectors x and y.

        Args:
            x: [..., dim] first multivector
            y: [..., dim] second multivector

        Returns:
            [..., dim] geometric product x * y
        """
        # x[..., i] * y[..., j] contributes table[i, j, k] to result[..., k]
        products = x.unsqueeze(-1) * y.unsqueeze(-2)  # [..., dim, dim]
        return (products.unsqueeze(-1) * self.cayley_table).sum(dim=(-3, -2))

    def one(self) -> torch.Tensor:
        return self.blade(0)

    def zero(self) -> torch.Tensor:
        return torch.zeros(self.dim, dtype=torch.long, device=self.device)

    def add(self, a: torch.Tensor, b: torch.Tensor) -> torch.Tensor:
        return a + b

    def mul(self, a: torch.Tensor, b: torch.Tensor) -> torch.Tensor:
        return self.geometric_product(a, b)

    def smul(self, r: int, a: torch.Tensor) -> torch.Tensor:
        return as_integer_scalar(r) * a

    def equal(self, a: torch.Tensor, b: torch.Tensor) -> bool:
        return torch.equal(a, b)

    def algebra_map(self, r) -> torch.Tensor:
        """
        Unit map Z -> Cl(Q).

        Args:
            r: [...] integer scalars (or a python int)

        Returns:
            [..., dim] scalar multivectors r * 1

        Raises:
            ValueError: for floating point or complex scalars
        """
        r = as_integer_tensor(r, device=self.device)
        result = torch.zeros(*r.shape, self.dim, dtype=torch.long, device=self.device)
        result[..., 0] = r
        return result

    # ------------------------------------------------------------------
    # Generators
    # ------------------------------------------------------------------

    def embed(self, v: torch.Tensor) -> torch.Tensor:
        """
        Generator embedding ι: Z^d -> Cl(Q).

        Args:
            v: [..., d] vector

        Returns:
            [..., dim] multivector with vector components set

        Raises:
            ValueError: for floating point or complex vectors
        """
        v = as_integer_tensor(v, device=self.device)
        batch_shape = v.shape[:-1]
        result = torch.zeros(*batch_shape, self.dim, dtype=torch.long, device=self.device)

        # Vector components are at indices 2^0, 2^1, ..., 2^(d-1)
        for i in range(self.d):
            result[..., 2**i] = v[..., i]

        return result

    def extract_vector(self, x: torch.Tensor) -> torch.Tensor:
        """
        Extract the vector part as a d-dimensional vector.

        Args:
            x: [..., dim] multivector

        Returns:
            [..., d] vector components
        """
        batch_shape = x.shape[:-1]
        result = torch.zeros(*batch_shape, self.d, dtype=torch.long, device=x.device)

        for i in range(self.d):
            result[..., i] = x[..., 2**i]

        return result

    def scalar_part(self, x: torch.Tensor) -> torch.Tensor:
        """Extract scalar (grade-0) component."""
        return x[..., 0]

    def blade(self, mask: int) -> torch.Tensor:
        """Basis blade e_I for the subset encoded by ``mask``."""
        if not 0 <= mask < self.dim:
            raise ValueError(f"Blade index {mask} out of range for dim {self.dim}")
        result = self.zero()
        result[mask] = 1
        return result

    def blade_indices(self, mask: int) -> List[int]:
        """Generators whose ordered product is the blade ``mask``."""
        return self._bits_to_indices(mask)

    def blade_terms(self, x: torch.Tensor) -> List[Tuple[int, Word]]:
        """Nonzero (coefficient, word) pairs with x = sum coef * word_product(word)."""
        return [
            (coef, tuple(self.blade_indices(mask)))
            for mask, coef in enumerate(x.tolist())
            if coef != 0
        ]

    def generator(self, k: int) -> torch.Tensor:
        """ι(e_k)."""
        return self.embed(self.form.basis_vector(k))

    def word_product(self, word: Sequence[int]) -> torch.Tensor:
        """Ordered product ι(e_{w0}) ι(e_{w1}) ... computed with the geometric product."""
        result = self.one()
        for k in word:
            result = self.geometric_product(result, self.generator(k))
        return result

    # ------------------------------------------------------------------
    # Universal property
    # ------------------------------------------------------------------

    def lift(self, target: AlgebraTarget, f: Callable[[torch.Tensor], object]) -> AlgebraHom:
        """
        Extend a linear map f: Z^d -> A with f(v)^2 = Q(v) to Cl(Q) -> A.

        Only the basis images f(e_k) are read, so f is taken to be linear.
        For such f the squared relation on all vectors is equivalent to
        f(e_a)^2 = Q(e_a) together with f(e_a) f(e_b) + f(e_b) f(e_a) = B(e_a, e_b).

        Args:
            target: Associative unital algebra to map into
            f: Module map, called on the standard basis vectors

        Returns:
            The unique algebra homomorphism extending f

        Raises:
            MalformedLiftTargetError: if f violates the squared relation
        """
        images = [f(self.form.basis_vector(k)) for k in range(self.d)]
        self._check_lift_target(target, images)
        return AlgebraHom(self, target, images)

    def _check_lift_target(self, target: AlgebraTarget, images: Sequence[object]):
        for a in range(self.d):
            square = target.mul(images[a], images[a])
            if not target.equal(square, target.algebra_map(self._diagonal[a])):
                raise MalformedLiftTargetError(
                    f"f(e_{a})^2 does not equal Q(e_{a}) = {self._diagonal[a]}"
                )
            for b in range(a + 1, self.d):
                anticommutator = target.add(
                    target.mul(images[a], images[b]),
                    target.mul(images[b], images[a]),
                )
                if not target.equal(anticommutator, target.algebra_map(self._polar[a][b])):
                    raise MalformedLiftTargetError(
                        f"f(e_{a}) f(e_{b}) + f(e_{b}) f(e_{a}) does not equal "
                        f"B(e_{a}, e_{b}) = {self._polar[a][b]}"
                    )

    def __repr__(self):
        return f"CliffordAlgebra({self.form!r})"


def _accumulate(into: Dict[int, int], terms: Dict[int, int], scale: int):
    if scale == 0:
        return
    for blade, coef in terms.items():
        into[blade] = into.get(blade, 0) + scale * coef


# Cached algebra instances
@lru_cache(maxsize=8)
def get_algebra(form: QuadraticForm, device: str = 'cpu') -> CliffordAlgebra:
    """Get cached CliffordAlgebra instance."""
    return CliffordAlgebra(form, device)
