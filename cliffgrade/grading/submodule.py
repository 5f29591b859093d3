"""
Z-submodules of a Clifford algebra.

A submodule is stored by a canonical echelon basis: the columns of the
Hermite normal form of any spanning set. Membership is decided by
back-substitution against that basis, which also yields the integer
coordinates that witness it.
"""

import numpy as np
import torch
from sympy import Matrix
from sympy.matrices.normalforms import hermite_normal_form
from typing import Iterable, List, Optional

from ..algebra.clifford import CliffordAlgebra
from ..algebra.integral import as_integer_tensor


def _echelon_basis(columns: List[List[int]], dim: int) -> List[List[int]]:
    """
    Hermite normal form basis of the lattice spanned by ``columns``.

    Returned columns are sorted so that pivot rows (bottom-most nonzero
    entry) increase with the column position.
    """
    columns = [c for c in columns if any(c)]
    if not columns:
        return []

    # Zero padding to at least ``dim`` columns so every row gets a pivot pass
    padded = columns + [[0] * dim for _ in range(max(0, dim - len(columns)))]
    matrix = Matrix(dim, len(padded), lambda r, c: padded[c][r])
    hnf = hermite_normal_form(matrix)

    basis = []
    for c in range(hnf.shape[1]):
        column = [int(hnf[r, c]) for r in range(dim)]
        if any(column):
            basis.append(column)
    basis.sort(key=_pivot_row)
    return basis


def _pivot_row(column: List[int]) -> int:
    for r in range(len(column) - 1, -1, -1):
        if column[r] != 0:
            return r
    return -1


def _solve(basis: List[List[int]], target: List[int]) -> Optional[List[int]]:
    """Integer coordinates of ``target`` in an echelon basis, or None."""
    residual = list(target)
    coords = [0] * len(basis)
    for j in range(len(basis) - 1, -1, -1):
        column = basis[j]
        p = _pivot_row(column)
        if any(residual[p + 1:]):
            return None
        q, rem = divmod(residual[p], column[p])
        if rem:
            return None
        coords[j] = q
        if q:
            residual = [a - q * b for a, b in zip(residual, column)]
    if any(residual):
        return None
    return coords


class Submodule:
    """
    Finitely generated Z-submodule of Cl(Q).

    Attributes:
        algebra: Ambient CliffordAlgebra
        basis: Canonical echelon basis as [dim] long tensors
    """

    def __init__(self, algebra: CliffordAlgebra, generators: Iterable[torch.Tensor] = ()):
        self.algebra = algebra
        columns = [as_integer_tensor(g).reshape(-1).tolist() for g in generators]
        for column in columns:
            assert len(column) == algebra.dim, \
                f"Generator has {len(column)} components, expected {algebra.dim}"
        self._columns = _echelon_basis(columns, algebra.dim)

        if self._columns:
            stacked = torch.from_numpy(np.array(self._columns, dtype=np.int64))
        else:
            stacked = torch.zeros(0, algebra.dim, dtype=torch.long)
        self._stacked = stacked.to(algebra.device)

    @classmethod
    def span(cls, algebra: CliffordAlgebra, elements: Iterable[torch.Tensor]) -> 'Submodule':
        """Smallest submodule containing ``elements``."""
        return cls(algebra, elements)

    @classmethod
    def bottom(cls, algebra: CliffordAlgebra) -> 'Submodule':
        return cls(algebra)

    @classmethod
    def top(cls, algebra: CliffordAlgebra) -> 'Submodule':
        return cls(algebra, [algebra.blade(mask) for mask in range(algebra.dim)])

    @property
    def basis(self) -> List[torch.Tensor]:
        return list(self._stacked.unbind(0))

    @property
    def stacked(self) -> torch.Tensor:
        """[rank, dim] basis as one tensor."""
        return self._stacked

    def rank(self) -> int:
        return len(self._columns)

    def is_bottom(self) -> bool:
        return not self._columns

    def coordinates(self, x: torch.Tensor) -> Optional[List[int]]:
        """
        Integer coefficients c with x = sum_j c_j basis[j].

        Returns:
            The coefficients, or None when x is not in the submodule

        Raises:
            ValueError: if x is not a single [dim] integer element
        """
        x = as_integer_tensor(x)
        if x.shape != (self.algebra.dim,):
            raise ValueError(
                f"Expected a single element of shape ({self.algebra.dim},), got {tuple(x.shape)}"
            )
        target = x.tolist()
        if not any(target):
            return [0] * len(self._columns)
        if not self._columns:
            return None
        return _solve(self._columns, target)

    def contains(self, x: torch.Tensor) -> bool:
        return self.coordinates(x) is not None

    def __contains__(self, x: torch.Tensor) -> bool:
        return self.contains(x)

    def __le__(self, other: 'Submodule') -> bool:
        return all(other.contains(b) for b in self.basis)

    def __eq__(self, other):
        if not isinstance(other, Submodule):
            return NotImplemented
        return self._columns == other._columns or (self <= other and other <= self)

    __hash__ = None

    def __add__(self, other: 'Submodule') -> 'Submodule':
        """Supremum: the span of both bases."""
        return Submodule(self.algebra, self.basis + other.basis)

    def __mul__(self, other: 'Submodule') -> 'Submodule':
        """Product submodule: span of all a * b with a in self, b in other."""
        if self.is_bottom() or other.is_bottom():
            return Submodule.bottom(self.algebra)
        products = self.algebra.geometric_product(
            self._stacked.unsqueeze(1), other._stacked.unsqueeze(0)
        )  # [rank_a, rank_b, dim]
        return Submodule(self.algebra, products.reshape(-1, self.algebra.dim).unbind(0))

    def is_disjoint(self, other: 'Submodule') -> bool:
        """
        Trivial intersection.

        A nonzero common vector of the rational spans has an integer multiple
        in both lattices, so disjointness is rank additivity.
        """
        return self.rank() + other.rank() == (self + other).rank()

    def __repr__(self):
        return f"Submodule(rank={self.rank()}, dim={self.algebra.dim})"
