"""
Integer quadratic forms on the free module Z^d.

A form is stored as an upper-triangular integer matrix q so that

    Q(v) = sum_{i <= j} q_ij v_i v_j

This representation needs no division by 2, so every integral quadratic
form (including ones whose polar form is not even) can be expressed.
"""

import torch
from typing import Sequence

from .integral import as_integer_tensor


class QuadraticForm:
    """
    Integral quadratic form Q: Z^d -> Z.

    Attributes:
        d: Rank of the underlying module
        coefficients: [d, d] upper-triangular long tensor
    """

    def __init__(self, coefficients):
        """
        Args:
            coefficients: Square integer matrix. Entries below the diagonal are
                folded onto their mirror above it, so q and its transpose
                describe the same form.
        """
        coeffs = as_integer_tensor(coefficients)
        if coeffs.numel() == 0:
            coeffs = torch.zeros(0, 0, dtype=torch.long)
        if coeffs.dim() != 2 or coeffs.shape[0] != coeffs.shape[1]:
            raise ValueError(f"Expected a square coefficient matrix, got shape {tuple(coeffs.shape)}")

        self.d = coeffs.shape[0]
        self.coefficients = torch.triu(coeffs) + torch.tril(coeffs, diagonal=-1).transpose(0, 1)

    @classmethod
    def diagonal(cls, values: Sequence[int]) -> 'QuadraticForm':
        """Form sum_i values[i] * v_i^2, e.g. (1, 1, 1) for Euclidean space."""
        return cls(torch.diag(as_integer_tensor(list(values))))

    def __call__(self, v: torch.Tensor) -> torch.Tensor:
        """
        Evaluate the form.

        Args:
            v: [..., d] integer vectors

        Returns:
            [...] values Q(v)
        """
        v = as_integer_tensor(v)
        outer = v.unsqueeze(-1) * v.unsqueeze(-2)
        return (outer * self.coefficients.to(v.device)).sum(dim=(-2, -1))

    def polar(self, x: torch.Tensor, y: torch.Tensor) -> torch.Tensor:
        """Polar bilinear form B(x, y) = Q(x + y) - Q(x) - Q(y)."""
        x = as_integer_tensor(x)
        y = as_integer_tensor(y)
        return self(x + y) - self(x) - self(y)

    def polar_matrix(self) -> torch.Tensor:
        """[d, d] symmetric Gram matrix of B; the diagonal holds 2 * Q(e_i)."""
        return self.coefficients + self.coefficients.transpose(0, 1)

    def basis_vector(self, k: int) -> torch.Tensor:
        """Standard basis vector e_k of Z^d."""
        if not 0 <= k < self.d:
            raise ValueError(f"Basis index {k} out of range for rank {self.d}")
        v = torch.zeros(self.d, dtype=torch.long)
        v[k] = 1
        return v

    def _key(self):
        return (self.d, tuple(self.coefficients.flatten().tolist()))

    def __eq__(self, other):
        if not isinstance(other, QuadraticForm):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return f"QuadraticForm({self.coefficients.tolist()})"
