"""
Associative unital Z-algebras that a Clifford algebra can be lifted into.

Provides:
- AlgebraTarget: the minimal interface a lift target must implement
- AlgebraHom: the algebra homomorphism produced by CliffordAlgebra.lift
- MatrixAlgebra: integer n x n matrices, an independent concrete target
"""

import torch
from abc import ABC, abstractmethod
from typing import Any, List, Sequence

from .integral import as_integer_scalar, as_integer_tensor


class AlgebraTarget(ABC):
    """
    Associative unital algebra over the integers.

    Elements are opaque to the engine; all arithmetic goes through these
    methods so that tensors, pairs of tensors and matrices can all serve.
    """

    @abstractmethod
    def one(self) -> Any:
        """Multiplicative unit."""

    @abstractmethod
    def zero(self) -> Any:
        """Additive identity."""

    @abstractmethod
    def add(self, a: Any, b: Any) -> Any:
        """a + b"""

    @abstractmethod
    def mul(self, a: Any, b: Any) -> Any:
        """a * b"""

    @abstractmethod
    def smul(self, r: int, a: Any) -> Any:
        """Scalar action r . a"""

    @abstractmethod
    def equal(self, a: Any, b: Any) -> bool:
        """Exact equality of two elements."""

    def neg(self, a: Any) -> Any:
        return self.smul(-1, a)

    def algebra_map(self, r: int) -> Any:
        """Image of the scalar r under the unit map Z -> A."""
        return self.smul(as_integer_scalar(r), self.one())


class AlgebraHom:
    """
    Algebra homomorphism out of a Clifford algebra.

    Determined by the images of the generators ι(e_k): a blade
    e_{i1} ... e_{ik} is sent to the ordered product of the generator images.

    Attributes:
        source: CliffordAlgebra the map is defined on
        target: AlgebraTarget the map lands in
        generator_images: f(e_k) for k = 0 .. d-1
    """

    def __init__(self, source, target: AlgebraTarget, generator_images: Sequence[Any]):
        assert len(generator_images) == source.d, \
            f"Expected {source.d} generator images, got {len(generator_images)}"
        self.source = source
        self.target = target
        self.generator_images: List[Any] = list(generator_images)

    def __call__(self, x: torch.Tensor) -> Any:
        """
        Apply the homomorphism to a single algebra element.

        Args:
            x: [dim] coefficient tensor

        Returns:
            Element of the target algebra
        """
        x = as_integer_tensor(x)
        if x.shape != (self.source.dim,):
            raise ValueError(
                f"Expected a single element of shape ({self.source.dim},), got {tuple(x.shape)}"
            )
        target = self.target
        result = target.zero()
        for mask, coef in enumerate(x.tolist()):
            if coef == 0:
                continue
            term = target.one()
            for k in self.source.blade_indices(mask):
                term = target.mul(term, self.generator_images[k])
            result = target.add(result, target.smul(coef, term))
        return result

    def on_vector(self, v: torch.Tensor) -> Any:
        """f(v) for a module vector v, by linearity on the generator images."""
        v = as_integer_tensor(v)
        if v.shape != (self.source.d,):
            raise ValueError(f"Expected a vector of shape ({self.source.d},), got {tuple(v.shape)}")
        result = self.target.zero()
        for k, coef in enumerate(v.tolist()):
            if coef:
                result = self.target.add(result, self.target.smul(coef, self.generator_images[k]))
        return result

    def agrees_on_generators(self, other: 'AlgebraHom') -> bool:
        """
        Equality of homomorphisms out of Cl(Q).

        Two homomorphisms into the same target that agree on every ι(e_k) are
        equal, by the uniqueness half of the universal property.
        """
        if self.target is not other.target or self.source.form != other.source.form:
            return False
        return all(
            self.target.equal(a, b)
            for a, b in zip(self.generator_images, other.generator_images)
        )

    def __repr__(self):
        return f"AlgebraHom({self.source!r} -> {type(self.target).__name__})"


class MatrixAlgebra(AlgebraTarget):
    """Integer n x n matrices under matrix multiplication."""

    def __init__(self, n: int, device: str = 'cpu'):
        self.n = n
        self.device = device

    def one(self) -> torch.Tensor:
        return torch.eye(self.n, dtype=torch.long, device=self.device)

    def zero(self) -> torch.Tensor:
        return torch.zeros(self.n, self.n, dtype=torch.long, device=self.device)

    def add(self, a: torch.Tensor, b: torch.Tensor) -> torch.Tensor:
        return a + b

    def mul(self, a: torch.Tensor, b: torch.Tensor) -> torch.Tensor:
        # Broadcast-and-sum keeps the product exact for long tensors
        return (a.unsqueeze(-1) * b.unsqueeze(-3)).sum(dim=-2)

    def smul(self, r: int, a: torch.Tensor) -> torch.Tensor:
        return as_integer_scalar(r) * a

    def equal(self, a: torch.Tensor, b: torch.Tensor) -> bool:
        return torch.equal(a, b)

    def __repr__(self):
        return f"MatrixAlgebra({self.n})"
