"""
Parity-level operations on Clifford algebra elements.

These functions read the blade structure of CliffordAlgebra directly. The
grading engine derives the same splitting abstractly; the two are compared
in the tests.
"""

import torch

from .clifford import CliffordAlgebra
from .target import AlgebraHom


def geometric_product(
    x: torch.Tensor,
    y: torch.Tensor,
    algebra: CliffordAlgebra
) -> torch.Tensor:
    """
    Batched geometric product.

    Args:
        x: [..., dim] first multivector
        y: [..., dim] second multivector
        algebra: CliffordAlgebra instance

    Returns:
        [..., dim] geometric product
    """
    return algebra.geometric_product(x, y)


def parity_projection(
    x: torch.Tensor,
    parity: int,
    algebra: CliffordAlgebra
) -> torch.Tensor:
    """
    Keep only the blades whose word length has the given parity.

    Args:
        x: [..., dim] multivector
        parity: 0 (even blades) or 1 (odd blades)
        algebra: CliffordAlgebra instance

    Returns:
        [..., dim] projected multivector (other blades zeroed)
    """
    mask = algebra.parity_masks.get(int(parity))
    if mask is None:
        raise ValueError(f"Parity must be 0 or 1, got {parity}")
    return x * mask.to(device=x.device, dtype=x.dtype)


def even_part(x: torch.Tensor, algebra: CliffordAlgebra) -> torch.Tensor:
    """Sum of the even-length blade terms."""
    return parity_projection(x, 0, algebra)


def odd_part(x: torch.Tensor, algebra: CliffordAlgebra) -> torch.Tensor:
    """Sum of the odd-length blade terms."""
    return parity_projection(x, 1, algebra)


def grade_involution(x: torch.Tensor, algebra: CliffordAlgebra) -> torch.Tensor:
    """
    Grade involution (main involution).

    alpha(e_{i1}...e_{ik}) = (-1)^k e_{i1}...e_{ik}
    """
    signs = 1 - 2 * algebra.parity_masks[1].to(device=x.device, dtype=x.dtype)
    return x * signs


def involution_hom(algebra: CliffordAlgebra) -> AlgebraHom:
    """Grade involution as the lift of v -> -ι(v) back into the algebra."""
    return algebra.lift(algebra, lambda v: algebra.neg(algebra.embed(v)))
