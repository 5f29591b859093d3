"""
Random element helpers shared by the test modules.
"""

import torch

from cliffgrade.algebra import CliffordAlgebra


def random_element(algebra: CliffordAlgebra, rng: torch.Generator, low: int = -3, high: int = 4) -> torch.Tensor:
    """Random algebra element with small integer coefficients."""
    return torch.randint(low, high, (algebra.dim,), generator=rng)


def random_vector(algebra: CliffordAlgebra, rng: torch.Generator, low: int = -3, high: int = 4) -> torch.Tensor:
    return torch.randint(low, high, (algebra.d,), generator=rng)


def random_member(submodule, rng: torch.Generator, low: int = -3, high: int = 4) -> torch.Tensor:
    """Random integer combination of a submodule's basis."""
    stacked = submodule.stacked
    if stacked.shape[0] == 0:
        return submodule.algebra.zero()
    coeffs = torch.randint(low, high, (stacked.shape[0],), generator=rng)
    return (coeffs.unsqueeze(-1) * stacked).sum(dim=0)
