"""
Shared fixtures: a spread of quadratic forms and helpers for random elements.
"""

import pytest
import torch

from cliffgrade.algebra import CliffordAlgebra, QuadraticForm
from cliffgrade.engine import EvenOddEngine


FORMS = {
    'euclidean_2d': QuadraticForm.diagonal([1, 1]),
    'mixed_3d': QuadraticForm.diagonal([1, -1, 1]),
    'non_diagonal_3d': QuadraticForm([[1, 1, 0], [0, 2, 1], [0, 0, -1]]),
    'exterior_2d': QuadraticForm.diagonal([0, 0]),
    'scaled_1d': QuadraticForm.diagonal([2]),
    'trivial_0d': QuadraticForm.diagonal([]),
}


@pytest.fixture(params=sorted(FORMS))
def form(request) -> QuadraticForm:
    return FORMS[request.param]


@pytest.fixture
def algebra(form) -> CliffordAlgebra:
    return CliffordAlgebra(form)


@pytest.fixture
def engine(algebra) -> EvenOddEngine:
    return EvenOddEngine(algebra)


@pytest.fixture
def euclidean() -> CliffordAlgebra:
    return CliffordAlgebra(FORMS['euclidean_2d'])


@pytest.fixture
def non_diagonal() -> CliffordAlgebra:
    return CliffordAlgebra(FORMS['non_diagonal_3d'])


@pytest.fixture
def rng() -> torch.Generator:
    return torch.Generator().manual_seed(0)
