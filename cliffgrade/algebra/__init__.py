"""
Clifford algebra collaborators for the grading engine.

Provides the structures the engine consumes:
- QuadraticForm: integral quadratic form on Z^d
- CliffordAlgebra: exact structure constants, generator embedding and lift
- AlgebraTarget / AlgebraHom / MatrixAlgebra: targets of the universal property
"""

from .integral import as_integer_tensor, as_integer_scalar
from .quadratic_form import QuadraticForm
from .target import AlgebraTarget, AlgebraHom, MatrixAlgebra
from .clifford import CliffordAlgebra, get_algebra
from .operations import (
    geometric_product,
    parity_projection,
    even_part,
    odd_part,
    grade_involution,
    involution_hom,
)

__all__ = [
    'as_integer_tensor',
    'as_integer_scalar',
    'QuadraticForm',
    'AlgebraTarget',
    'AlgebraHom',
    'MatrixAlgebra',
    'CliffordAlgebra',
    'get_algebra',
    'geometric_product',
    'parity_projection',
    'even_part',
    'odd_part',
    'grade_involution',
    'involution_hom',
]
