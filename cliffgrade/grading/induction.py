"""
Induction principles over the even and odd pieces.

Every element of GradedPiece(i) is reached from three shapes:
- base: an element of ι(M)^i (a scalar for i = 0, a generator image for i = 1)
- sum: x + y of two elements already reached
- pair: ι(v) ι(w) x for an element x already reached

A fold supplies one handler per shape. Derivation trees are the closed
variant Base | Sum | PairMul; folding dispatches on exactly these three
node types.

Example:
    >>> count = even_induction(decomposition, EvenHandlers(
    ...     scalar=lambda r: 1,
    ...     add=lambda x, y, hx, hy: hx + hy,
    ...     pair_mul=lambda v, w, x, hx: hx,
    ... ))
    >>> count(decomposition.algebra.one())
    1
"""

import torch
from dataclasses import dataclass, fields
from typing import Any, Callable, Generic, List, TypeVar, Union

from ..errors import IncompleteHandlerSetError, InvariantViolationError
from .decomposition import GradedDecomposition
from .grade import GradeIndex

T = TypeVar('T')


# ============================================================================
# Derivation trees
# ============================================================================

@dataclass(frozen=True, eq=False)
class Base:
    """Element of ι(M)^i for the piece's canonical length i."""
    value: torch.Tensor


@dataclass(frozen=True, eq=False)
class Sum:
    left: 'Derivation'
    right: 'Derivation'
    value: torch.Tensor


@dataclass(frozen=True, eq=False)
class PairMul:
    """ι(v) ι(w) rest."""
    v: torch.Tensor
    w: torch.Tensor
    rest: 'Derivation'
    value: torch.Tensor


Derivation = Union[Base, Sum, PairMul]


def derivation(decomposition: GradedDecomposition, grade, x: torch.Tensor) -> Derivation:
    """
    Canonical derivation tree of x inside GradedPiece(grade).

    All words of the canonical base length are gathered into one Base node;
    every longer word becomes a chain of PairMul nodes peeling two generators
    at a time, with its coefficient carried on the first vector.

    Raises:
        GradeMembershipError: if x is not in the piece
    """
    grade = GradeIndex.coerce(grade)
    algebra = decomposition.algebra
    witness = decomposition.piece(grade).witness(x)
    base_length = int(grade)

    base_value = algebra.zero()
    nodes: List[Derivation] = []
    for coef, word in witness.terms:
        if len(word) == base_length:
            base_value = base_value + coef * algebra.word_product(word)
        else:
            nodes.append(_word_derivation(decomposition, coef, word, base_length))

    if torch.any(base_value) or not nodes:
        nodes.insert(0, Base(base_value))

    tree = nodes[0]
    for node in nodes[1:]:
        tree = Sum(tree, node, tree.value + node.value)
    return tree


def _word_derivation(decomposition: GradedDecomposition, coef: int, word, base_length: int) -> Derivation:
    algebra = decomposition.algebra
    if len(word) == base_length:
        return Base(coef * algebra.word_product(word))

    form = algebra.form
    v = coef * form.basis_vector(word[0])
    w = form.basis_vector(word[1])
    rest = _word_derivation(decomposition, 1, word[2:], base_length)
    value = algebra.geometric_product(
        algebra.geometric_product(algebra.embed(v), algebra.embed(w)), rest.value
    )
    return PairMul(v, w, rest, value)


# ============================================================================
# Handler records
# ============================================================================

def _require_callables(handlers):
    for f in fields(handlers):
        if not callable(getattr(handlers, f.name)):
            raise IncompleteHandlerSetError(
                f"{type(handlers).__name__}.{f.name} must be callable, "
                f"got {getattr(handlers, f.name)!r}"
            )


@dataclass(frozen=True)
class EvenOddHandlers(Generic[T]):
    """
    Handlers for even_odd_induction.

    Attributes:
        base: x -> result, for x in ι(M)^i
        add: (x, y, hx, hy) -> result for x + y
        pair_mul: (v, w, x, hx) -> result for ι(v) ι(w) x
    """
    base: Callable[[torch.Tensor], T]
    add: Callable[[torch.Tensor, torch.Tensor, T, T], T]
    pair_mul: Callable[[torch.Tensor, torch.Tensor, torch.Tensor, T], T]

    def __post_init__(self):
        _require_callables(self)


@dataclass(frozen=True)
class EvenHandlers(Generic[T]):
    """Handlers for even_induction; the base case receives the scalar r of r * 1."""
    scalar: Callable[[int], T]
    add: Callable[[torch.Tensor, torch.Tensor, T, T], T]
    pair_mul: Callable[[torch.Tensor, torch.Tensor, torch.Tensor, T], T]

    def __post_init__(self):
        _require_callables(self)


@dataclass(frozen=True)
class OddHandlers(Generic[T]):
    """Handlers for odd_induction; the base case receives the vector v of ι(v)."""
    generator: Callable[[torch.Tensor], T]
    add: Callable[[torch.Tensor, torch.Tensor, T, T], T]
    pair_mul: Callable[[torch.Tensor, torch.Tensor, torch.Tensor, T], T]

    def __post_init__(self):
        _require_callables(self)


# ============================================================================
# Folds
# ============================================================================

class GradedFold(Generic[T]):
    """
    Total function on one graded piece defined by an induction principle.

    Calling it on an element outside the piece raises GradeMembershipError.
    """

    def __init__(self, decomposition: GradedDecomposition, grade: GradeIndex,
                 handlers: EvenOddHandlers):
        self.decomposition = decomposition
        self.grade = grade
        self.handlers = handlers

    def derive(self, x: torch.Tensor) -> Derivation:
        return derivation(self.decomposition, self.grade, x)

    def __call__(self, x: torch.Tensor) -> T:
        return self.fold(self.derive(x))

    def fold(self, node: Derivation) -> T:
        h = self.handlers
        if isinstance(node, Base):
            return h.base(node.value)
        if isinstance(node, Sum):
            return h.add(node.left.value, node.right.value, self.fold(node.left), self.fold(node.right))
        if isinstance(node, PairMul):
            return h.pair_mul(node.v, node.w, node.rest.value, self.fold(node.rest))
        raise TypeError(f"Not a derivation node: {node!r}")


def even_odd_induction(decomposition: GradedDecomposition, grade,
                       handlers: EvenOddHandlers) -> GradedFold:
    """
    Induction on GradedPiece(grade).

    Args:
        decomposition: Certified even/odd decomposition
        grade: 0 / 1 or a GradeIndex
        handlers: base, add and pair_mul cases

    Returns:
        GradedFold valid on the whole piece
    """
    grade = GradeIndex.coerce(grade)
    if not isinstance(handlers, EvenOddHandlers):
        raise IncompleteHandlerSetError(f"Expected EvenOddHandlers, got {type(handlers).__name__}")
    return GradedFold(decomposition, grade, handlers)


def even_induction(decomposition: GradedDecomposition, handlers: EvenHandlers) -> GradedFold:
    """Induction on the even piece; the base case ι(M)^0 unfolds to scalars r * 1."""
    if not isinstance(handlers, EvenHandlers):
        raise IncompleteHandlerSetError(f"Expected EvenHandlers, got {type(handlers).__name__}")
    algebra = decomposition.algebra

    def base(x: torch.Tensor) -> Any:
        r = int(algebra.scalar_part(x))
        if not torch.equal(x, algebra.algebra_map(r)):
            raise InvariantViolationError(f"{x.tolist()} in ι(M)^0 is not a scalar")
        return handlers.scalar(r)

    return even_odd_induction(
        decomposition, GradeIndex.EVEN,
        EvenOddHandlers(base=base, add=handlers.add, pair_mul=handlers.pair_mul),
    )


def odd_induction(decomposition: GradedDecomposition, handlers: OddHandlers) -> GradedFold:
    """Induction on the odd piece; the base case ι(M)^1 unfolds to generator images ι(v)."""
    if not isinstance(handlers, OddHandlers):
        raise IncompleteHandlerSetError(f"Expected OddHandlers, got {type(handlers).__name__}")
    algebra = decomposition.algebra

    def base(x: torch.Tensor) -> Any:
        v = algebra.extract_vector(x)
        if not torch.equal(x, algebra.embed(v)):
            raise InvariantViolationError(f"{x.tolist()} in ι(M)^1 is not a generator image")
        return handlers.generator(v)

    return even_odd_induction(
        decomposition, GradeIndex.ODD,
        EvenOddHandlers(base=base, add=handlers.add, pair_mul=handlers.pair_mul),
    )
