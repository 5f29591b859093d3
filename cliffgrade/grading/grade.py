"""
The two-element grading group Z/2.
"""

from enum import IntEnum

from ..errors import GradeIndexOutOfRangeError


class GradeIndex(IntEnum):
    """Even (0) or odd (1), with addition mod 2."""
    EVEN = 0
    ODD = 1

    @classmethod
    def coerce(cls, value) -> 'GradeIndex':
        """
        Accept a GradeIndex or the plain integers 0 and 1.

        Raises:
            GradeIndexOutOfRangeError: for anything else, including bools
        """
        if isinstance(value, GradeIndex):
            return value
        if isinstance(value, bool) or not isinstance(value, int) or value not in (0, 1):
            raise GradeIndexOutOfRangeError(f"Grade index must be 0 or 1, got {value!r}")
        return cls(value)

    @classmethod
    def of_length(cls, n: int) -> 'GradeIndex':
        """Grade of a product of n generators."""
        if n < 0:
            raise ValueError(f"Word length must be non-negative, got {n}")
        return cls(n % 2)

    def __add__(self, other) -> 'GradeIndex':
        other = GradeIndex.coerce(other)
        return GradeIndex((int(self) + int(other)) % 2)

    def __str__(self):
        return self.name.lower()


GRADES = (GradeIndex.EVEN, GradeIndex.ODD)
