"""
Certificates issued by the engine for the facts it has checked.
"""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class Certificate:
    """
    Record of a verified statement.

    A certificate is only ever constructed after its checks passed; a failed
    check raises InvariantViolationError instead.

    Attributes:
        statement: Human-readable claim
        evidence: What was checked (counts, lengths, ranks)
    """
    statement: str
    evidence: Dict[str, Any] = field(default_factory=dict)

    def __str__(self):
        return self.statement
