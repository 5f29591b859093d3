"""
Configuration for the even/odd grading engine.
"""

from dataclasses import dataclass


@dataclass
class EngineConfig:
    """Knobs for deriving the graded decomposition."""
    # Filtration
    max_word_length: int = 32

    # Runtime checks
    check_invariants: bool = True
    verify_on_basis: bool = True

    def __post_init__(self):
        if self.max_word_length < 1:
            raise ValueError(f"max_word_length must be positive, got {self.max_word_length}")


def get_default_config() -> EngineConfig:
    """Get default engine configuration."""
    return EngineConfig()
