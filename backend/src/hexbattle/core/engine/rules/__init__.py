from .validator import (
    Error,
    ValidationError,
    ValidationResult,
    check,
    is_legal,
)
from .apply import Mutator, apply_command

__all__ = [
    "Error",
    "ValidationError",
    "ValidationResult",
    "check",
    "is_legal",
    "Mutator",
    "apply_command",
]
