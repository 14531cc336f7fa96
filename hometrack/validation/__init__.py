"""Form validation package."""

from hometrack.validation.validator import (
    FormValidator,
    ValidationIssue,
    ValidationResult,
)

__all__ = ["FormValidator", "ValidationIssue", "ValidationResult"]
