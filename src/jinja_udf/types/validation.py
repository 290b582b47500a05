"""Shared validation types for jinja-udf."""

from dataclasses import dataclass, field


@dataclass
class ValidationIssue:
    """Single validation issue (error or warning).

    Used by:
    - ConfigLoader (config validation)
    """

    path: str  # e.g., "defaults.autoescape" or "function.name"
    message: str  # Human-readable description
    severity: str = "error"  # "error" | "warning"


@dataclass
class ValidationResult:
    """Result of config validation."""

    valid: bool
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Ensure valid is False if there are errors."""
        if self.errors:
            self.valid = False
