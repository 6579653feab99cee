"""Exceptions raised by the configuration resolver."""

from dataclasses import dataclass


class PlannerError(Exception):
    """Base exception for all doks-planner errors."""

    def __init__(self, message: str, details: str | None = None):
        """Initialize the exception.

        Args:
            message: Main error message
            details: Additional details or suggestions
        """
        self.message = message
        self.details = details
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format the complete error message.

        Returns:
            Formatted error message with details
        """
        if self.details:
            return f"{self.message}\n\nDetails: {self.details}"
        return self.message


@dataclass(frozen=True)
class ValidationFailure:
    """A single violated input rule."""

    location: str
    message: str

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


class ValidationError(PlannerError):
    """Raised with the complete batch of input validation failures."""

    def __init__(self, failures: list[ValidationFailure]):
        """Initialize with every failure found in one validation pass.

        Args:
            failures: Violated rules, in the order they were detected
        """
        self.failures = list(failures)
        count = len(self.failures)
        super().__init__(
            f"Configuration has {count} validation error{'s' if count != 1 else ''}",
            "\n".join(f"  - {failure}" for failure in self.failures),
        )

    @property
    def locations(self) -> list[str]:
        """Locations of all failures, in detection order."""
        return [failure.location for failure in self.failures]


class ExternalLookupError(PlannerError):
    """Raised when the Kubernetes version catalog cannot be queried."""

    pass


class GraphConstraintError(PlannerError):
    """Raised when cross-field state prevents building the resource graph."""

    pass


class CannotRemoveDefaultPoolError(PlannerError):
    """Raised when an update would delete the cluster's default node pool."""

    pass


class ConfigurationError(PlannerError):
    """Raised when a configuration file cannot be read or parsed."""

    pass
