"""Custom exceptions for the moving-out budget engine.

The engine never raises for malformed *data*: unparseable tables, blank
scalars and unknown modes all resolve to conservative defaults. The classes
below are reserved for programmer errors that must surface at the boundary,
such as a constants document missing a required section.

Example:
    try:
        constants = load_constants(raw)
    except ConfigurationError as e:
        logger.error("constants_rejected", error=str(e), **e.details)
        raise
"""

from typing import Any, Optional


class MoveoutError(Exception):
    """Base exception for all moving-out engine errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize MoveoutError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the caller can fix the problem and retry.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation of the error."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class ValidationError(MoveoutError):
    """Error raised when caller-supplied structured data is invalid.

    Raised for submissions or evidence records whose *shape* is wrong
    (for example a submission without derived totals). Field values inside
    an input map are never validated this way.

    Example:
        >>> raise ValidationError(
        ...     "Submission is missing derived totals",
        ...     field="derived",
        ... )
        ValidationError: Submission is missing derived totals
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize ValidationError.

        Args:
            message: Human-readable error description.
            field: The name of the field that failed validation.
            value: The invalid value.
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed by correcting input.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class ConfigurationError(MoveoutError):
    """Error raised when a constants or schema document is unusable.

    A constants document without its ``transportation`` section, or with a
    non-numeric deduction rate, cannot produce a meaningful budget. These
    are not recoverable at runtime: a corrected document must be supplied.

    Attributes:
        config_key: The document section or key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).

    Example:
        >>> raise ConfigurationError(
        ...     "Constants document failed validation",
        ...     config_key="transportation.loan_payment_table",
        ...     expected="Loan payment table with baseline term and APR",
        ... )
        ConfigurationError: Constants document failed validation
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Human-readable error description.
            config_key: The name of the document key that is problematic.
            expected: Description of what value was expected.
            actual: The actual value found.
            details: Optional dictionary with additional context.
            recoverable: Defaults to False since a bad document must be replaced.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


class PinningError(MoveoutError):
    """Error raised when a pinned alternative cannot be created.

    Attributes:
        category: The pin category that was requested.

    Example:
        >>> raise PinningError(
        ...     'Pinning category "housing" is missing from schema.',
        ...     category="housing",
        ... )
        PinningError: Pinning category "housing" is missing from schema.
    """

    def __init__(
        self,
        message: str,
        *,
        category: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.category = category

        if category:
            self.details["category"] = category


__all__ = [
    "MoveoutError",
    "ValidationError",
    "ConfigurationError",
    "PinningError",
]
