"""
Exceptions raised by the RoleScope pipeline.

Every stage failure is terminal for a single run: callers get exactly one of
these and must not append anything to the dataset.
"""

from typing import Any, Optional, Sequence


class RoleScopeError(Exception):
    """Common parent of every pipeline failure; `details` holds the diagnostics callers may log."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    def __str__(self) -> str:
        if not self.details:
            return self.message
        extras = ", ".join(f"{key}={value!r}" for key, value in self.details.items())
        return f"{self.message} ({extras})"


class MalformedInputError(RoleScopeError):
    """No candidate JSON object could be located in the text."""

    def __init__(self, preview: str = "") -> None:
        """Initialize with a short preview of the offending text."""
        super().__init__("No JSON object found in model output", {"preview": preview[:80]})


class InvalidJsonError(RoleScopeError):
    """Both the strict parse and the repaired retry failed."""

    def __init__(self, strict_error: str, repaired_error: str) -> None:
        """Initialize with the diagnostics of both parse attempts."""
        message = f"Invalid JSON from model: {strict_error}"
        super().__init__(message, {"strict_error": strict_error, "repaired_error": repaired_error})
        self.strict_error = strict_error
        self.repaired_error = repaired_error


class MissingRequiredFieldError(RoleScopeError):
    """A required canonical field had no matching key in the raw record."""

    def __init__(self, field: str, tried_keys: Sequence[str] = ()) -> None:
        """Initialize with the canonical field name and the keys that were checked."""
        message = f"Missing required field '{field}'"
        super().__init__(message, {"field": field, "tried_keys": list(tried_keys)})
        self.field = field


class SchemaViolationError(RoleScopeError):
    """A resolved field value does not match its declared shape."""

    def __init__(self, field: str, shape: str, expected: str = "") -> None:
        """Initialize with the field name and the observed value shape."""
        message = f"Field '{field}' has unexpected shape: {shape}"
        details: dict[str, Any] = {"field": field, "shape": shape}
        if expected:
            details["expected"] = expected
        super().__init__(message, details)
        self.field = field
        self.shape = shape
