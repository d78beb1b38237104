"""
Domain exceptions.

Expected authentication outcomes are returned as results, not raised.
These exceptions cover invalid entity data and failures of the principal
store, which the service translates before they reach a caller.
"""
from typing import Any, Dict, List, Optional


class DomainException(Exception):
    """Base exception carrying a machine-readable code and details."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            'error': self.code,
            'message': self.message,
            'details': self.details
        }


class ValidationException(DomainException):
    """Raised when a principal is built with invalid field values."""

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[Dict[str, List[str]]] = None
    ):
        self.errors = errors or {}
        super().__init__(
            message=message,
            code='VALIDATION_ERROR',
            details={'validation_errors': self.errors}
        )


class DuplicateEntityException(DomainException):
    """
    Raised by a repository when a write would break a uniqueness rule.

    ``field`` names the offending attribute so callers can report it.
    """

    def __init__(self, entity_type: str, field: str):
        self.entity_type = entity_type
        self.field = field
        super().__init__(
            message=f"{entity_type} with this {field} already exists",
            code='DUPLICATE_ENTITY',
            details={'entity_type': entity_type, 'field': field}
        )


class StoreUnavailableException(DomainException):
    """Raised when the backing record store cannot be reached or times out."""

    def __init__(
        self,
        store: str,
        message: str,
        original_error: Optional[str] = None
    ):
        self.store = store
        super().__init__(
            message=f"Store unavailable ({store}): {message}",
            code='STORE_UNAVAILABLE',
            details={
                'store': store,
                'original_error': original_error
            }
        )
