"""
Custom exceptions for the application.
"""


class StudyStackException(Exception):
    """Base exception for all StudyStack application exceptions."""
    pass


class ValidationError(StudyStackException):
    """Raised when validation fails."""
    pass


class NotFoundError(StudyStackException):
    """Raised when a requested resource is not found or not owned by the caller."""
    pass


class PersistenceError(StudyStackException):
    """Raised when the underlying storage operation fails."""
    pass
