"""
Custom exceptions for dynamic form dependency management.
"""


class FormDependencyError(Exception):
    """Base exception for dynamic form errors."""
    pass


class InvalidPhaseError(FormDependencyError, ValueError):
    """Raised when a lifecycle phase other than PRE_SET_DATA/POST_SUBMIT is used."""
    pass


class FormLogicError(FormDependencyError, RuntimeError):
    """Raised when a form is used in a way its lifecycle does not allow."""
    pass


class AlreadySubmittedError(FormLogicError):
    """Raised when a form is submitted twice or modified after submission."""
    pass


class UnknownFieldError(FormDependencyError, KeyError):
    """Raised when a child field does not exist."""
    pass
