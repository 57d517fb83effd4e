"""
Core components for dependent field resolution.
"""
from .DependentField import DependentField, RequestedField
from .DependentFieldConfig import DependentFieldConfig
from .DynamicFormBuilder import DynamicFormBuilder
from .FormError import FormError
from .FormEvents import FormEvents, PHASES
from .FormInterfaces import ClearableErrorsInterface, FormBuilderInterface, FormInterface
from .exceptions import (
    FormDependencyError,
    InvalidPhaseError,
    FormLogicError,
    AlreadySubmittedError,
    UnknownFieldError,
)
