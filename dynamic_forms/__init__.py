"""
Dependent form fields for Django forms.

Wrap a form builder in DynamicFormBuilder and declare fields with
add_dependent(); each field is added, changed or left out depending on the
values of the fields it depends on.

Logging goes through structlog under the ``dynamic_forms`` logger. Projects
without their own structlog setup can use
``dynamic_forms.logging_config.setup_logging()`` and pass the returned dict
to ``logging.config.dictConfig`` (or Django's ``LOGGING`` setting).
"""

from .Core.DependentField import DependentField, RequestedField
from .Core.DependentFieldConfig import DependentFieldConfig
from .Core.DynamicFormBuilder import DynamicFormBuilder
from .Core.FormError import FormError
from .Core.FormEvents import FormEvents, PHASES
from .Core.FormInterfaces import ClearableErrorsInterface, FormBuilderInterface, FormInterface
from .Core.exceptions import (
    FormDependencyError,
    InvalidPhaseError,
    FormLogicError,
    AlreadySubmittedError,
    UnknownFieldError,
)
from .Host import EventDispatcher, FormEvent, Form, FormBuilder
