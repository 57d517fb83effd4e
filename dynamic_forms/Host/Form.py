"""
Form

Single Responsibility: Hold the live state of a form tree (data, submission,
errors) on top of Django form fields.

Architecture:
- Compound forms hold children and map dict data onto them.
- Leaf forms wrap one Django field; submitted values go through field.clean().
- Lifecycle events are dispatched through the dispatcher of the builder the
  form was created from, so listeners added to that builder later still fire.
"""

from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional

import structlog
from django import forms

from ..conf import configure_django
from ..Core.FormError import FormError
from ..Core.FormEvents import FormEvents
from ..Core.FormInterfaces import ClearableErrorsInterface, FormInterface
from ..Core.exceptions import AlreadySubmittedError, FormLogicError, UnknownFieldError
from ..log_safe import log_safe_value
from .EventDispatcher import FormEvent

if TYPE_CHECKING:
    from .FormBuilder import FormBuilder

configure_django()

logger = structlog.get_logger(__name__)

# Django error codes meaning the submitted value could not be converted at all
TRANSFORMATION_ERROR_CODES = frozenset({'invalid', 'invalid_choice', 'invalid_list'})


class Form(FormInterface, ClearableErrorsInterface):

    def __init__(self, config: 'FormBuilder'):
        self._config = config
        self._name = config.name
        self._mapped = config.get_mapped()
        self._dispatcher = config.get_event_dispatcher()
        self._field = config.create_field()
        self._parent: Optional['Form'] = None
        self._children: Dict[str, 'Form'] = {}
        self._data: Any = None
        self._errors: List[FormError] = []
        self._transformation_failure: Optional[forms.ValidationError] = None
        self._submitted = False
        self._default_data_set = False
        self._lock_set_data = False

    def __repr__(self):
        return f"Form({self._name!r})"

    # Properties

    @property
    def name(self) -> str:
        return self._name

    @property
    def parent(self) -> Optional['Form']:
        return self._parent

    @property
    def data(self) -> Any:
        return self._data

    @property
    def field(self) -> Optional[forms.Field]:
        return self._field

    @property
    def config(self) -> 'FormBuilder':
        return self._config

    @property
    def compound(self) -> bool:
        return self._field is None

    @property
    def mapped(self) -> bool:
        return self._mapped

    @property
    def transformation_failure(self) -> Optional[forms.ValidationError]:
        return self._transformation_failure

    @property
    def errors(self) -> List[FormError]:
        return self.get_errors()

    def get_root(self) -> 'Form':
        form = self
        while form._parent is not None:
            form = form._parent
        return form

    # Children

    def add(self, child, field_class=None, options: Optional[Dict[str, Any]] = None) -> 'Form':
        """
        Add a child form.

        ``child`` is either a Form or a name; with a name, a child is built
        from field_class and options.
        """
        if self._submitted:
            raise AlreadySubmittedError("You cannot add children to a submitted form.")
        if not self.compound:
            raise FormLogicError(f"You cannot add children to the leaf field '{self._name}'.")

        if not isinstance(child, Form):
            from .FormBuilder import FormBuilder
            child = FormBuilder(child, field_class, options).set_auto_initialize(False).get_form()

        previous = self._children.get(child.name)
        if previous is not None and previous is not child:
            previous._parent = None
        child._parent = self
        self._children[child.name] = child

        # While set_data() runs, the mapping loop reaches the new child itself
        if not self._lock_set_data and self._default_data_set:
            child.set_data(self._child_data(child))

        return self

    def remove(self, name: str) -> 'Form':
        if self._submitted:
            raise AlreadySubmittedError("You cannot remove children from a submitted form.")
        child = self._children.pop(name, None)
        if child is not None:
            child._parent = None
        return self

    def has(self, name: str) -> bool:
        return name in self._children

    def get(self, name: str) -> 'Form':
        if name not in self._children:
            raise UnknownFieldError(f"Child \"{name}\" does not exist.")
        return self._children[name]

    def all(self) -> Dict[str, 'Form']:
        return dict(self._children)

    def __iter__(self) -> Iterator['Form']:
        return iter(list(self._children.values()))

    def __len__(self) -> int:
        return len(self._children)

    def __contains__(self, name) -> bool:
        return self.has(name)

    def __getitem__(self, name: str) -> 'Form':
        return self.get(name)

    def _iterate_children_live(self) -> Iterator['Form']:
        """
        Yield children in order while the collection may change.

        Children appended during iteration are visited; removed ones are
        skipped. A child replaced after it was visited is not visited again.
        """
        visited = set()
        while True:
            pending = next((child for name, child in self._children.items() if name not in visited), None)
            if pending is None:
                return
            visited.add(pending.name)
            yield pending

    def _child_data(self, child: 'Form') -> Any:
        if not child.mapped:
            return child.config.get_data()
        if isinstance(self._data, dict):
            return self._data.get(child.name)
        return None

    # Data

    def initialize(self) -> 'Form':
        if self._parent is not None:
            raise FormLogicError("Only root forms should be initialized.")
        return self.set_data(self._config.get_data())

    def set_data(self, data: Any) -> 'Form':
        if self._submitted:
            raise AlreadySubmittedError("You cannot change the data of a submitted form.")
        if self._lock_set_data:
            raise FormLogicError(
                "A cycle was detected. Listeners to the PRE_SET_DATA event must not call set_data()."
            )

        self._lock_set_data = True
        try:
            event = self._dispatcher.dispatch(FormEvents.PRE_SET_DATA, FormEvent(self, data))
            self._data = event.data

            if self.compound:
                for child in self._iterate_children_live():
                    child.set_data(self._child_data(child))
        finally:
            self._lock_set_data = False

        self._default_data_set = True
        return self

    # Submission

    def submit(self, submitted_data: Any) -> 'Form':
        if self._submitted:
            raise AlreadySubmittedError("A form can only be submitted once.")

        event = self._dispatcher.dispatch(FormEvents.PRE_SUBMIT, FormEvent(self, submitted_data))
        submitted_data = event.data

        if self.compound:
            self._submit_children(submitted_data)
        else:
            self._submit_value(submitted_data)

        self._submitted = True
        self._dispatcher.dispatch(FormEvents.POST_SUBMIT, FormEvent(self, self._data))
        return self

    def _submit_children(self, submitted_data: Any):
        if submitted_data is None:
            submitted_data = {}
        if not isinstance(submitted_data, dict):
            self._transformation_failure = forms.ValidationError(
                "Submitted data was expected to be a mapping.", code='invalid'
            )
            self.add_error(FormError(message=self._transformation_failure.messages[0],
                                     cause=self._transformation_failure))
            submitted_data = {}

        for child in self._iterate_children_live():
            child.submit(submitted_data.get(child.name))

        # Children removed by a later child's listeners do not write their data
        data = dict(self._data) if isinstance(self._data, dict) else {}
        for child in self._children.values():
            if child.mapped and child.is_submitted() and child.transformation_failure is None:
                data[child.name] = child.data
        self._data = data

    def _submit_value(self, value: Any):
        if self._field.disabled:
            return

        try:
            self._data = self._field.clean(value)
        except forms.ValidationError as exc:
            if any(error.code in TRANSFORMATION_ERROR_CODES for error in exc.error_list):
                self._transformation_failure = exc
                self._data = None
                logger.debug(
                    "Submitted value could not be converted",
                    field=self._name,
                    value=log_safe_value(value),
                )
            for message in exc.messages:
                self.add_error(FormError(message=message, cause=exc))

    def is_submitted(self) -> bool:
        return self._submitted

    def is_valid(self) -> bool:
        if not self._submitted:
            return False
        return not self.get_errors(deep=True)

    # Errors

    def add_error(self, error: FormError) -> 'Form':
        if error.origin is None:
            error.origin = self
        self._errors.append(error)
        return self

    def get_errors(self, deep: bool = False) -> List[FormError]:
        errors = list(self._errors)
        if deep:
            for child in self._children.values():
                errors.extend(child.get_errors(deep=True))
        return errors

    def clear_errors(self, deep: bool = False) -> 'Form':
        self._errors = []
        if deep:
            for child in self._children.values():
                child.clear_errors(deep=True)
        return self
