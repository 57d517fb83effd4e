"""
Form Builder

Single Responsibility: Collect field definitions and listeners, and turn them
into live Form trees.

A builder without a field class is compound (it holds children). A builder
with a field class is a leaf backed by a Django form field, created from the
builder's options on every get_form() call.
"""

from typing import Any, Callable, Dict, Iterator, Optional

from ..Core.FormInterfaces import FormBuilderInterface
from ..Core.exceptions import FormLogicError, UnknownFieldError
from .EventDispatcher import EventDispatcher
from .Form import Form

# Options consumed by the form tree itself, never passed to the Django field
HOST_OPTIONS = ('mapped', 'data', 'auto_initialize')


class FormBuilder(FormBuilderInterface):

    def __init__(self, name: str, field_class=None, options: Optional[Dict[str, Any]] = None,
                 dispatcher: Optional[EventDispatcher] = None):
        options = dict(options or {})
        self._name = name
        self._field_class = field_class
        self._mapped = options.pop('mapped', True)
        self._data = options.pop('data', None)
        self._auto_initialize = options.pop('auto_initialize', True)
        self._field_options = options
        self._children: Dict[str, 'FormBuilder'] = {}
        self._attributes: Dict[str, Any] = {}
        self._dispatcher = dispatcher if dispatcher is not None else EventDispatcher()

    def __repr__(self):
        kind = self._field_class.__name__ if self._field_class else 'compound'
        return f"FormBuilder({self._name!r}, {kind})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def compound(self) -> bool:
        return self._field_class is None

    @property
    def field_class(self):
        return self._field_class

    def create_field(self):
        """Instantiate a fresh Django field from the builder's options."""
        if self.compound:
            return None
        return self._field_class(**self._field_options)

    # Children

    def add(self, child, field_class=None, options: Optional[Dict[str, Any]] = None) -> 'FormBuilder':
        if not self.compound:
            raise FormLogicError(f"Cannot add children to the leaf field '{self._name}'")
        if not isinstance(child, FormBuilder):
            child = self.create(child, field_class, options)
        self._children[child.name] = child
        return self

    def create(self, name: str, field_class=None, options: Optional[Dict[str, Any]] = None) -> 'FormBuilder':
        return FormBuilder(name, field_class, options)

    def get(self, name: str) -> 'FormBuilder':
        if name not in self._children:
            raise UnknownFieldError(f"The child with the name '{name}' does not exist.")
        return self._children[name]

    def remove(self, name: str) -> 'FormBuilder':
        self._children.pop(name, None)
        return self

    def has(self, name: str) -> bool:
        return name in self._children

    def all(self) -> Dict[str, 'FormBuilder']:
        return dict(self._children)

    def __iter__(self) -> Iterator['FormBuilder']:
        return iter(list(self._children.values()))

    def __len__(self) -> int:
        return len(self._children)

    # Events

    def add_event_listener(self, event_name: str, listener: Callable, priority: int = 0) -> 'FormBuilder':
        self._dispatcher.add_listener(event_name, listener, priority)
        return self

    def add_event_subscriber(self, subscriber) -> 'FormBuilder':
        self._dispatcher.add_subscriber(subscriber)
        return self

    def get_event_dispatcher(self) -> EventDispatcher:
        return self._dispatcher

    # Attributes & options

    def set_attribute(self, name: str, value: Any) -> 'FormBuilder':
        self._attributes[name] = value
        return self

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self._attributes.get(name, default)

    def has_attribute(self, name: str) -> bool:
        return name in self._attributes

    def get_attributes(self) -> Dict[str, Any]:
        return dict(self._attributes)

    def get_options(self) -> Dict[str, Any]:
        return dict(self._field_options)

    def get_option(self, name: str, default: Any = None) -> Any:
        return self._field_options.get(name, default)

    def has_option(self, name: str) -> bool:
        return name in self._field_options

    def set_data(self, data: Any) -> 'FormBuilder':
        self._data = data
        return self

    def get_data(self) -> Any:
        return self._data

    def get_mapped(self) -> bool:
        return self._mapped

    def set_auto_initialize(self, initialize: bool) -> 'FormBuilder':
        self._auto_initialize = initialize
        return self

    def get_auto_initialize(self) -> bool:
        return self._auto_initialize

    def get_form(self) -> Form:
        form = Form(self)
        for child in list(self._children.values()):
            form.add(child.set_auto_initialize(False).get_form())

        if self._auto_initialize:
            form.initialize()

        return form
