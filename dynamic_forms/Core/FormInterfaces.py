"""
Form Interfaces

Abstract contracts the dependency engine consumes from the host form
framework. The reference implementation lives in ``dynamic_forms.Host``;
any other host can be plugged in by implementing these classes.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterator, List, Optional


class FormBuilderInterface(ABC):
    """
    Builds a (possibly compound) form.

    A builder can be turned into a live form any number of times with
    get_form(). Listeners added to a builder are shared with every form it
    produced.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def add(self, child, field_class=None, options: Optional[Dict[str, Any]] = None) -> 'FormBuilderInterface':
        """Add a child builder, or create one from a name, field class and options."""
        pass

    @abstractmethod
    def create(self, name: str, field_class=None, options: Optional[Dict[str, Any]] = None) -> 'FormBuilderInterface':
        """Create a builder without adding it as a child."""
        pass

    @abstractmethod
    def get(self, name: str) -> 'FormBuilderInterface':
        pass

    @abstractmethod
    def remove(self, name: str) -> 'FormBuilderInterface':
        pass

    @abstractmethod
    def has(self, name: str) -> bool:
        pass

    @abstractmethod
    def all(self) -> Dict[str, 'FormBuilderInterface']:
        pass

    @abstractmethod
    def __iter__(self) -> Iterator['FormBuilderInterface']:
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass

    def __contains__(self, name) -> bool:
        return self.has(name)

    @abstractmethod
    def get_form(self) -> 'FormInterface':
        pass

    @abstractmethod
    def add_event_listener(self, event_name: str, listener: Callable, priority: int = 0) -> 'FormBuilderInterface':
        pass

    @abstractmethod
    def add_event_subscriber(self, subscriber) -> 'FormBuilderInterface':
        pass

    @abstractmethod
    def get_event_dispatcher(self):
        pass

    @abstractmethod
    def set_attribute(self, name: str, value: Any) -> 'FormBuilderInterface':
        pass

    @abstractmethod
    def get_attribute(self, name: str, default: Any = None) -> Any:
        pass

    @abstractmethod
    def has_attribute(self, name: str) -> bool:
        pass

    @abstractmethod
    def get_attributes(self) -> Dict[str, Any]:
        pass

    @abstractmethod
    def get_options(self) -> Dict[str, Any]:
        pass

    @abstractmethod
    def get_option(self, name: str, default: Any = None) -> Any:
        pass

    @abstractmethod
    def has_option(self, name: str) -> bool:
        pass

    @abstractmethod
    def set_data(self, data: Any) -> 'FormBuilderInterface':
        pass

    @abstractmethod
    def get_data(self) -> Any:
        pass

    @abstractmethod
    def get_mapped(self) -> bool:
        pass

    @abstractmethod
    def set_auto_initialize(self, initialize: bool) -> 'FormBuilderInterface':
        pass

    @abstractmethod
    def get_auto_initialize(self) -> bool:
        pass


class FormInterface(ABC):
    """A live form (or form field) produced by a builder."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def parent(self) -> Optional['FormInterface']:
        pass

    @property
    @abstractmethod
    def data(self) -> Any:
        pass

    @property
    @abstractmethod
    def field(self):
        """The underlying field instance, or None for compound forms."""
        pass

    @property
    @abstractmethod
    def transformation_failure(self) -> Optional[Exception]:
        """The error raised while converting submitted data, if any."""
        pass

    @abstractmethod
    def add(self, child, field_class=None, options: Optional[Dict[str, Any]] = None) -> 'FormInterface':
        pass

    @abstractmethod
    def remove(self, name: str) -> 'FormInterface':
        pass

    @abstractmethod
    def has(self, name: str) -> bool:
        pass

    @abstractmethod
    def get(self, name: str) -> 'FormInterface':
        pass

    @abstractmethod
    def all(self) -> Dict[str, 'FormInterface']:
        pass

    @abstractmethod
    def set_data(self, data: Any) -> 'FormInterface':
        pass

    @abstractmethod
    def submit(self, submitted_data: Any) -> 'FormInterface':
        pass

    @abstractmethod
    def is_submitted(self) -> bool:
        pass

    @abstractmethod
    def is_valid(self) -> bool:
        pass

    @abstractmethod
    def add_error(self, error) -> 'FormInterface':
        pass

    @abstractmethod
    def get_errors(self, deep: bool = False) -> List:
        pass


class ClearableErrorsInterface(ABC):
    """Implemented by forms whose errors can be cleared after validation."""

    @abstractmethod
    def clear_errors(self, deep: bool = False):
        pass
