"""
Dynamic Form Builder

Wraps a normal form builder and adds add_dependent() to it.

Dependent fields are resolved in two phases of the form lifecycle:
- PRE_SET_DATA: while initial data is set on the form
- POST_SUBMIT: after each dependency received its submitted data

Each time a dependency field reports its value in a phase, every dependent
field whose dependencies are all known, and which did not run yet in that
phase, executes its callback. Fields the callback asks for are added to the
builder and to the live form; if one of them is itself a dependency, it gets
listeners too, so dependent fields can be chained.

When the next lifecycle starts, the builder children added that way are put
back to what was declared, so a reused builder behaves like a new one.
"""

from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Union

import structlog
from django import forms

from ..conf import get_setting
from ..log_safe import log_safe_mapping
from .DependentFieldConfig import DependentFieldConfig
from .FormError import FormError
from .FormEvents import FormEvents
from .FormInterfaces import ClearableErrorsInterface, FormBuilderInterface, FormInterface

logger = structlog.get_logger(__name__)


class DynamicFormBuilder(FormBuilderInterface):
    """
    Form builder decorator with dependent field support.

    Every FormBuilderInterface operation is passed through to the wrapped
    builder, so a DynamicFormBuilder can be used wherever the wrapped builder
    was.
    """

    def __init__(self, builder: FormBuilderInterface):
        self._builder = builder
        self._dependent_field_configs: List[DependentFieldConfig] = []

        self._dependency_data: Dict[str, Dict[str, Any]] = {
            FormEvents.PRE_SET_DATA: {},
            FormEvents.POST_SUBMIT: {},
        }
        # dependent field name -> child builder declared under that name before
        # the field was first added (None when there was none)
        self._declared_builders: Dict[str, Optional[FormBuilderInterface]] = {}
        self._masked_fields: List[str] = []

        self._error_field_name = get_setting('ERROR_FIELD_NAME')
        self._error_message = get_setting('ERROR_MESSAGE')

        builder.add_event_listener(
            FormEvents.PRE_SET_DATA, self._on_pre_set_data, get_setting('PRE_SET_DATA_PRIORITY')
        )
        builder.add_event_listener(FormEvents.PRE_SUBMIT, self._on_pre_submit)
        # after validation
        builder.add_event_listener(
            FormEvents.POST_SUBMIT, self.clear_data_on_transformation_error, get_setting('CLEANUP_PRIORITY')
        )

    def add_dependent(self, name: str, dependencies: Union[str, Iterable[str]],
                      callback: Callable[..., None]) -> 'DynamicFormBuilder':
        """
        Declare a field whose presence depends on the value of other fields.

        Args:
            name: Name the field is added under
            dependencies: Field name(s) the callback needs values for
            callback: Called as ``callback(field, *values)`` with values in
                      the order of ``dependencies``; call ``field.request()``
                      in it to add the field
        """
        self._dependent_field_configs.append(DependentFieldConfig(name, dependencies, callback))
        return self

    @property
    def masked_fields(self) -> List[str]:
        """Dependent fields whose errors were masked during the latest submission."""
        return list(self._masked_fields)

    def _on_pre_set_data(self, event):
        form = event.form
        self._dependency_data[FormEvents.PRE_SET_DATA] = {}
        # A new lifecycle starts: every dependent field may fire again
        for dependent_field_config in self._dependent_field_configs:
            dependent_field_config.reset()

        # The form was built with the dependent fields of an earlier lifecycle;
        # start again from the declared fields
        for name in list(self._declared_builders):
            declared = self._restore_declared_builder(name)
            if declared is None:
                form.remove(name)
            else:
                form.add(declared.set_auto_initialize(False).get_form())

        # Hidden, never rendered field carrying the error of dependent fields
        # whose old choice went stale after a dependency changed (e.g. "Michigan"
        # once "country" moved from USA to Mexico).
        if not form.has(self._error_field_name):
            form.add(self._error_field_name, forms.CharField, {
                'mapped': False,
                'required': False,
                'widget': forms.HiddenInput,
            })

        self.initialize_listeners()

    def _on_pre_submit(self, event):
        self._dependency_data[FormEvents.POST_SUBMIT] = {}
        self._masked_fields = []

    def store_pre_set_data_dependency_data(self, event) -> None:
        dependency = event.form.name
        self._dependency_data[FormEvents.PRE_SET_DATA][dependency] = event.data

        self._execute_ready_callbacks(
            event.form.parent, self._dependency_data[FormEvents.PRE_SET_DATA], FormEvents.PRE_SET_DATA
        )

    def store_post_submit_dependency_data(self, event) -> None:
        dependency = event.form.name
        self._dependency_data[FormEvents.POST_SUBMIT][dependency] = event.form.data

        self._execute_ready_callbacks(
            event.form.parent, self._dependency_data[FormEvents.POST_SUBMIT], FormEvents.POST_SUBMIT
        )

    def clear_data_on_transformation_error(self, event) -> None:
        form = event.form
        masked_fields = []
        for dependent_field_config in self._dependent_field_configs:
            if not form.has(dependent_field_config.name):
                continue

            sub_form = form.get(dependent_field_config.name)
            if sub_form.transformation_failure is not None and isinstance(sub_form, ClearableErrorsInterface):
                sub_form.clear_errors()
                masked_fields.append(dependent_field_config.name)

        if not masked_fields:
            return

        self._masked_fields = masked_fields
        logger.info("Masked errors of dependent fields", fields=masked_fields)

        # The stale value is still on the field: keep the form invalid through
        # the hidden field instead.
        error_field = form.get(self._error_field_name)
        if error_field.is_valid():
            error_field.add_error(FormError(message=self._error_message))

    def _execute_ready_callbacks(self, form: FormInterface, available_dependency_data: Dict[str, Any],
                                 phase) -> None:
        """Run every ready dependent field and add it to, or remove it from, ``form``."""
        for dependent_field_config in self._dependent_field_configs:
            if not dependent_field_config.is_ready(available_dependency_data, phase):
                continue

            name = dependent_field_config.name
            requested = dependent_field_config.execute(available_dependency_data, phase).resolve()

            if requested is None:
                form.remove(name)
                if name in self._declared_builders:
                    self._restore_declared_builder(name)
                logger.debug(
                    "Dependent field removed",
                    field=name,
                    phase=phase.name,
                    dependencies=log_safe_mapping(self._select(available_dependency_data, dependent_field_config)),
                )
                continue

            if name not in self._declared_builders:
                self._declared_builders[name] = self._builder.get(name) if self._builder.has(name) else None
            self._builder.add(name, requested.field_class, requested.options)
            logger.debug(
                "Dependent field added",
                field=name,
                phase=phase.name,
                dependencies=log_safe_mapping(self._select(available_dependency_data, dependent_field_config)),
            )

            self.initialize_listeners([name])
            # same as FormBuilder.get_form() does for children
            field = self._builder.get(name).set_auto_initialize(False).get_form()
            form.add(field)

    def _restore_declared_builder(self, name: str) -> Optional[FormBuilderInterface]:
        declared = self._declared_builders.pop(name)
        if declared is None:
            self._builder.remove(name)
        else:
            self._builder.add(declared)
        return declared

    @staticmethod
    def _select(available_dependency_data, dependent_field_config):
        return {
            dependency: available_dependency_data[dependency]
            for dependency in dependent_field_config.dependencies
        }

    def initialize_listeners(self, fields_to_consider: Optional[Iterable[str]] = None) -> None:
        """
        Listen to the PRE_SET_DATA and POST_SUBMIT events of every dependency.

        Dependencies that are not part of the builder (yet) are skipped. A
        dependency builder never gets the listeners twice; a builder that
        replaced it under the same name gets its own.
        """
        fields_to_consider = list(fields_to_consider) if fields_to_consider else None
        for dependent_field_config in self._dependent_field_configs:
            for dependency in dependent_field_config.dependencies:
                if fields_to_consider and dependency not in fields_to_consider:
                    continue

                # may still be added later by another dependent field
                if not self._builder.has(dependency):
                    continue

                dependency_builder = self._builder.get(dependency)
                dispatcher = dependency_builder.get_event_dispatcher()
                if self.store_post_submit_dependency_data in dispatcher.get_listeners(FormEvents.POST_SUBMIT):
                    continue

                dependency_builder.add_event_listener(FormEvents.PRE_SET_DATA, self.store_pre_set_data_dependency_data)
                dependency_builder.add_event_listener(FormEvents.POST_SUBMIT, self.store_post_submit_dependency_data)
                logger.debug("Dependency listeners registered", dependency=dependency)

    # Pass-through to the wrapped builder

    @property
    def name(self) -> str:
        return self._builder.name

    def add(self, child, field_class=None, options: Optional[Dict[str, Any]] = None) -> 'DynamicFormBuilder':
        self._builder.add(child, field_class, options)
        return self

    def create(self, name: str, field_class=None, options: Optional[Dict[str, Any]] = None) -> FormBuilderInterface:
        return self._builder.create(name, field_class, options)

    def get(self, name: str) -> FormBuilderInterface:
        return self._builder.get(name)

    def remove(self, name: str) -> 'DynamicFormBuilder':
        self._builder.remove(name)
        return self

    def has(self, name: str) -> bool:
        return self._builder.has(name)

    def all(self) -> Dict[str, FormBuilderInterface]:
        return self._builder.all()

    def __iter__(self) -> Iterator[FormBuilderInterface]:
        return iter(self._builder)

    def __len__(self) -> int:
        return len(self._builder)

    def get_form(self) -> FormInterface:
        return self._builder.get_form()

    def add_event_listener(self, event_name: str, listener: Callable, priority: int = 0) -> 'DynamicFormBuilder':
        self._builder.add_event_listener(event_name, listener, priority)
        return self

    def add_event_subscriber(self, subscriber) -> 'DynamicFormBuilder':
        self._builder.add_event_subscriber(subscriber)
        return self

    def get_event_dispatcher(self):
        return self._builder.get_event_dispatcher()

    def set_attribute(self, name: str, value: Any) -> 'DynamicFormBuilder':
        self._builder.set_attribute(name, value)
        return self

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self._builder.get_attribute(name, default)

    def has_attribute(self, name: str) -> bool:
        return self._builder.has_attribute(name)

    def get_attributes(self) -> Dict[str, Any]:
        return self._builder.get_attributes()

    def get_options(self) -> Dict[str, Any]:
        return self._builder.get_options()

    def get_option(self, name: str, default: Any = None) -> Any:
        return self._builder.get_option(name, default)

    def has_option(self, name: str) -> bool:
        return self._builder.has_option(name)

    def set_data(self, data: Any) -> 'DynamicFormBuilder':
        self._builder.set_data(data)
        return self

    def get_data(self) -> Any:
        return self._builder.get_data()

    def get_mapped(self) -> bool:
        return self._builder.get_mapped()

    def set_auto_initialize(self, initialize: bool) -> 'DynamicFormBuilder':
        self._builder.set_auto_initialize(initialize)
        return self

    def get_auto_initialize(self) -> bool:
        return self._builder.get_auto_initialize()

    def __getattr__(self, name: str):
        # Host-specific builder API (e.g. field_class, create_field)
        if name.startswith('_'):
            raise AttributeError(name)
        return getattr(self._builder, name)
