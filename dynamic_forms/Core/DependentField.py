from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class RequestedField(BaseModel):
    """
    Outcome of a dependent field callback that asked for the field to be added.
    """
    field_class: Optional[Any] = Field(
        default=None, description="Field class handed to the builder"
    )
    options: Dict[str, Any] = Field(
        default_factory=dict, description="Options forwarded verbatim to the builder"
    )


class DependentField:
    """
    Used to configure a dependent/dynamic field.

    The callback of a dependent field receives one of these. If request()
    is never called, the field won't be included in the form.
    """

    def __init__(self):
        self._field_class = None
        self._options: Dict[str, Any] = {}
        self._requested = False

    def request(self, field_class=None, options: Optional[Dict[str, Any]] = None) -> 'DependentField':
        """
        Ask for the field to be added with the given field class and options.

        Calling it again replaces the previous request.
        """
        self._field_class = field_class
        self._options = dict(options or {})
        self._requested = True
        return self

    add = request

    def get_type(self):
        return self._field_class

    def get_options(self) -> Dict[str, Any]:
        return self._options

    def is_requested(self) -> bool:
        return self._requested

    def resolve(self) -> Optional[RequestedField]:
        """Return the requested field, or None when the field should be absent."""
        if not self._requested:
            return None
        return RequestedField(field_class=self._field_class, options=self._options)
