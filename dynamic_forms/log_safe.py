"""
Log-safe rendering of form values (dependency data, submitted values).

Every value becomes a short string: enum members show their value, containers
are rendered item by item, and anything longer than the limit is cut with a
marker giving the hidden length. Values that cannot be rendered become a
placeholder instead of breaking the log call.
"""

from enum import Enum
from typing import Any, Dict, Mapping

PLACEHOLDER = "<unrepresentable>"

MAX_VALUE_LENGTH = 80
MAX_FIELDS = 20


def _render(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, Enum):
        return repr(value.value)
    if isinstance(value, Mapping):
        return "{" + ", ".join(f"{key}: {_render(item)}" for key, item in value.items()) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_render(item) for item in value) + "]"
    return str(value)


def log_safe_value(value: Any, max_length: int = MAX_VALUE_LENGTH) -> str:
    """Render one form value for a log line, cut to max_length characters."""
    try:
        text = _render(value)
    except Exception:
        return PLACEHOLDER

    if len(text) > max_length:
        text = f"{text[:max_length]}...(+{len(text) - max_length} chars)"
    return text


def log_safe_mapping(data: Mapping[str, Any], max_length: int = MAX_VALUE_LENGTH,
                     max_fields: int = MAX_FIELDS) -> Dict[str, str]:
    """
    Render field name -> value data, one log-safe value per field.

    Only the first max_fields fields are kept; the number of dropped ones is
    reported under the ``...`` key.
    """
    rendered = {}
    for index, (name, value) in enumerate(data.items()):
        if index == max_fields:
            rendered['...'] = f"+{len(data) - max_fields} fields"
            break
        rendered[name] = log_safe_value(value, max_length)
    return rendered
