"""
Settings for dynamic forms.

Projects override the defaults with a ``DYNAMIC_FORMS`` dict in their Django
settings. Outside a Django project, configure_django() sets up a minimal
settings module so Django's form fields can be used standalone.
"""

from typing import Any

import django
from django.conf import settings


DEFAULTS = {
    # Hidden field that carries the error of masked dependent fields
    'ERROR_FIELD_NAME': '__dynamic_error',
    'ERROR_MESSAGE': 'Some dynamic fields have errors.',
    # Root PRE_SET_DATA listener must run before ordinary listeners
    'PRE_SET_DATA_PRIORITY': 100,
    # Root POST_SUBMIT cleanup must run after validation
    'CLEANUP_PRIORITY': -1,
}


def configure_django():
    """Configure Django settings if the host application did not."""
    if not settings.configured:
        settings.configure(
            DEBUG=True,
            SECRET_KEY='dynamic-forms-standalone',
            USE_I18N=False,
            INSTALLED_APPS=[],
        )
        django.setup()


def get_setting(name: str) -> Any:
    if name not in DEFAULTS:
        raise KeyError(f"Unknown dynamic forms setting '{name}'")
    overrides = getattr(settings, 'DYNAMIC_FORMS', None) or {}
    return overrides.get(name, DEFAULTS[name])
