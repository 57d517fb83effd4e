"""
Reference form host built on Django form fields.
"""
from .EventDispatcher import EventDispatcher, FormEvent
from .Form import Form, TRANSFORMATION_ERROR_CODES
from .FormBuilder import FormBuilder
