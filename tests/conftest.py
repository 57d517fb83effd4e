"""Pytest configuration and shared fixtures."""
import pytest

import dynamic_forms  # noqa: F401  configures Django settings before any field is used
from sample_forms.enums import Meal
from sample_forms.forms import build_address_form, build_meal_form, new_builder


@pytest.fixture
def meal_builder():
    """Meal form starting at breakfast."""
    return build_meal_form(new_builder(data={'meal': Meal.BREAKFAST}))


@pytest.fixture
def address_builder():
    """Address form starting in the United States."""
    return build_address_form(new_builder(data={'country': 'United States'}))
