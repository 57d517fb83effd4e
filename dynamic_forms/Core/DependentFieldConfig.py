from typing import Any, Callable, Dict, Iterable, Union

from .DependentField import DependentField
from .FormEvents import PHASES
from .exceptions import InvalidPhaseError


class DependentFieldConfig:
    """
    Holds the configuration for a dependent field & which phases it already fired in.
    """

    def __init__(self, name: str, dependencies: Union[str, Iterable[str]], callback: Callable[..., None]):
        if isinstance(dependencies, str):
            dependencies = [dependencies]
        self.name = name
        self.dependencies = tuple(dependencies)
        self.callback = callback
        self.callback_executed: Dict[str, bool] = {phase: False for phase in PHASES}

    def __repr__(self):
        return f"DependentFieldConfig(name={self.name!r}, dependencies={list(self.dependencies)!r})"

    def _check_phase(self, phase):
        if phase not in self.callback_executed:
            raise InvalidPhaseError(f'Invalid event name "{phase}"')

    def is_ready(self, available_dependency_data: Dict[str, Any], phase) -> bool:
        """
        Whether the callback can run in this phase.

        A dependency counts as available when its name is a key of
        available_dependency_data, whatever the value is.
        """
        self._check_phase(phase)

        if self.callback_executed[phase]:
            return False

        for dependency in self.dependencies:
            if dependency not in available_dependency_data:
                return False

        return True

    def execute(self, available_dependency_data: Dict[str, Any], phase) -> DependentField:
        self._check_phase(phase)
        dependent_field = DependentField()

        # Flag first: the callback may re-enter the ready pass.
        self.callback_executed[phase] = True
        dependency_data = [available_dependency_data[dependency] for dependency in self.dependencies]
        self.callback(dependent_field, *dependency_data)

        return dependent_field

    def has_fired(self, phase) -> bool:
        self._check_phase(phase)
        return self.callback_executed[phase]

    def reset(self):
        """Forget fired phases so the config can run in a new form lifecycle."""
        for phase in self.callback_executed:
            self.callback_executed[phase] = False
