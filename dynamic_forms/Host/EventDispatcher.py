"""
Event Dispatcher

Single Responsibility: Deliver form lifecycle events to prioritized listeners.
"""

from typing import Any, Callable, Dict, List, Tuple


class FormEvent:
    """
    Event passed to form listeners.

    PRE_SET_DATA listeners may replace ``data`` to change what gets set.
    """

    def __init__(self, form, data: Any = None):
        self.form = form
        self.data = data
        self.propagation_stopped = False

    def stop_propagation(self):
        self.propagation_stopped = True


class EventDispatcher:
    """
    Calls listeners by descending priority, then in registration order.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Tuple[int, int, Callable]]] = {}
        self._sequence = 0

    def add_listener(self, event_name: str, listener: Callable, priority: int = 0):
        self._sequence += 1
        self._listeners.setdefault(event_name, []).append((priority, self._sequence, listener))

    def remove_listener(self, event_name: str, listener: Callable):
        if event_name not in self._listeners:
            return
        self._listeners[event_name] = [
            entry for entry in self._listeners[event_name] if entry[2] != listener
        ]

    def add_subscriber(self, subscriber):
        """
        Register every listener of a subscriber.

        ``subscriber.get_subscribed_events()`` maps event names to a method
        name or to a ``(method_name, priority)`` tuple.
        """
        for event_name, params in subscriber.get_subscribed_events().items():
            if isinstance(params, str):
                self.add_listener(event_name, getattr(subscriber, params))
            else:
                method_name, priority = params
                self.add_listener(event_name, getattr(subscriber, method_name), priority)

    def get_listeners(self, event_name: str) -> List[Callable]:
        entries = sorted(self._listeners.get(event_name, []), key=lambda entry: (-entry[0], entry[1]))
        return [listener for _, _, listener in entries]

    def has_listeners(self, event_name: str) -> bool:
        return bool(self._listeners.get(event_name))

    def dispatch(self, event_name: str, event: FormEvent) -> FormEvent:
        # Listeners added while dispatching are only called on the next dispatch
        for listener in self.get_listeners(event_name):
            if event.propagation_stopped:
                break
            listener(event)
        return event
