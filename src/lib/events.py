"""
Synchronous notification facility

Listeners are called in registration order, on the caller's stack, with
whatever arguments trigger() received. A listener that raises aborts the
trigger and the exception propagates to the caller.
"""

from typing import Any, Callable, Dict, List, Optional


class EventTarget:
    """Minimal publish/subscribe mixin (on / off / trigger)"""

    def __init__(self) -> None:
        self.listeners: Dict[str, List[Callable[..., Any]]] = {}

    def on(self, name: str, callback: Callable[..., Any]) -> None:
        """Subscribe callback to the named event"""
        self.listeners.setdefault(name, []).append(callback)

    def off(self, name: str, callback: Optional[Callable[..., Any]] = None) -> None:
        """Unsubscribe callback, or every listener of the event if omitted"""
        if callback is None:
            self.listeners.pop(name, None)
            return
        callbacks = self.listeners.get(name, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def trigger(self, name: str, *args: Any) -> None:
        """Call every listener of the event in registration order"""
        for callback in list(self.listeners.get(name, [])):
            callback(*args)
