"""One-shot readiness signal for the adapter."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from .protocols import Listener


class AvailabilitySignal:
    """Readiness flag that flips from False to True at most once.

    Registering a listener immediately delivers the current state and, if
    the flag has not flipped yet, schedules one more delivery for when it
    does.

    Example:
        signal = AvailabilitySignal()
        signal.on_available(lambda ready: print("ready" if ready else "waiting"))
        signal.mark_available()
    """

    def __init__(self) -> None:
        self._available = False
        self._listeners: dict[int, "Listener"] = {}
        self._next_handle = 0

    @property
    def is_available(self) -> bool:
        return self._available

    def on_available(self, listener: "Listener") -> int:
        """Deliver current state and subscribe for the flip.

        Returns:
            Handle identifying the registration.
        """
        handle = self._next_handle
        self._next_handle += 1

        listener(self._available)
        if not self._available:
            self._listeners[handle] = listener
        return handle

    def mark_available(self) -> None:
        """Flip to available and notify registered listeners once."""
        if self._available:
            logger.debug("Availability already signalled")
            return

        self._available = True
        listeners, self._listeners = self._listeners, {}
        logger.debug(f"Database available, notifying {len(listeners)} listener(s)")
        for listener in listeners.values():
            listener(True)
