"""
Racing user input against change notifications.

The render loop sleeps until either a key is pressed or some file
changed. Curses input can't be waited on together with a queue, so the
wait is sliced: check input, wait briefly on the change bus, repeat.

Priority:
    When a key and a change are both ready, the key wins. A busy file
    producing a constant stream of changes must never delay quitting.
"""

from dataclasses import dataclass
from typing import Optional, Protocol, Union

from .bus import ChangeBus
from .keys import Action


class InputSource(Protocol):
    def poll(self) -> Optional[Action]:
        """Return a pending action without blocking, or None."""


@dataclass(frozen=True)
class InputEvent:
    action: Action


@dataclass(frozen=True)
class ChangeEvent:
    pass


Event = Union[InputEvent, ChangeEvent]


def wait_for_event(source: InputSource, bus: ChangeBus, slice_seconds: float) -> Event:
    """
    Block until input or a change notification is available.

    Args:
        source: Non-blocking input source.
        bus: The fan-in change bus.
        slice_seconds: Longest single wait on the bus before input is
                       checked again (bounds key latency).

    Returns:
        InputEvent if a key action arrived (checked first), otherwise
        ChangeEvent once the bus fired.
    """
    while True:
        action = source.poll()
        if action is not None:
            return InputEvent(action)

        if bus.wait(slice_seconds):
            # Both ready in the same tick: input still goes first. The
            # consumed change is harmless because every redraw reads
            # current state.
            action = source.poll()
            if action is not None:
                return InputEvent(action)
            return ChangeEvent()
