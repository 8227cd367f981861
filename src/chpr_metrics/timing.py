"""
Timing helper and clock abstraction.

A Timing records a start instant from a Clock and, when sent, emits the
elapsed time as a timing metric through its Sender. The clock is
injectable so tests can freeze and advance time deterministically.

Instants are integer nanoseconds so elapsed time is never rounded before
it is truncated to milliseconds.
"""

import time
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .sender import Sender


NANOS_PER_SECOND = 1_000_000_000


def to_nanoseconds(value: float | timedelta) -> int:
    """Convert seconds (int, float) or a timedelta to integer nanoseconds."""
    if isinstance(value, timedelta):
        return ((value.days * 86400 + value.seconds) * 1_000_000 + value.microseconds) * 1000
    if isinstance(value, int):
        return value * NANOS_PER_SECOND
    return round(value * NANOS_PER_SECOND)


class Clock(ABC):
    """
    Abstract time source.

    Only differences between two now() values are meaningful.
    """

    @abstractmethod
    def now(self) -> int:
        """Get the current instant.

        Returns:
            Current instant in nanoseconds
        """
        pass


class SystemClock(Clock):
    """
    System clock backed by time.monotonic_ns().

    Examples:
        >>> clock = SystemClock()
        >>> start = clock.now()
        >>> elapsed_ns = clock.now() - start
    """

    def now(self) -> int:
        return time.monotonic_ns()


class FrozenClock(Clock):
    """
    Controllable clock for tests.

    Time only moves when set() or advance() is called. Both take seconds
    or a timedelta; now() reports nanoseconds like every Clock.

    Examples:
        >>> clock = FrozenClock()
        >>> start = clock.now()
        >>> clock.advance(1.0)
        >>> clock.now() - start
        1000000000
    """

    def __init__(self, initial_time: float | timedelta = 0):
        self.current = to_nanoseconds(initial_time)

    def now(self) -> int:
        return self.current

    def set(self, instant: float | timedelta) -> None:
        """Move the clock to ``instant`` (seconds)."""
        self.current = to_nanoseconds(instant)

    def advance(self, seconds: float | timedelta) -> None:
        """Move the clock forward.

        Raises:
            ValueError: If ``seconds`` is negative
        """
        delta = to_nanoseconds(seconds)
        if delta < 0:
            raise ValueError(f"Cannot advance clock by a negative amount, got {seconds}")
        self.current += delta


DEFAULT_CLOCK: Clock = SystemClock()


class Timing:
    """
    Measures one span of time and sends it as a timing metric.

    Create one where the measured work starts, then call send() where it
    ends. A Timing is not meant to be reused.

    Example:
        >>> timing = sender.new_timing()
        >>> do_some_task()
        >>> timing.send("some_task.timing")
    """

    def __init__(self, sender: "Sender", clock: Clock | None = None):
        """
        Start a measurement.

        Args:
            sender: Sender the duration is emitted through
            clock: Time source (default: the system clock)
        """
        self.sender = sender
        self.clock = clock or DEFAULT_CLOCK
        self.start = self.clock.now()

    def duration(self) -> timedelta:
        """Return the time elapsed since the Timing was created."""
        elapsed_ns = self.clock.now() - self.start
        micros = abs(elapsed_ns) // 1000
        return timedelta(microseconds=-micros if elapsed_ns < 0 else micros)

    def send(self, bucket: str) -> None:
        """Emit the elapsed time as a timing metric for ``bucket``."""
        self.sender.duration(bucket, self.duration())


__all__ = [
    "Clock",
    "SystemClock",
    "FrozenClock",
    "DEFAULT_CLOCK",
    "NANOS_PER_SECOND",
    "Timing",
    "to_nanoseconds",
]
