"""Module containing the session mode controller.

The controller holds the only mutable state a session has: its execution mode,
the commands queued while in MULTI or PIPELINE mode, and the set of watched
keys. It never talks to a transport itself.
"""

import collections.abc
import dataclasses
import logging
import typing

from disguise import command, error, normalize, validate

__all__: collections.abc.Sequence[str] = ("Queued", "Batch", "ModeController")

_LOGGER: typing.Final = logging.getLogger(__name__)


class Queued(typing.NamedTuple):
    """Placeholder returned for a command queued in MULTI or PIPELINE mode.

    ``index`` is the position of this command's reply in the list ``exec``
    returns.
    """

    index: int
    command: command.Command


class Batch(typing.NamedTuple):
    """Everything needed to flush a session's queue."""

    mode: validate.SessionMode
    commands: list[command.Command]
    watched: frozenset[normalize.Primitive]


@dataclasses.dataclass(slots=True)
class ModeController:
    """Tracks a session's execution mode, command queue and watched keys.

    ``ATOMIC`` is the initial state. ``enter`` moves to ``MULTI`` or
    ``PIPELINE``; ``drain`` (used by ``exec`` and ``discard``) hands back the
    queue and always returns to ``ATOMIC`` with no watched keys. Modes never
    nest.
    """

    mode: validate.SessionMode = validate.SessionMode.ATOMIC
    watched: set[normalize.Primitive] = dataclasses.field(default_factory=set)
    queue: list[command.Command] = dataclasses.field(default_factory=list)

    @property
    def buffering(self) -> bool:
        """Whether commands are currently queued instead of executed."""
        return self.mode is not validate.SessionMode.ATOMIC

    def enter(self, mode: validate.SessionMode | str) -> validate.SessionMode:
        """Switch from ``ATOMIC`` to a buffering mode."""
        target = validate.coerce(validate.SessionMode, mode, parameter="mode")

        if self.buffering:
            raise error.InvalidModeTransitionError(self.mode.value, f"enter {target.value} mode")

        if target is validate.SessionMode.ATOMIC:
            raise error.InvalidModeTransitionError(self.mode.value, "enter ATOMIC mode explicitly")

        _LOGGER.debug("session mode %s -> %s", self.mode.value, target.value)
        self.mode = target
        return target

    def enqueue(self, cmd: command.Command) -> Queued:
        """Queue a command for the next flush."""
        self.require_buffering("queue a command")

        self.queue.append(cmd)
        return Queued(len(self.queue) - 1, cmd)

    def require_atomic(self, operation: str) -> None:
        if self.buffering:
            raise error.InvalidModeTransitionError(self.mode.value, operation)

    def require_buffering(self, operation: str) -> None:
        if not self.buffering:
            raise error.InvalidModeTransitionError(self.mode.value, operation)

    def watch(self, keys: collections.abc.Iterable[normalize.Primitive]) -> None:
        self.require_atomic("watch keys")
        self.watched.update(keys)

    def unwatch(self) -> None:
        if self.watched:
            _LOGGER.debug("no longer watching %d key(s)", len(self.watched))
        self.watched.clear()

    def drain(self, operation: str) -> Batch:
        """Take the queued commands and return to ``ATOMIC``."""
        self.require_buffering(operation)

        batch = Batch(self.mode, self.queue, frozenset(self.watched))
        self.reset()

        _LOGGER.debug(
            "%s %d queued command(s) from %s mode",
            operation,
            len(batch.commands),
            batch.mode.value,
        )
        return batch

    def reset(self) -> None:
        """Return to the initial state, dropping any queue and watched keys."""
        self.mode = validate.SessionMode.ATOMIC
        self.queue = []
        self.watched.clear()
