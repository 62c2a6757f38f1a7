"""Module containing command implementation."""

import collections.abc
import dataclasses
import typing

from disguise import error, normalize, protocol

if typing.TYPE_CHECKING:
    import typing_extensions

__all__: collections.abc.Sequence[str] = ("Command", "prefix_key")


Transform: typing.TypeAlias = typing.Callable[[typing.Any], typing.Any]


def prefix_key(prefix: str, value: normalize.Primitive) -> normalize.Primitive:
    """Return ``value`` with ``prefix`` prepended, keeping bytes keys bytes."""
    if not prefix:
        return value

    if isinstance(value, bytes):
        return prefix.encode() + value

    return f"{prefix}{value}"


@dataclasses.dataclass(slots=True)
class Command:
    """A server command.

    Arguments are collected with ``arg``, ``args`` and ``key``. Keys go through
    ``key`` so that the session's key prefix is applied to them and only them.
    Once a command has been dispatched it is frozen and any further attempt to
    add arguments raises ``StateError``.
    """

    name: str
    arguments: list[normalize.Primitive]
    prefix: str
    transform: Transform | None
    dispatched: bool

    def __init__(self, name: str, *args: normalize.Primitive, prefix: str = "") -> None:
        self.name = name.upper()
        self.prefix = prefix
        self.transform = None
        self.dispatched = False

        self.arguments = []
        for arg in args:
            self.arg(arg)

    def _check_mutable(self) -> None:
        if self.dispatched:
            msg = f"{self.name} has already been dispatched and can no longer be changed."
            raise error.StateError(msg)

    def arg(self, value: normalize.Primitive) -> "typing_extensions.Self":
        """Add an argument to this command."""
        self._check_mutable()
        self.arguments.append(value)
        return self

    def args(self, values: collections.abc.Iterable[normalize.Primitive]) -> "typing_extensions.Self":
        """Add every value of an already-normalised sequence, in order."""
        for value in values:
            self.arg(value)
        return self

    def key(self, value: normalize.Primitive) -> "typing_extensions.Self":
        """Add a key argument, applying the key prefix."""
        return self.arg(self.prefixed(value))

    def keys(self, values: collections.abc.Iterable[normalize.Primitive]) -> "typing_extensions.Self":
        """Add several key arguments, applying the key prefix to each."""
        for value in values:
            self.key(value)
        return self

    def prefixed(self, value: normalize.Primitive) -> normalize.Primitive:
        """Return ``value`` with this command's key prefix applied."""
        return prefix_key(self.prefix, value)

    def set_transform(self, transform: Transform | None, /) -> "typing_extensions.Self":
        """Set the function that turns the raw reply into this command's result."""
        self._check_mutable()
        self.transform = transform
        return self

    def apply(self, reply: typing.Any) -> typing.Any:  # noqa: ANN401
        """Apply this command's reply transform, if any."""
        if self.transform is None:
            return reply

        return self.transform(reply)

    async def execute(self, transport: protocol.TransportProto) -> typing.Any:  # noqa: ANN401
        """Execute this command on a given transport and return the raw reply."""
        self.dispatched = True
        return await transport.execute(self.name, tuple(self.arguments))

    def __str__(self) -> str:
        parts = [self.name]
        for arg in self.arguments:
            parts.append(arg.decode("utf-8", errors="replace") if isinstance(arg, bytes) else str(arg))

        return " ".join(parts)

    def __len__(self) -> int:
        return len(self.arguments) + 1

    def __iter__(self) -> collections.abc.Iterator[normalize.Primitive]:
        yield self.name
        yield from self.arguments
