"""Module containing the base every command family mixin builds on."""

import collections.abc
import typing

from disguise import command, session

__all__: collections.abc.Sequence[str] = ("CommandsBase", "Result")


T = typing.TypeVar("T")

# What a command method returns: its result in ATOMIC mode, or a placeholder
# for the reply when the session is queueing commands.
Result: typing.TypeAlias = typing.Union[T, session.Queued]  # noqa: UP007


class CommandsBase:
    """Hooks the command family mixins rely on; implemented by ``Session``."""

    def _command(self, name: str, *args: typing.Any) -> command.Command:  # noqa: ANN401
        """Create a new command carrying this session's key prefix."""
        raise NotImplementedError

    async def _call(self, cmd: command.Command, /) -> typing.Any:  # noqa: ANN401
        """Run ``cmd`` now, or queue it when the session is buffering."""
        raise NotImplementedError

    async def _call_atomic(self, cmd: command.Command, operation: str, /) -> typing.Any:  # noqa: ANN401
        """Run ``cmd`` now; reject it when the session is buffering."""
        raise NotImplementedError
