"""Module containing pub/sub and scripting commands."""

import collections.abc
import typing

from disguise import normalize
from disguise.commands import base

__all__: collections.abc.Sequence[str] = ("PubSubCommands", "ScriptingCommands")


Callback: typing.TypeAlias = typing.Callable[..., typing.Any]


class PubSubCommands(base.CommandsBase):
    """Publishing, and subscriptions delegated to the transport.

    A subscribed connection stops answering ordinary commands, so the
    subscription itself is owned by the transport; the session only validates
    and forwards the request.
    """

    async def publish(self, channel: normalize.Primitive, message: normalize.Primitive) -> base.Result[int]:
        """Post a message to a channel; returns the number of receiving clients."""
        return await self._call(self._command("PUBLISH", channel, message))

    async def subscribe(
        self,
        channels: normalize.Primitive | collections.abc.Iterable[normalize.Primitive],
        callback: Callback | None = None,
    ) -> typing.Any:  # noqa: ANN401
        return await self._subscription("SUBSCRIBE", channels, callback)

    async def psubscribe(
        self,
        patterns: normalize.Primitive | collections.abc.Iterable[normalize.Primitive],
        callback: Callback | None = None,
    ) -> typing.Any:  # noqa: ANN401
        return await self._subscription("PSUBSCRIBE", patterns, callback)

    async def unsubscribe(
        self,
        channels: normalize.Primitive | collections.abc.Iterable[normalize.Primitive] = (),
    ) -> typing.Any:  # noqa: ANN401
        """Leave the given channels, or every channel when none are given."""
        return await self._subscription("UNSUBSCRIBE", channels, None, allow_empty=True)

    async def punsubscribe(
        self,
        patterns: normalize.Primitive | collections.abc.Iterable[normalize.Primitive] = (),
    ) -> typing.Any:  # noqa: ANN401
        return await self._subscription("PUNSUBSCRIBE", patterns, None, allow_empty=True)

    async def _subscription(
        self,
        kind: str,
        channels: normalize.Primitive | collections.abc.Iterable[normalize.Primitive],
        callback: Callback | None,
        *,
        allow_empty: bool = False,
    ) -> typing.Any:  # noqa: ANN401
        raise NotImplementedError


class ScriptingCommands(base.CommandsBase):
    async def evalsha(
        self,
        sha: str,
        keys: collections.abc.Iterable[normalize.Primitive] = (),
        args: collections.abc.Iterable[normalize.Primitive] = (),
    ) -> base.Result[typing.Any]:
        """Run a cached Lua script.

        ``keys`` and ``args`` are kept apart so the key count can never
        disagree with the keys actually sent.
        """
        script_keys = normalize.variadic(keys, name="keys", allow_empty=True)
        cmd = self._command("EVALSHA", sha, len(script_keys)).keys(script_keys)
        cmd.args(normalize.variadic(args, name="args", allow_empty=True))
        return await self._call(cmd)
