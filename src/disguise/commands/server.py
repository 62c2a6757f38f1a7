"""Module containing connection and server commands."""

import collections.abc
import typing

from disguise import normalize, transform
from disguise.commands import base

__all__: collections.abc.Sequence[str] = ("ServerCommands",)


class ServerCommands(base.CommandsBase):
    async def ping(self, message: normalize.Primitive | None = None) -> base.Result[typing.Any]:
        cmd = self._command("PING")
        if message is not None:
            cmd.arg(message)

        return await self._call(cmd)

    async def echo(self, message: normalize.Primitive) -> base.Result[typing.Any]:
        return await self._call(self._command("ECHO", message))

    async def time(self) -> base.Result[tuple[int, int]]:
        """Return the server time as ``(unix seconds, microseconds)``."""
        return await self._call(self._command("TIME").set_transform(transform.server_time))

    async def dbsize(self) -> base.Result[int]:
        return await self._call(self._command("DBSIZE"))

    async def info(self, section: str | None = None) -> base.Result[dict[str, str]]:
        """Return server information as a flat ``{field: value}`` dict."""
        cmd = self._command("INFO")
        if section is not None:
            cmd.arg(section)

        return await self._call(cmd.set_transform(transform.parse_info))

    async def role(self) -> base.Result[list[typing.Any]]:
        return await self._call(self._command("ROLE"))

    async def lastsave(self) -> base.Result[int]:
        return await self._call(self._command("LASTSAVE"))

    async def save(self) -> base.Result[bool]:
        return await self._call(self._command("SAVE").set_transform(transform.to_ok))

    async def bgsave(self) -> base.Result[typing.Any]:
        return await self._call(self._command("BGSAVE"))

    async def bgrewriteaof(self) -> base.Result[typing.Any]:
        return await self._call(self._command("BGREWRITEAOF"))

    async def flushdb(self) -> base.Result[bool]:
        return await self._call(self._command("FLUSHDB").set_transform(transform.to_ok))

    async def flushall(self) -> base.Result[bool]:
        return await self._call(self._command("FLUSHALL").set_transform(transform.to_ok))

    async def command(self) -> base.Result[list[typing.Any]]:
        """Return details about every command the server supports."""
        return await self._call(self._command("COMMAND"))

    async def raw(self, name: str, *args: normalize.Primitive) -> base.Result[typing.Any]:
        """Send an arbitrary command with its arguments as given.

        No validation or key prefixing takes place; the reply is returned
        untransformed.
        """
        return await self._call(self._command(name, *args))
