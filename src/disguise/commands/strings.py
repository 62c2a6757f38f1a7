"""Module containing string commands."""

import collections.abc
import typing

from disguise import error, normalize, options, transform
from disguise.commands import base

__all__: collections.abc.Sequence[str] = ("StringCommands",)


class StringCommands(base.CommandsBase):
    async def set(
        self,
        key: normalize.Primitive,
        value: normalize.Primitive,
        timeout: int | None = None,
        *,
        milliseconds: bool = False,
        opts: collections.abc.Mapping[str, typing.Any] | None = None,
    ) -> base.Result[bool]:
        """Set the string value of a key.

        With a ``timeout`` the key expires after that many seconds (or
        milliseconds with ``milliseconds=True``), using SETEX or PSETEX. The
        full SET option bag (``ex``, ``px``, ``nx``, ``xx``, ``keepttl``,
        ``get``) is available through ``opts`` instead; the two cannot be
        combined.

        See also: https://redis.io/docs/latest/commands/set/
        """
        if timeout is not None:
            if opts:
                msg = "set accepts either a timeout or an option bag, not both"
                raise error.ArgumentShapeError(msg)

            name = "PSETEX" if milliseconds else "SETEX"
            ttl = normalize.integer(timeout, name="timeout")
            cmd = self._command(name).key(key).arg(ttl).arg(value)
            return await self._call(cmd.set_transform(transform.to_ok))

        cmd = self._command("SET").key(key).arg(value)
        cmd.args(options.SET.flatten(opts))

        if opts and opts.get("get"):
            # SET ... GET returns the previous value rather than a status.
            return await self._call(cmd)

        return await self._call(cmd.set_transform(transform.to_bool))

    async def get(self, key: normalize.Primitive) -> base.Result[typing.Any]:
        return await self._call(self._command("GET").key(key))

    async def mset(self, mapping: collections.abc.Mapping[normalize.Primitive, normalize.Primitive]) -> base.Result[bool]:
        """Set several keys at once, overwriting existing values."""
        cmd = self._command("MSET")
        for key, value in mapping.items():
            cmd.key(key).arg(value)

        if len(cmd) == 1:
            msg = "mapping must contain at least one entry"
            raise error.ArgumentShapeError(msg)

        return await self._call(cmd.set_transform(transform.to_ok))

    async def msetnx(self, mapping: collections.abc.Mapping[normalize.Primitive, normalize.Primitive]) -> base.Result[bool]:
        """Set several keys at once, only if none of them exist.

        Either every key is set or none is.
        """
        cmd = self._command("MSETNX")
        for key, value in mapping.items():
            cmd.key(key).arg(value)

        if len(cmd) == 1:
            msg = "mapping must contain at least one entry"
            raise error.ArgumentShapeError(msg)

        return await self._call(cmd.set_transform(transform.to_bool))

    async def mget(self, keys: collections.abc.Iterable[normalize.Primitive]) -> base.Result[list[typing.Any]]:
        cmd = self._command("MGET").keys(normalize.variadic(keys, name="keys"))
        return await self._call(cmd)

    async def setnx(self, key: normalize.Primitive, value: normalize.Primitive) -> base.Result[bool]:
        cmd = self._command("SETNX").key(key).arg(value)
        return await self._call(cmd.set_transform(transform.to_bool))

    async def getset(self, key: normalize.Primitive, value: normalize.Primitive) -> base.Result[typing.Any]:
        return await self._call(self._command("GETSET").key(key).arg(value))

    async def strlen(self, key: normalize.Primitive) -> base.Result[int]:
        return await self._call(self._command("STRLEN").key(key))

    async def getrange(self, key: normalize.Primitive, start: int, end: int) -> base.Result[typing.Any]:
        cmd = self._command("GETRANGE").key(key)
        cmd.arg(normalize.integer(start, name="start")).arg(normalize.integer(end, name="end"))
        return await self._call(cmd)

    async def setrange(self, key: normalize.Primitive, offset: int, value: normalize.Primitive) -> base.Result[int]:
        cmd = self._command("SETRANGE").key(key).arg(normalize.integer(offset, name="offset")).arg(value)
        return await self._call(cmd)

    async def incr(self, key: normalize.Primitive) -> base.Result[int]:
        return await self._call(self._command("INCR").key(key))

    async def incrby(self, key: normalize.Primitive, increment: int) -> base.Result[int]:
        """Increment the integer value of a key.

        The increment is forwarded as-is; a non-integer increment or stored
        value is rejected by the server and raised as ``TypeMismatchError``.
        """
        cmd = self._command("INCRBY").key(key).arg(normalize.number(increment, name="increment"))
        return await self._call(cmd)

    async def decr(self, key: normalize.Primitive) -> base.Result[int]:
        return await self._call(self._command("DECR").key(key))

    async def decrby(self, key: normalize.Primitive, decrement: int) -> base.Result[int]:
        cmd = self._command("DECRBY").key(key).arg(normalize.number(decrement, name="decrement"))
        return await self._call(cmd)

    async def incrbyfloat(self, key: normalize.Primitive, increment: float) -> base.Result[float]:
        cmd = self._command("INCRBYFLOAT").key(key).arg(normalize.number(increment, name="increment"))
        return await self._call(cmd.set_transform(transform.to_float))

    async def append(self, key: normalize.Primitive, value: normalize.Primitive) -> base.Result[int]:
        return await self._call(self._command("APPEND").key(key).arg(value))
