"""Module containing list commands.

Push and pop take a ``direction`` instead of coming in L/R pairs. A push
followed by a pop at the same end behaves as a stack at that end.
"""

import collections.abc
import typing

from disguise import normalize, transform, validate
from disguise.commands import base

__all__: collections.abc.Sequence[str] = ("ListCommands",)


_PUSH: typing.Final = {validate.Direction.LEFT: "LPUSH", validate.Direction.RIGHT: "RPUSH"}
_PUSHX: typing.Final = {validate.Direction.LEFT: "LPUSHX", validate.Direction.RIGHT: "RPUSHX"}
_POP: typing.Final = {validate.Direction.LEFT: "LPOP", validate.Direction.RIGHT: "RPOP"}
_BPOP: typing.Final = {validate.Direction.LEFT: "BLPOP", validate.Direction.RIGHT: "BRPOP"}


def _direction(direction: validate.Direction | str) -> validate.Direction:
    return validate.coerce(validate.Direction, direction, parameter="direction")


class ListCommands(base.CommandsBase):
    async def push(
        self,
        key: normalize.Primitive,
        values: collections.abc.Iterable[normalize.Primitive],
        direction: validate.Direction | str = validate.Direction.LEFT,
    ) -> base.Result[int]:
        """Push values onto the head (LEFT) or tail (RIGHT) of a list.

        Values are pushed one after another in the order given, so pushing
        ``[1, 2, 3]`` to the LEFT leaves ``3`` at the head. Returns the new
        length of the list.
        """
        resolved = _direction(direction)
        cmd = self._command(_PUSH[resolved]).key(key).args(normalize.variadic(values))
        return await self._call(cmd)

    async def pushx(
        self,
        key: normalize.Primitive,
        value: normalize.Primitive,
        direction: validate.Direction | str = validate.Direction.LEFT,
    ) -> base.Result[int]:
        """Push a value only if the list already exists; returns the new length (0 if not)."""
        resolved = _direction(direction)
        return await self._call(self._command(_PUSHX[resolved]).key(key).arg(value))

    async def pop(
        self,
        key: normalize.Primitive,
        direction: validate.Direction | str = validate.Direction.LEFT,
    ) -> base.Result[typing.Any]:
        """Remove and return the first (LEFT) or last (RIGHT) element of a list."""
        resolved = _direction(direction)
        return await self._call(self._command(_POP[resolved]).key(key))

    async def bpop(
        self,
        keys: normalize.Primitive | collections.abc.Iterable[normalize.Primitive],
        timeout: float,
        direction: validate.Direction | str = validate.Direction.LEFT,
    ) -> transform.PoppedItem | None:
        """Pop from the first non-empty list among ``keys``, waiting if all are empty.

        ``timeout`` is forwarded to the transport unchanged; its unit and the
        meaning of ``0`` are those of the server the transport talks to. The
        result is ``None`` when the wait timed out.

        Blocking pops cannot be queued in MULTI or PIPELINE mode.
        """
        resolved = _direction(direction)
        cmd = self._command(_BPOP[resolved]).keys(normalize.variadic(keys, name="keys"))  # type: ignore[arg-type]
        cmd.arg(timeout).set_transform(transform.popped_item)
        return await self._call_atomic(cmd, "run a blocking pop")

    async def lset(self, key: normalize.Primitive, index: int, value: normalize.Primitive) -> base.Result[bool]:
        cmd = self._command("LSET").key(key).arg(normalize.integer(index, name="index")).arg(value)
        return await self._call(cmd.set_transform(transform.to_ok))

    async def lindex(self, key: normalize.Primitive, index: int) -> base.Result[typing.Any]:
        cmd = self._command("LINDEX").key(key).arg(normalize.integer(index, name="index"))
        return await self._call(cmd)

    async def linsert(
        self,
        key: normalize.Primitive,
        position: validate.Position | str,
        pivot: normalize.Primitive,
        value: normalize.Primitive,
    ) -> base.Result[int]:
        """Insert ``value`` BEFORE or AFTER the first occurrence of ``pivot``.

        Returns the new list length, ``-1`` when the pivot was not found and
        ``0`` when the list does not exist.
        """
        resolved = validate.coerce(validate.Position, position, parameter="position")
        cmd = self._command("LINSERT").key(key).arg(resolved.value).arg(pivot).arg(value)
        return await self._call(cmd)

    async def lrem(self, key: normalize.Primitive, value: normalize.Primitive, count: int = 0) -> base.Result[int]:
        """Remove occurrences of ``value``.

        A positive ``count`` removes that many from the head, a negative one
        from the tail, and ``0`` removes all of them.
        """
        cmd = self._command("LREM").key(key).arg(normalize.integer(count, name="count")).arg(value)
        return await self._call(cmd)

    async def lrange(self, key: normalize.Primitive, start: int, end: int) -> base.Result[list[typing.Any]]:
        cmd = self._command("LRANGE").key(key)
        cmd.arg(normalize.integer(start, name="start")).arg(normalize.integer(end, name="end"))
        return await self._call(cmd)

    async def ltrim(self, key: normalize.Primitive, start: int, stop: int) -> base.Result[bool]:
        cmd = self._command("LTRIM").key(key)
        cmd.arg(normalize.integer(start, name="start")).arg(normalize.integer(stop, name="stop"))
        return await self._call(cmd.set_transform(transform.to_ok))

    async def rpoplpush(self, source: normalize.Primitive, destination: normalize.Primitive) -> base.Result[typing.Any]:
        return await self._call(self._command("RPOPLPUSH").key(source).key(destination))

    async def brpoplpush(
        self,
        source: normalize.Primitive,
        destination: normalize.Primitive,
        timeout: float,
    ) -> typing.Any:  # noqa: ANN401
        """Blocking ``rpoplpush``; ``timeout`` is forwarded unchanged, as for ``bpop``."""
        cmd = self._command("BRPOPLPUSH").key(source).key(destination).arg(timeout)
        return await self._call_atomic(cmd, "run a blocking pop")

    async def llen(self, key: normalize.Primitive) -> base.Result[int]:
        return await self._call(self._command("LLEN").key(key))
