"""Module containing bitmap and HyperLogLog commands."""

import collections.abc

from disguise import error, normalize, transform, validate
from disguise.commands import base

__all__: collections.abc.Sequence[str] = ("BitmapCommands", "HyperLogLogCommands")


class BitmapCommands(base.CommandsBase):
    async def setbit(self, key: normalize.Primitive, offset: int, value: int) -> base.Result[int]:
        """Set the bit at ``offset`` to 0 or 1; returns the bit's previous value."""
        cmd = self._command("SETBIT").key(key).arg(normalize.integer(offset, name="offset")).arg(normalize.bit(value))
        return await self._call(cmd)

    async def getbit(self, key: normalize.Primitive, offset: int) -> base.Result[int]:
        return await self._call(self._command("GETBIT").key(key).arg(normalize.integer(offset, name="offset")))

    async def bitop(
        self,
        operation: validate.BitOperation | str,
        destination: normalize.Primitive,
        keys: collections.abc.Iterable[normalize.Primitive],
    ) -> base.Result[int]:
        """Combine bitmaps with AND, OR, XOR or NOT and store the result.

        NOT takes exactly one source key. Returns the length of the stored
        string.
        """
        resolved = validate.coerce(validate.BitOperation, operation, parameter="bit operation")
        sources = normalize.variadic(keys, name="keys")

        if resolved is validate.BitOperation.NOT and len(sources) != 1:
            msg = f"NOT takes exactly one source key, got {len(sources)}"
            raise error.ArgumentShapeError(msg)

        cmd = self._command("BITOP", resolved.value).key(destination).keys(sources)
        return await self._call(cmd)

    async def bitpos(
        self,
        key: normalize.Primitive,
        bit: int,
        start: int | None = None,
        end: int | None = None,
    ) -> base.Result[int]:
        """Return the position of the first bit set to ``bit``, optionally within a byte range.

        ``end`` can only be given together with ``start``.
        """
        cmd = self._command("BITPOS").key(key).arg(normalize.bit(bit))

        if end is not None and start is None:
            msg = "bitpos needs start when end is given"
            raise error.ArgumentShapeError(msg)

        if start is not None:
            cmd.arg(normalize.integer(start, name="start"))
        if end is not None:
            cmd.arg(normalize.integer(end, name="end"))

        return await self._call(cmd)

    async def bitcount(self, key: normalize.Primitive) -> base.Result[int]:
        return await self._call(self._command("BITCOUNT").key(key))


class HyperLogLogCommands(base.CommandsBase):
    async def pfadd(self, key: normalize.Primitive, elements: collections.abc.Iterable[normalize.Primitive]) -> base.Result[int]:
        """Add elements to a HyperLogLog; returns 1 if its estimate changed."""
        return await self._call(self._command("PFADD").key(key).args(normalize.variadic(elements, name="elements")))

    async def pfcount(
        self,
        keys: normalize.Primitive | collections.abc.Iterable[normalize.Primitive],
    ) -> base.Result[int]:
        """Return the approximate cardinality of one HyperLogLog, or of the union of several."""
        cmd = self._command("PFCOUNT").keys(normalize.variadic(keys, name="keys"))  # type: ignore[arg-type]
        return await self._call(cmd)

    async def pfmerge(
        self,
        destination: normalize.Primitive,
        sources: collections.abc.Iterable[normalize.Primitive],
    ) -> base.Result[bool]:
        cmd = self._command("PFMERGE").key(destination).keys(normalize.variadic(sources, name="sources"))
        return await self._call(cmd.set_transform(transform.to_ok))
