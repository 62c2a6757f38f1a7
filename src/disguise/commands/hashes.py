"""Module containing hash commands."""

import collections.abc
import typing

from disguise import normalize, transform
from disguise.commands import base

__all__: collections.abc.Sequence[str] = ("HashCommands",)


class HashCommands(base.CommandsBase):
    async def hset(
        self,
        key: normalize.Primitive,
        field: normalize.Primitive,
        value: normalize.Primitive,
        *,
        overwrite: bool = True,
    ) -> base.Result[bool]:
        """Set a hash field.

        With ``overwrite=False`` (HSETNX) an existing field is left untouched.
        Returns whether a new field was created.
        """
        cmd = self._command("HSET" if overwrite else "HSETNX").key(key).arg(field).arg(value)
        return await self._call(cmd.set_transform(transform.to_bool))

    async def hmset(
        self,
        key: normalize.Primitive,
        mapping: collections.abc.Mapping[normalize.Primitive, normalize.Primitive],
    ) -> base.Result[int]:
        """Set several hash fields at once; returns how many fields were new."""
        cmd = self._command("HSET").key(key).args(normalize.mapping_pairs(mapping, name="mapping"))
        return await self._call(cmd)

    async def hget(self, key: normalize.Primitive, field: normalize.Primitive) -> base.Result[typing.Any]:
        return await self._call(self._command("HGET").key(key).arg(field))

    async def hmget(
        self,
        key: normalize.Primitive,
        fields: collections.abc.Iterable[normalize.Primitive],
    ) -> base.Result[dict[typing.Any, typing.Any]]:
        """Return the values of several fields, keyed by field; missing fields map to ``None``."""
        requested = normalize.variadic(fields, name="fields")
        cmd = self._command("HMGET").key(key).args(requested)
        return await self._call(cmd.set_transform(lambda reply: dict(zip(requested, reply, strict=True))))

    async def hgetall(self, key: normalize.Primitive) -> base.Result[dict[typing.Any, typing.Any]]:
        return await self._call(self._command("HGETALL").key(key).set_transform(transform.pairwise_to_dict))

    async def hlen(self, key: normalize.Primitive) -> base.Result[int]:
        return await self._call(self._command("HLEN").key(key))

    async def hexists(self, key: normalize.Primitive, field: normalize.Primitive) -> base.Result[bool]:
        cmd = self._command("HEXISTS").key(key).arg(field)
        return await self._call(cmd.set_transform(transform.to_bool))

    async def hdel(self, key: normalize.Primitive, fields: collections.abc.Iterable[normalize.Primitive]) -> base.Result[int]:
        return await self._call(self._command("HDEL").key(key).args(normalize.variadic(fields, name="fields")))

    async def hkeys(self, key: normalize.Primitive) -> base.Result[list[typing.Any]]:
        return await self._call(self._command("HKEYS").key(key))

    async def hvals(self, key: normalize.Primitive) -> base.Result[list[typing.Any]]:
        return await self._call(self._command("HVALS").key(key))

    async def hincrby(self, key: normalize.Primitive, field: normalize.Primitive, increment: int) -> base.Result[int]:
        cmd = self._command("HINCRBY").key(key).arg(field).arg(normalize.number(increment, name="increment"))
        return await self._call(cmd)

    async def hincrbyfloat(
        self,
        key: normalize.Primitive,
        field: normalize.Primitive,
        increment: float,
    ) -> base.Result[float]:
        cmd = self._command("HINCRBYFLOAT").key(key).arg(field).arg(normalize.number(increment, name="increment"))
        return await self._call(cmd.set_transform(transform.to_float))
