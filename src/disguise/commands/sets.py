"""Module containing set commands."""

import collections.abc
import typing

from disguise import normalize, transform
from disguise.commands import base

__all__: collections.abc.Sequence[str] = ("SetCommands",)


Keys: typing.TypeAlias = collections.abc.Iterable[normalize.Primitive]


class SetCommands(base.CommandsBase):
    async def sadd(self, key: normalize.Primitive, members: collections.abc.Iterable[normalize.Primitive]) -> base.Result[int]:
        """Add members to a set; returns how many were not already present."""
        return await self._call(self._command("SADD").key(key).args(normalize.variadic(members, name="members")))

    async def smove(
        self,
        source: normalize.Primitive,
        destination: normalize.Primitive,
        member: normalize.Primitive,
    ) -> base.Result[bool]:
        cmd = self._command("SMOVE").key(source).key(destination).arg(member)
        return await self._call(cmd.set_transform(transform.to_bool))

    async def scard(self, key: normalize.Primitive) -> base.Result[int]:
        return await self._call(self._command("SCARD").key(key))

    async def smembers(self, key: normalize.Primitive) -> base.Result[set[typing.Any]]:
        return await self._call(self._command("SMEMBERS").key(key).set_transform(set))

    async def sismember(self, key: normalize.Primitive, member: normalize.Primitive) -> base.Result[bool]:
        cmd = self._command("SISMEMBER").key(key).arg(member)
        return await self._call(cmd.set_transform(transform.to_bool))

    async def srem(self, key: normalize.Primitive, members: collections.abc.Iterable[normalize.Primitive]) -> base.Result[int]:
        return await self._call(self._command("SREM").key(key).args(normalize.variadic(members, name="members")))

    async def sunion(self, keys: Keys) -> base.Result[set[typing.Any]]:
        cmd = self._command("SUNION").keys(normalize.variadic(keys, name="keys"))
        return await self._call(cmd.set_transform(set))

    async def sunionstore(self, destination: normalize.Primitive, keys: Keys) -> base.Result[int]:
        cmd = self._command("SUNIONSTORE").key(destination).keys(normalize.variadic(keys, name="keys"))
        return await self._call(cmd)

    async def sinter(self, keys: Keys) -> base.Result[set[typing.Any]]:
        cmd = self._command("SINTER").keys(normalize.variadic(keys, name="keys"))
        return await self._call(cmd.set_transform(set))

    async def sinterstore(self, destination: normalize.Primitive, keys: Keys) -> base.Result[int]:
        cmd = self._command("SINTERSTORE").key(destination).keys(normalize.variadic(keys, name="keys"))
        return await self._call(cmd)

    async def sdiff(self, keys: Keys) -> base.Result[set[typing.Any]]:
        """Return the members of the first set that are in none of the others."""
        cmd = self._command("SDIFF").keys(normalize.variadic(keys, name="keys"))
        return await self._call(cmd.set_transform(set))

    async def sdiffstore(self, destination: normalize.Primitive, keys: Keys) -> base.Result[int]:
        cmd = self._command("SDIFFSTORE").key(destination).keys(normalize.variadic(keys, name="keys"))
        return await self._call(cmd)

    async def srandmember(self, key: normalize.Primitive, count: int = 1) -> base.Result[list[typing.Any]]:
        """Return up to ``count`` random members without removing them.

        A negative ``count`` may return the same member more than once.
        """
        cmd = self._command("SRANDMEMBER").key(key).arg(normalize.integer(count, name="count"))
        return await self._call(cmd)

    async def spop(self, key: normalize.Primitive, count: int = 1) -> base.Result[list[typing.Any]]:
        """Remove and return up to ``count`` random members."""
        cmd = self._command("SPOP").key(key).arg(normalize.integer(count, name="count"))
        return await self._call(cmd)
