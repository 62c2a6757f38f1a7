"""Module containing generic keyspace commands."""

import collections.abc
import typing

from disguise import normalize, options, transform, validate
from disguise.commands import base

__all__: collections.abc.Sequence[str] = ("KeyCommands",)


class KeyCommands(base.CommandsBase):
    async def delete(
        self,
        keys: normalize.Primitive | collections.abc.Iterable[normalize.Primitive],
    ) -> base.Result[int]:
        """Delete one key or a collection of keys; returns how many existed."""
        cmd = self._command("DEL").keys(normalize.variadic(keys, name="keys"))  # type: ignore[arg-type]
        return await self._call(cmd)

    async def exists(
        self,
        keys: normalize.Primitive | collections.abc.Iterable[normalize.Primitive],
    ) -> base.Result[int]:
        """Return how many of the given keys exist."""
        cmd = self._command("EXISTS").keys(normalize.variadic(keys, name="keys"))  # type: ignore[arg-type]
        return await self._call(cmd)

    async def keys(self, pattern: str = "*") -> base.Result[list[typing.Any]]:
        """Return every key matching ``pattern``.

        This blocks the server for as long as the keyspace takes to walk; prefer
        ``scan_iter`` on anything but small databases.
        """
        cmd = self._command("KEYS")
        return await self._call(cmd.arg(cmd.prefixed(pattern)))

    async def type(self, key: normalize.Primitive) -> base.Result[str]:
        cmd = self._command("TYPE").key(key)
        return await self._call(cmd.set_transform(transform.to_str))

    async def expire(self, key: normalize.Primitive, ttl: int, *, milliseconds: bool = False) -> base.Result[bool]:
        """Set a key's time to live, in seconds or (PEXPIRE) milliseconds."""
        cmd = self._command("PEXPIRE" if milliseconds else "EXPIRE").key(key)
        cmd.arg(normalize.integer(ttl, name="ttl"))
        return await self._call(cmd.set_transform(transform.to_bool))

    async def expireat(
        self,
        key: normalize.Primitive,
        timestamp: int,
        *,
        milliseconds: bool = False,
    ) -> base.Result[bool]:
        """Expire a key at a unix timestamp, in seconds or (PEXPIREAT) milliseconds."""
        cmd = self._command("PEXPIREAT" if milliseconds else "EXPIREAT").key(key)
        cmd.arg(normalize.integer(timestamp, name="timestamp"))
        return await self._call(cmd.set_transform(transform.to_bool))

    async def ttl(self, key: normalize.Primitive, *, milliseconds: bool = False) -> base.Result[int]:
        """Return a key's remaining time to live.

        ``-1`` means the key has no expiry, ``-2`` that it does not exist.
        """
        return await self._call(self._command("PTTL" if milliseconds else "TTL").key(key))

    async def persist(self, key: normalize.Primitive) -> base.Result[bool]:
        cmd = self._command("PERSIST").key(key)
        return await self._call(cmd.set_transform(transform.to_bool))

    async def rename(self, source: normalize.Primitive, destination: normalize.Primitive) -> base.Result[bool]:
        cmd = self._command("RENAME").key(source).key(destination)
        return await self._call(cmd.set_transform(transform.to_ok))

    async def renamenx(self, source: normalize.Primitive, destination: normalize.Primitive) -> base.Result[bool]:
        cmd = self._command("RENAMENX").key(source).key(destination)
        return await self._call(cmd.set_transform(transform.to_bool))

    async def sort(
        self,
        key: normalize.Primitive,
        opts: collections.abc.Mapping[str, typing.Any] | None = None,
    ) -> base.Result[typing.Any]:
        """Sort the elements of a list, set or sorted set.

        ``opts`` accepts ``by``, ``limit`` (an ``(offset, count)`` pair),
        ``get`` (a pattern or a sequence of patterns), ``sort`` (``ASC`` or
        ``DESC``), ``alpha`` and ``store``. Any other option is rejected with
        ``UnknownOptionError``. With ``store`` the reply is the number of
        stored elements.

        See also: https://redis.io/docs/latest/commands/sort/
        """
        cmd = self._command("SORT").key(key)
        cmd.args(options.SORT.flatten(opts, key=cmd.prefixed))
        return await self._call(cmd)

    async def object(
        self,
        subcommand: validate.ObjectSubcommand | str,
        key: normalize.Primitive,
    ) -> base.Result[typing.Any]:
        """Inspect the internals of a key's value.

        ``subcommand`` is one of ``refcount``, ``encoding`` or ``idletime``.
        """
        sub = validate.coerce(validate.ObjectSubcommand, subcommand, parameter="object subcommand")
        cmd = self._command("OBJECT", sub.value.upper()).key(key)
        return await self._call(cmd)

    async def dump(self, key: normalize.Primitive) -> base.Result[typing.Any]:
        return await self._call(self._command("DUMP").key(key))

    async def restore(self, key: normalize.Primitive, ttl: int, value: bytes) -> base.Result[bool]:
        """Create a key from a DUMP payload; a ``ttl`` of 0 means no expiry (milliseconds)."""
        cmd = self._command("RESTORE").key(key).arg(normalize.integer(ttl, name="ttl")).arg(value)
        return await self._call(cmd.set_transform(transform.to_ok))

    async def randomkey(self) -> base.Result[typing.Any]:
        return await self._call(self._command("RANDOMKEY"))
