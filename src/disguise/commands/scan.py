"""Module containing the SCAN-family commands."""

import collections.abc
import typing

from disguise import command, cursor, normalize, transform
from disguise.commands import base

__all__: collections.abc.Sequence[str] = ("ScanCommands",)


ItemsTransform: typing.TypeAlias = typing.Callable[[list[typing.Any]], list[typing.Any]]


class ScanCommands(base.CommandsBase):
    """Caller-driven and lazy scans.

    ``scan``, ``sscan``, ``hscan`` and ``zscan`` fetch a single page and move
    the given ``Cursor`` forward; call them until ``cursor.exhausted``. The
    ``*_iter`` variants do exactly that and yield items lazily. Neither retries
    on failure. Scans cannot be queued in MULTI or PIPELINE mode, since each
    reply decides the next call.
    """

    @property
    def _scan_count(self) -> int | None:
        raise NotImplementedError

    async def _page(
        self,
        cmd: command.Command,
        position: cursor.Cursor,
        *,
        prefix_pattern: bool = False,
        items: ItemsTransform | None = None,
    ) -> list[typing.Any]:
        cursor.prepare(position, cmd, default_count=self._scan_count, prefix_pattern=prefix_pattern)
        raw = await self._call_atomic(cmd, f"run {cmd.name}")

        page = cursor.consume(position, raw)
        return items(page.items) if items is not None else page.items

    async def scan(self, position: cursor.Cursor) -> list[typing.Any]:
        """Fetch the next page of keys."""
        return await self._page(self._command("SCAN"), position, prefix_pattern=True)

    async def sscan(self, key: normalize.Primitive, position: cursor.Cursor) -> list[typing.Any]:
        """Fetch the next page of members of a set."""
        return await self._page(self._command("SSCAN").key(key), position)

    async def hscan(self, key: normalize.Primitive, position: cursor.Cursor) -> list[tuple[typing.Any, typing.Any]]:
        """Fetch the next page of ``(field, value)`` pairs of a hash."""
        return await self._page(self._command("HSCAN").key(key), position, items=transform.pairwise)

    async def zscan(self, key: normalize.Primitive, position: cursor.Cursor) -> list[tuple[typing.Any, float]]:
        """Fetch the next page of ``(member, score)`` pairs of a sorted set."""
        return await self._page(self._command("ZSCAN").key(key), position, items=transform.score_pairs)

    def scan_iter(
        self,
        pattern: str | None = None,
        count: int | None = None,
    ) -> collections.abc.AsyncIterator[typing.Any]:
        """Lazily iterate over every key matching ``pattern``.

        Usage::

            async for key in session.scan_iter("user:*"):
                ...
        """
        return cursor.iterate(self.scan, cursor.Cursor(pattern, count))

    def sscan_iter(
        self,
        key: normalize.Primitive,
        pattern: str | None = None,
        count: int | None = None,
    ) -> collections.abc.AsyncIterator[typing.Any]:
        return cursor.iterate(lambda position: self.sscan(key, position), cursor.Cursor(pattern, count))

    def hscan_iter(
        self,
        key: normalize.Primitive,
        pattern: str | None = None,
        count: int | None = None,
    ) -> collections.abc.AsyncIterator[tuple[typing.Any, typing.Any]]:
        return cursor.iterate(lambda position: self.hscan(key, position), cursor.Cursor(pattern, count))

    def zscan_iter(
        self,
        key: normalize.Primitive,
        pattern: str | None = None,
        count: int | None = None,
    ) -> collections.abc.AsyncIterator[tuple[typing.Any, float]]:
        return cursor.iterate(lambda position: self.zscan(key, position), cursor.Cursor(pattern, count))
