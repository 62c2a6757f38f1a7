"""Module containing sorted set commands."""

import collections.abc
import typing

from disguise import error, normalize, options, transform, validate
from disguise.commands import base

__all__: collections.abc.Sequence[str] = ("SortedSetCommands",)


ScoreMembers: typing.TypeAlias = (
    collections.abc.Mapping[normalize.Primitive, float] | collections.abc.Sequence[normalize.Primitive]
)
Bound: typing.TypeAlias = str | int | float


class SortedSetCommands(base.CommandsBase):
    async def zadd(self, key: normalize.Primitive, members: ScoreMembers) -> base.Result[int]:
        """Add members with scores to a sorted set.

        ``members`` is either a ``{member: score}`` mapping or a flat
        ``[score, member, score, member, ...]`` sequence. A flat sequence of
        odd length is rejected with ``ArgumentShapeError`` and nothing is sent.
        Returns the number of members that were newly added.
        """
        cmd = self._command("ZADD").key(key).args(normalize.score_members(members))
        return await self._call(cmd)

    async def zcard(self, key: normalize.Primitive) -> base.Result[int]:
        return await self._call(self._command("ZCARD").key(key))

    async def zcount(self, key: normalize.Primitive, minimum: Bound, maximum: Bound) -> base.Result[int]:
        """Count members with a score between ``minimum`` and ``maximum``.

        Bounds are inclusive unless prefixed with ``(``; ``-inf`` and ``+inf``
        are accepted.
        """
        return await self._call(self._command("ZCOUNT").key(key).arg(minimum).arg(maximum))

    async def _range(
        self,
        name: str,
        key: normalize.Primitive,
        start: int,
        end: int,
        *,
        withscores: bool,
    ) -> typing.Any:  # noqa: ANN401
        cmd = self._command(name).key(key)
        cmd.arg(normalize.integer(start, name="start")).arg(normalize.integer(end, name="end"))
        if withscores:
            cmd.arg("WITHSCORES").set_transform(transform.score_pairs)

        return await self._call(cmd)

    async def zrange(
        self,
        key: normalize.Primitive,
        start: int,
        end: int,
        *,
        withscores: bool = False,
    ) -> base.Result[list[typing.Any]]:
        """Return members by rank, lowest score first.

        With ``withscores`` the result is a list of ``(member, score)`` pairs.
        """
        return await self._range("ZRANGE", key, start, end, withscores=withscores)

    async def zrevrange(
        self,
        key: normalize.Primitive,
        start: int,
        end: int,
        *,
        withscores: bool = False,
    ) -> base.Result[list[typing.Any]]:
        """Return members by rank, highest score first."""
        return await self._range("ZREVRANGE", key, start, end, withscores=withscores)

    async def _range_by_score(
        self,
        name: str,
        key: normalize.Primitive,
        first: Bound,
        second: Bound,
        opts: collections.abc.Mapping[str, typing.Any] | None,
    ) -> typing.Any:  # noqa: ANN401
        cmd = self._command(name).key(key).arg(first).arg(second)
        cmd.args(options.RANGE_BY_SCORE.flatten(opts))
        if opts and opts.get("withscores"):
            cmd.set_transform(transform.score_pairs)

        return await self._call(cmd)

    async def zrangebyscore(
        self,
        key: normalize.Primitive,
        minimum: Bound,
        maximum: Bound,
        opts: collections.abc.Mapping[str, typing.Any] | None = None,
    ) -> base.Result[list[typing.Any]]:
        """Return members with a score between ``minimum`` and ``maximum``, lowest first.

        ``opts`` accepts ``withscores`` and ``limit`` (an ``(offset, count)``
        pair).
        """
        return await self._range_by_score("ZRANGEBYSCORE", key, minimum, maximum, opts)

    async def zrevrangebyscore(
        self,
        key: normalize.Primitive,
        maximum: Bound,
        minimum: Bound,
        opts: collections.abc.Mapping[str, typing.Any] | None = None,
    ) -> base.Result[list[typing.Any]]:
        """Like ``zrangebyscore`` but highest first; note ``maximum`` comes first."""
        return await self._range_by_score("ZREVRANGEBYSCORE", key, maximum, minimum, opts)

    async def zrangebylex(
        self,
        key: normalize.Primitive,
        minimum: str,
        maximum: str,
        offset: int | None = None,
        count: int | None = None,
    ) -> base.Result[list[typing.Any]]:
        """Return members between two lexicographical bounds (``[a``, ``(b``, ``-``, ``+``).

        ``offset`` and ``count`` limit the result and must be given together.
        """
        cmd = self._command("ZRANGEBYLEX").key(key).arg(minimum).arg(maximum)

        if (offset is None) != (count is None):
            msg = "zrangebylex needs both offset and count, or neither"
            raise error.ArgumentShapeError(msg)

        if offset is not None:
            cmd.arg("LIMIT").arg(normalize.integer(offset, name="offset")).arg(normalize.integer(count, name="count"))

        return await self._call(cmd)

    async def zlexcount(self, key: normalize.Primitive, minimum: str, maximum: str) -> base.Result[int]:
        return await self._call(self._command("ZLEXCOUNT").key(key).arg(minimum).arg(maximum))

    async def zrem(self, key: normalize.Primitive, members: collections.abc.Iterable[normalize.Primitive]) -> base.Result[int]:
        return await self._call(self._command("ZREM").key(key).args(normalize.variadic(members, name="members")))

    async def zremrangebylex(self, key: normalize.Primitive, minimum: str, maximum: str) -> base.Result[int]:
        return await self._call(self._command("ZREMRANGEBYLEX").key(key).arg(minimum).arg(maximum))

    async def zremrangebyrank(self, key: normalize.Primitive, start: int, end: int) -> base.Result[int]:
        cmd = self._command("ZREMRANGEBYRANK").key(key)
        cmd.arg(normalize.integer(start, name="start")).arg(normalize.integer(end, name="end"))
        return await self._call(cmd)

    async def _store(
        self,
        name: str,
        destination: normalize.Primitive,
        keys: collections.abc.Iterable[normalize.Primitive],
        weights: collections.abc.Sequence[float] | None,
        aggregate: validate.Aggregate | str,
    ) -> typing.Any:  # noqa: ANN401
        resolved = validate.coerce(validate.Aggregate, aggregate, parameter="aggregate")
        sources = normalize.variadic(keys, name="keys")

        cmd = self._command(name).key(destination).arg(len(sources)).keys(sources)

        if weights is not None:
            if len(weights) != len(sources):
                msg = f"got {len(weights)} weight(s) for {len(sources)} key(s)"
                raise error.ArgumentShapeError(msg)

            cmd.arg("WEIGHTS").args(normalize.number(weight, name="weight") for weight in weights)

        cmd.arg("AGGREGATE").arg(resolved.value)
        return await self._call(cmd)

    async def zunionstore(
        self,
        destination: normalize.Primitive,
        keys: collections.abc.Iterable[normalize.Primitive],
        weights: collections.abc.Sequence[float] | None = None,
        aggregate: validate.Aggregate | str = validate.Aggregate.SUM,
    ) -> base.Result[int]:
        """Store the union of sorted sets in ``destination``.

        ``weights``, when given, must hold one multiplier per key. ``aggregate``
        is ``SUM``, ``MIN`` or ``MAX``.
        """
        return await self._store("ZUNIONSTORE", destination, keys, weights, aggregate)

    async def zinterstore(
        self,
        destination: normalize.Primitive,
        keys: collections.abc.Iterable[normalize.Primitive],
        weights: collections.abc.Sequence[float] | None = None,
        aggregate: validate.Aggregate | str = validate.Aggregate.SUM,
    ) -> base.Result[int]:
        """Store the intersection of sorted sets in ``destination``; see ``zunionstore``."""
        return await self._store("ZINTERSTORE", destination, keys, weights, aggregate)

    async def zincrby(self, key: normalize.Primitive, increment: float, member: normalize.Primitive) -> base.Result[float]:
        cmd = self._command("ZINCRBY").key(key).arg(normalize.number(increment, name="increment")).arg(member)
        return await self._call(cmd.set_transform(transform.to_float))

    async def zscore(self, key: normalize.Primitive, member: normalize.Primitive) -> base.Result[float | None]:
        cmd = self._command("ZSCORE").key(key).arg(member)
        return await self._call(cmd.set_transform(transform.to_float))

    async def zrank(
        self,
        key: normalize.Primitive,
        member: normalize.Primitive,
        *,
        reverse: bool = False,
    ) -> base.Result[int | None]:
        """Return a member's rank, lowest score first (or highest first with ``reverse``).

        ``None`` means the member is not in the set.
        """
        if not isinstance(reverse, bool):
            msg = f"reverse must be a bool, got {reverse!r}"
            raise error.ArgumentShapeError(msg)

        return await self._call(self._command("ZREVRANK" if reverse else "ZRANK").key(key).arg(member))
