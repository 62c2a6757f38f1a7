"""Module containing geospatial commands."""

import collections.abc
import typing

from disguise import normalize, options, transform, validate
from disguise.commands import base

__all__: collections.abc.Sequence[str] = ("GeoCommands",)


def _unit(unit: validate.GeoUnit | str) -> str:
    return validate.coerce(validate.GeoUnit, unit, parameter="unit").value


class GeoCommands(base.CommandsBase):
    async def geoadd(
        self,
        key: normalize.Primitive,
        longitude: float,
        latitude: float,
        member: normalize.Primitive,
    ) -> base.Result[int]:
        cmd = self._command("GEOADD").key(key)
        cmd.arg(normalize.number(longitude, name="longitude")).arg(normalize.number(latitude, name="latitude"))
        return await self._call(cmd.arg(member))

    async def geohash(
        self,
        key: normalize.Primitive,
        members: collections.abc.Iterable[normalize.Primitive],
    ) -> base.Result[list[typing.Any]]:
        return await self._call(self._command("GEOHASH").key(key).args(normalize.variadic(members, name="members")))

    async def geopos(
        self,
        key: normalize.Primitive,
        members: collections.abc.Iterable[normalize.Primitive],
    ) -> base.Result[list[transform.GeoPosition | None]]:
        """Return the position of each member, ``None`` for members that do not exist."""
        cmd = self._command("GEOPOS").key(key).args(normalize.variadic(members, name="members"))
        return await self._call(cmd.set_transform(transform.geo_positions))

    async def geodist(
        self,
        key: normalize.Primitive,
        first: normalize.Primitive,
        second: normalize.Primitive,
        unit: validate.GeoUnit | str = validate.GeoUnit.METERS,
    ) -> base.Result[float | None]:
        """Return the distance between two members in ``unit`` (m, km, mi or ft).

        ``None`` means one of the members does not exist.
        """
        cmd = self._command("GEODIST").key(key).arg(first).arg(second).arg(_unit(unit))
        return await self._call(cmd.set_transform(transform.to_float))

    async def georadius(
        self,
        key: normalize.Primitive,
        longitude: float,
        latitude: float,
        radius: float,
        unit: validate.GeoUnit | str,
        opts: collections.abc.Mapping[str, typing.Any] | None = None,
    ) -> base.Result[typing.Any]:
        """Return members within ``radius`` of a point.

        ``opts`` accepts ``withcoord``, ``withdist``, ``withhash``, ``count``,
        ``sort`` (``ASC`` or ``DESC``) and one of ``store`` or ``storedist``.

        See also: https://redis.io/docs/latest/commands/georadius/
        """
        cmd = self._command("GEORADIUS").key(key)
        cmd.arg(normalize.number(longitude, name="longitude")).arg(normalize.number(latitude, name="latitude"))
        cmd.arg(normalize.number(radius, name="radius")).arg(_unit(unit))
        cmd.args(options.GEO_RADIUS.flatten(opts, key=cmd.prefixed))
        return await self._call(cmd)

    async def georadiusbymember(
        self,
        key: normalize.Primitive,
        member: normalize.Primitive,
        radius: float,
        unit: validate.GeoUnit | str,
        opts: collections.abc.Mapping[str, typing.Any] | None = None,
    ) -> base.Result[typing.Any]:
        """Like ``georadius``, centred on an existing member."""
        cmd = self._command("GEORADIUSBYMEMBER").key(key).arg(member)
        cmd.arg(normalize.number(radius, name="radius")).arg(_unit(unit))
        cmd.args(options.GEO_RADIUS.flatten(opts, key=cmd.prefixed))
        return await self._call(cmd)
