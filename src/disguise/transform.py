"""Module containing reply transformers for disguise commands.

Servers speaking different protocol versions encode the same result
differently (a hash is a flat list under RESP2 but a map under RESP3, a
sorted-set score a bulk string or a double). These functions accept either
encoding and return a single, predictable shape.
"""

import collections.abc
import typing

from disguise import error

if typing.TYPE_CHECKING:
    import typing_extensions

__all__: collections.abc.Sequence[str] = (
    "ScanPage",
    "GeoPosition",
    "PoppedItem",
    "to_bool",
    "to_ok",
    "to_float",
    "to_str",
    "pairwise",
    "pairwise_to_dict",
    "score_pairs",
    "geo_positions",
    "popped_item",
    "server_time",
    "parse_info",
)


def _pairwise(arg: collections.abc.Iterable[typing.Any]) -> list[tuple[typing.Any, typing.Any]]:
    arg_iter = iter(arg)
    try:
        return list(zip(arg_iter, arg_iter, strict=True))
    except ValueError as exc:
        msg = "expected a reply with an even number of items"
        raise error.ResponseError("PROTO", msg) from exc


def to_str(value: typing.Any) -> str:  # noqa: ANN401
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def to_bool(reply: typing.Any) -> bool:  # noqa: ANN401
    """Interpret integer, status and nil replies as a boolean."""
    if reply is None:
        return False

    if isinstance(reply, bytes | str):
        return to_str(reply) in ("OK", "1")

    return bool(reply)


def to_ok(reply: typing.Any) -> bool:  # noqa: ANN401
    """Return whether a status reply is ``OK``."""
    return reply is not None and to_str(reply) == "OK"


def to_float(reply: typing.Any) -> float | None:  # noqa: ANN401
    return None if reply is None else float(reply)


def pairwise(reply: typing.Any) -> list[tuple[typing.Any, typing.Any]]:  # noqa: ANN401
    """Turn ``[a1, b1, a2, b2, ...]`` (or a map) into ``[(a1, b1), (a2, b2), ...]``."""
    if isinstance(reply, collections.abc.Mapping):
        return list(reply.items())

    return _pairwise(reply or ())


def pairwise_to_dict(reply: typing.Any) -> dict[typing.Any, typing.Any]:  # noqa: ANN401
    """Turn ``[field1, value1, ...]`` (or a map) into a dict."""
    return dict(pairwise(reply))


def score_pairs(reply: typing.Any) -> list[tuple[typing.Any, float]]:  # noqa: ANN401
    """Turn a WITHSCORES reply into ``[(member, score), ...]`` with float scores.

    Accepts the flat RESP2 shape as well as the nested ``[[member, score], ...]``
    shape RESP3 servers use.
    """
    if not reply:
        return []

    if isinstance(reply[0], list | tuple):
        return [(member, float(score)) for member, score in reply]

    return [(member, float(score)) for member, score in _pairwise(reply)]


class ScanPage(typing.NamedTuple):
    """One page of a SCAN-family reply."""

    cursor: int
    items: list[typing.Any]

    @classmethod
    def from_raw(cls, raw: typing.Sequence[typing.Any]) -> "typing_extensions.Self":
        """Create a ScanPage from data returned by the server.

        This expects data of shape ``[b"next cursor", [item, ...]]``.
        """
        if not isinstance(raw, collections.abc.Sequence) or len(raw) != 2:  # noqa: PLR2004
            msg = f"expected a [cursor, items] scan reply, got {raw!r}"
            raise error.ResponseError("PROTO", msg)

        cursor, items = raw
        return cls(int(cursor), list(items or ()))


class GeoPosition(typing.NamedTuple):
    longitude: float
    latitude: float


def geo_positions(reply: typing.Any) -> list[GeoPosition | None]:  # noqa: ANN401
    """Turn a GEOPOS reply into positions, keeping ``None`` for missing members."""
    return [
        None if position is None else GeoPosition(float(position[0]), float(position[1]))
        for position in reply or ()
    ]


class PoppedItem(typing.NamedTuple):
    """The key a blocking pop took its value from, and the value."""

    key: typing.Any
    value: typing.Any


def popped_item(reply: typing.Any) -> PoppedItem | None:  # noqa: ANN401
    """Turn a BLPOP/BRPOP reply into a PoppedItem; ``None`` when the wait timed out."""
    if reply is None:
        return None

    key, value = reply
    return PoppedItem(key, value)


def server_time(reply: typing.Any) -> tuple[int, int]:  # noqa: ANN401
    """Turn a TIME reply into ``(unix seconds, microseconds)``."""
    seconds, microseconds = reply
    return int(seconds), int(microseconds)


def parse_info(reply: typing.Any) -> dict[str, str]:  # noqa: ANN401
    """Parse the ``field:value`` lines of an INFO reply into a dict.

    Section headers and blank lines are skipped.
    """
    parsed: dict[str, str] = {}
    for line in to_str(reply).splitlines():
        line = line.strip()  # noqa: PLW2901
        if not line or line.startswith("#"):
            continue

        field, _, value = line.partition(":")
        parsed[field] = value

    return parsed
