"""Module containing the closed option schemas of command families that take option bags."""

import collections.abc
import dataclasses
import typing

from disguise import error, normalize, validate

__all__: collections.abc.Sequence[str] = (
    "Option",
    "OptionSchema",
    "SORT",
    "RANGE_BY_SCORE",
    "GEO_RADIUS",
    "SET",
)


KeyFunc: typing.TypeAlias = typing.Callable[[normalize.Primitive], normalize.Primitive]
Emitter: typing.TypeAlias = typing.Callable[[object], list[normalize.Primitive]]


class Option(typing.NamedTuple):
    """A single recognised option and how its value becomes arguments."""

    name: str
    emit: Emitter
    is_key: bool = False


def _flag(keyword: str) -> Emitter:
    def emit(value: object) -> list[normalize.Primitive]:
        if not isinstance(value, bool):
            msg = f"{keyword.lower()} must be a bool, got {value!r}"
            raise error.ArgumentShapeError(msg)

        return [keyword] if value else []

    return emit


def _keyword_value(keyword: str) -> Emitter:
    def emit(value: object) -> list[normalize.Primitive]:
        if not isinstance(value, str | bytes | int | float) or isinstance(value, bool):
            msg = f"{keyword.lower()} must be a single value, got {value!r}"
            raise error.ArgumentShapeError(msg)

        return [keyword, value]

    return emit


def _keyword_integer(keyword: str) -> Emitter:
    def emit(value: object) -> list[normalize.Primitive]:
        return [keyword, normalize.integer(value, name=keyword.lower())]

    return emit


def _limit(value: object) -> list[normalize.Primitive]:
    if isinstance(value, str | bytes) or not isinstance(value, collections.abc.Sequence) or len(value) != 2:  # noqa: PLR2004
        msg = f"limit must be an (offset, count) pair, got {value!r}"
        raise error.ArgumentShapeError(msg)

    offset, count = value
    return [
        "LIMIT",
        normalize.integer(offset, name="limit offset"),
        normalize.integer(count, name="limit count"),
    ]


def _get(value: object) -> list[normalize.Primitive]:
    patterns = normalize.variadic(value, name="get")  # type: ignore[arg-type]

    emitted: list[normalize.Primitive] = []
    for pattern in patterns:
        emitted.append("GET")
        emitted.append(pattern)

    return emitted


def _sort(value: object) -> list[normalize.Primitive]:
    return [validate.coerce(validate.SortOrder, value, parameter="sort").value]


@dataclasses.dataclass(frozen=True, slots=True)
class OptionSchema:
    """A fixed set of options for one command family.

    Options are emitted in the order they are declared here, whatever order the
    caller's mapping is in. Each group in ``exclusive`` names options of which
    at most one may be set.
    """

    family: str
    options: tuple[Option, ...]
    exclusive: tuple[frozenset[str], ...] = ()

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(option.name for option in self.options)

    def check(self, bag: collections.abc.Mapping[str, object] | None) -> dict[str, object]:
        """Reject unknown or conflicting options; return the options that are set."""
        if not bag:
            return {}

        unknown = set(bag) - set(self.names)
        if unknown:
            raise error.UnknownOptionError(self.family, frozenset(unknown), self.names)

        present = {name: value for name, value in bag.items() if value is not None and value is not False}
        for group in self.exclusive:
            clash = group & present.keys()
            if len(clash) > 1:
                msg = f"{self.family} options {', '.join(sorted(clash))} are mutually exclusive"
                raise error.ArgumentShapeError(msg)

        return {name: value for name, value in bag.items() if value is not None}

    def flatten(
        self,
        bag: collections.abc.Mapping[str, object] | None,
        *,
        key: KeyFunc | None = None,
    ) -> list[normalize.Primitive]:
        """Flatten ``bag`` into arguments in canonical order.

        Once an option marked as a key has been validated, its value is passed
        through ``key``; this is how a session applies its key prefix to e.g.
        ``store`` destinations.
        """
        present = self.check(bag)

        flat: list[normalize.Primitive] = []
        for option in self.options:
            if option.name not in present:
                continue

            emitted = option.emit(present[option.name])
            if option.is_key and key is not None:
                # The keyword itself is not a key.
                emitted[1:] = [key(value) for value in emitted[1:]]

            flat.extend(emitted)

        return flat


SORT: typing.Final = OptionSchema(
    "sort",
    (
        Option("by", _keyword_value("BY")),
        Option("limit", _limit),
        Option("get", _get),
        Option("sort", _sort),
        Option("alpha", _flag("ALPHA")),
        Option("store", _keyword_value("STORE"), is_key=True),
    ),
)

RANGE_BY_SCORE: typing.Final = OptionSchema(
    "range-by-score",
    (
        Option("withscores", _flag("WITHSCORES")),
        Option("limit", _limit),
    ),
)

GEO_RADIUS: typing.Final = OptionSchema(
    "geo radius",
    (
        Option("withcoord", _flag("WITHCOORD")),
        Option("withdist", _flag("WITHDIST")),
        Option("withhash", _flag("WITHHASH")),
        Option("count", _keyword_integer("COUNT")),
        Option("sort", _sort),
        Option("store", _keyword_value("STORE"), is_key=True),
        Option("storedist", _keyword_value("STOREDIST"), is_key=True),
    ),
    exclusive=(frozenset({"store", "storedist"}),),
)

SET: typing.Final = OptionSchema(
    "set",
    (
        Option("ex", _keyword_integer("EX")),
        Option("px", _keyword_integer("PX")),
        Option("nx", _flag("NX")),
        Option("xx", _flag("XX")),
        Option("keepttl", _flag("KEEPTTL")),
        Option("get", _flag("GET")),
    ),
    exclusive=(frozenset({"ex", "px", "keepttl"}), frozenset({"nx", "xx"})),
)
