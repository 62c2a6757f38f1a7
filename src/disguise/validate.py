"""Module containing the enumerations accepted by disguise commands and their validation."""

import collections.abc
import enum
import typing

from disguise import error

__all__: collections.abc.Sequence[str] = (
    "Direction",
    "Position",
    "ObjectSubcommand",
    "BitOperation",
    "Aggregate",
    "GeoUnit",
    "SortOrder",
    "SessionMode",
    "coerce",
    "allowed",
)


EnumT = typing.TypeVar("EnumT", bound=enum.Enum)


class Direction(str, enum.Enum):
    """The end of a list a push or pop acts on."""

    LEFT = "LEFT"
    RIGHT = "RIGHT"


class Position(str, enum.Enum):
    """Where LINSERT places the new element relative to the pivot."""

    BEFORE = "BEFORE"
    AFTER = "AFTER"


class ObjectSubcommand(str, enum.Enum):
    REFCOUNT = "refcount"
    ENCODING = "encoding"
    IDLETIME = "idletime"


class BitOperation(str, enum.Enum):
    AND = "AND"
    OR = "OR"
    XOR = "XOR"
    NOT = "NOT"


class Aggregate(str, enum.Enum):
    SUM = "SUM"
    MIN = "MIN"
    MAX = "MAX"


class GeoUnit(str, enum.Enum):
    METERS = "m"
    KILOMETERS = "km"
    MILES = "mi"
    FEET = "ft"


class SortOrder(str, enum.Enum):
    ASC = "ASC"
    DESC = "DESC"


class SessionMode(str, enum.Enum):
    """Execution mode of a session.

    ``ATOMIC`` runs every command immediately. ``MULTI`` and ``PIPELINE``
    queue commands until ``exec``; ``MULTI`` wraps them in a server-side
    transaction, ``PIPELINE`` merely sends them back to back.
    """

    ATOMIC = "ATOMIC"
    MULTI = "MULTI"
    PIPELINE = "PIPELINE"


def allowed(enum_class: type[enum.Enum]) -> frozenset[str]:
    """Return the set of wire values ``enum_class`` accepts."""
    return frozenset(str(member.value) for member in enum_class)


def coerce(enum_class: type[EnumT], value: object, /, *, parameter: str = "value") -> EnumT:
    """Resolve ``value`` to a member of ``enum_class`` or raise ``InvalidEnumError``.

    Members are returned as-is. Strings are matched case-insensitively against
    both member names and member values, so ``"left"``, ``"LEFT"`` and
    ``Direction.LEFT`` all resolve to the same member, and ``GeoUnit`` accepts
    ``"km"`` as well as ``"KILOMETERS"``.
    """
    if isinstance(value, enum_class):
        return value

    if isinstance(value, str):
        folded = value.casefold()
        for member in enum_class:
            if folded in (member.name.casefold(), str(member.value).casefold()):
                return member

    raise error.InvalidEnumError(value, allowed(enum_class), parameter)
