"""Module containing pure argument normalisers.

These turn the shapes application code naturally holds (sequences, mappings,
score/member pairs) into the flat argument lists commands are sent with. None
of them touch a transport, so a shape error always means nothing was sent.
"""

import collections.abc
import numbers
import typing

from disguise import error

__all__: collections.abc.Sequence[str] = (
    "Primitive",
    "variadic",
    "pairs",
    "mapping_pairs",
    "score_members",
    "number",
    "integer",
    "bit",
)


Primitive: typing.TypeAlias = str | bytes | int | float


def variadic(
    values: collections.abc.Iterable[Primitive],
    /,
    *,
    name: str = "values",
    allow_empty: bool = False,
) -> list[Primitive]:
    """Expand an ordered collection into positional arguments, keeping its order.

    A bare ``str`` or ``bytes`` is treated as a single value rather than a
    sequence of characters.
    """
    if isinstance(values, str | bytes):
        return [values]

    expanded = list(values)
    if not expanded and not allow_empty:
        msg = f"{name} must contain at least one value"
        raise error.ArgumentShapeError(msg)

    return expanded


def pairs(
    values: collections.abc.Sequence[Primitive],
    /,
    *,
    name: str = "values",
) -> list[Primitive]:
    """Validate a flat sequence that alternates between two roles.

    The sequence must be non-empty and of even length.
    """
    if isinstance(values, str | bytes):
        msg = f"{name} must be a flat sequence of pairs, not a single value"
        raise error.ArgumentShapeError(msg)

    if not values:
        msg = f"{name} must contain at least one pair"
        raise error.ArgumentShapeError(msg)

    if len(values) % 2:
        msg = f"{name} must have an even number of items, got {len(values)}"
        raise error.ArgumentShapeError(msg)

    return list(values)


def mapping_pairs(
    values: collections.abc.Mapping[Primitive, Primitive],
    /,
    *,
    name: str = "mapping",
) -> list[Primitive]:
    """Flatten a mapping into ``key, value, key, value, ...`` in insertion order."""
    if not values:
        msg = f"{name} must contain at least one entry"
        raise error.ArgumentShapeError(msg)

    flat: list[Primitive] = []
    for key, value in values.items():
        flat.append(key)
        flat.append(value)

    return flat


def score_members(
    values: collections.abc.Mapping[Primitive, float] | collections.abc.Sequence[Primitive],
    /,
) -> list[Primitive]:
    """Normalise sorted-set members into ``score, member, score, member, ...``.

    Accepts either a ``{member: score}`` mapping or a flat ``[score, member, ...]``
    sequence. Every score must be numeric.
    """
    if isinstance(values, collections.abc.Mapping):
        flat: list[Primitive] = []
        for member, score in values.items():
            flat.append(number(score, name="score"))
            flat.append(member)

        if not flat:
            msg = "members must contain at least one entry"
            raise error.ArgumentShapeError(msg)

        return flat

    flat = pairs(values, name="score/member pairs")
    for index in range(0, len(flat), 2):
        flat[index] = number(flat[index], name="score")

    return flat


def number(value: object, /, *, name: str = "value") -> int | float:
    """Forward ``value`` as a number without deciding integer or float semantics.

    Numeric strings are accepted because scores such as ``"+inf"`` are valid
    on the wire; booleans are not.
    """
    if isinstance(value, bool):
        msg = f"{name} must be a number, not a bool"
        raise error.ArgumentShapeError(msg)

    if isinstance(value, numbers.Integral):
        return int(value)

    if isinstance(value, numbers.Real):
        return float(value)

    if isinstance(value, str):
        try:
            return float(value) if not value.lstrip("+-").isdigit() else int(value)
        except ValueError:
            pass

    msg = f"{name} must be a number, got {value!r}"
    raise error.ArgumentShapeError(msg)


def integer(value: object, /, *, name: str = "value") -> int:
    """Like ``number`` but the value must be integral."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        msg = f"{name} must be an integer, got {value!r}"
        raise error.ArgumentShapeError(msg)

    return int(value)


def bit(value: object, /) -> int:
    """Validate a single bit value."""
    if value not in (0, 1) or isinstance(value, bool | float):
        msg = f"bit must be 0 or 1, got {value!r}"
        raise error.ArgumentShapeError(msg)

    return int(value)  # type: ignore[call-overload]
