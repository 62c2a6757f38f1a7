import pytest

from disguise import normalize
from disguise.error import ArgumentShapeError, Stage


def test_variadic_keeps_order() -> None:
    assert normalize.variadic(["c", "a", "b"]) == ["c", "a", "b"]
    assert normalize.variadic(value for value in (3, 1, 2)) == [3, 1, 2]


def test_variadic_treats_strings_and_bytes_as_one_value() -> None:
    assert normalize.variadic("key") == ["key"]
    assert normalize.variadic(b"key") == [b"key"]


def test_variadic_rejects_empty_unless_allowed() -> None:
    with pytest.raises(ArgumentShapeError, match="members must contain at least one value"):
        normalize.variadic([], name="members")

    assert normalize.variadic([], allow_empty=True) == []


def test_pairs_rejects_odd_length() -> None:
    with pytest.raises(ArgumentShapeError) as exc_info:
        normalize.pairs([1, "a", 2])

    assert exc_info.value.stage is Stage.NORMALIZE
    assert exc_info.value.dispatched is False
    assert "even number of items, got 3" in str(exc_info.value)


def test_pairs_rejects_empty_and_bare_strings() -> None:
    with pytest.raises(ArgumentShapeError):
        normalize.pairs([])

    with pytest.raises(ArgumentShapeError):
        normalize.pairs("ab")


def test_mapping_pairs_flattens_in_insertion_order() -> None:
    assert normalize.mapping_pairs({"b": 1, "a": 2}) == ["b", 1, "a", 2]

    with pytest.raises(ArgumentShapeError):
        normalize.mapping_pairs({})


def test_score_members_from_mapping_puts_score_first() -> None:
    assert normalize.score_members({"alice": 1, "bob": 2.5}) == [1, "alice", 2.5, "bob"]


def test_score_members_from_flat_sequence() -> None:
    assert normalize.score_members([1, "alice", "2.5", "bob"]) == [1, "alice", 2.5, "bob"]


def test_score_members_rejects_non_numeric_score() -> None:
    with pytest.raises(ArgumentShapeError, match="score must be a number"):
        normalize.score_members(["alice", 1])


@pytest.mark.parametrize(
    ("value", "expected"),
    [(3, 3), (-2, -2), (1.5, 1.5), ("7", 7), ("-7", -7), ("2.25", 2.25), ("+inf", float("inf"))],
)
def test_number_accepts_numeric_values(value: object, expected: float) -> None:
    result = normalize.number(value)

    assert result == expected
    assert type(result) is type(expected)


@pytest.mark.parametrize("value", [True, "abc", None, [1]])
def test_number_rejects_non_numeric_values(value: object) -> None:
    with pytest.raises(ArgumentShapeError):
        normalize.number(value)


def test_integer_rejects_floats_and_bools() -> None:
    assert normalize.integer(4) == 4

    with pytest.raises(ArgumentShapeError):
        normalize.integer(1.0)

    with pytest.raises(ArgumentShapeError):
        normalize.integer(False)


@pytest.mark.parametrize("value", [2, -1, True, 1.0, "1"])
def test_bit_rejects_anything_but_zero_or_one(value: object) -> None:
    with pytest.raises(ArgumentShapeError):
        normalize.bit(value)


def test_bit_accepts_zero_and_one() -> None:
    assert normalize.bit(0) == 0
    assert normalize.bit(1) == 1
