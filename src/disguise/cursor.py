"""Module containing the SCAN-family cursor and its iteration contract.

A scan walks a keyspace (or a single set, hash or sorted set) a page at a
time. The server does not take a snapshot: an item present for the whole walk
is returned at least once, while items added or removed during the walk may be
returned any number of times, including zero. Callers that need every item
exactly once must deduplicate themselves.
"""

import collections.abc
import dataclasses
import logging
import typing

from disguise import command, error, transform

__all__: collections.abc.Sequence[str] = ("Cursor", "prepare", "consume", "iterate")

_LOGGER: typing.Final = logging.getLogger(__name__)

PageFetcher: typing.TypeAlias = typing.Callable[
    ["Cursor"],
    typing.Coroutine[typing.Any, typing.Any, list[typing.Any]],
]


@dataclasses.dataclass(slots=True)
class Cursor:
    """A resumable scan position owned by the caller.

    The cursor is updated in place by every page it is used for. It starts at
    ``0`` and is exhausted once a page hands back ``0`` again; ``reset`` starts
    the walk over. A failed page leaves the cursor at its last good value, so
    the walk can be resumed by simply calling again.
    """

    pattern: str | None = None
    count: int | None = None
    value: int = 0
    started: bool = dataclasses.field(default=False, repr=False)

    def __post_init__(self) -> None:
        if self.count is not None and (
            isinstance(self.count, bool) or not isinstance(self.count, int) or self.count < 1
        ):
            msg = f"count must be a positive integer, got {self.count!r}"
            raise error.ArgumentShapeError(msg)

    @property
    def exhausted(self) -> bool:
        return self.started and self.value == 0

    def reset(self) -> None:
        """Restart iteration from the beginning."""
        self.value = 0
        self.started = False


def prepare(
    cursor: Cursor,
    cmd: command.Command,
    *,
    default_count: int | None = None,
    prefix_pattern: bool = False,
) -> command.Command:
    """Append the cursor, MATCH and COUNT arguments to ``cmd``.

    Keyspace scans (``prefix_pattern``) match against prefixed key names, so the
    pattern gets the key prefix too; without a pattern, a prefixed session only
    scans its own keys.
    """
    if cursor.exhausted:
        msg = "This cursor is exhausted; reset it to iterate again."
        raise error.StateError(msg)

    cmd.arg(cursor.value)

    pattern = cursor.pattern
    if prefix_pattern and cmd.prefix:
        pattern = cmd.prefixed(pattern if pattern is not None else "*")

    if pattern is not None:
        cmd.arg("MATCH").arg(pattern)

    count = cursor.count if cursor.count is not None else default_count
    if count is not None:
        cmd.arg("COUNT").arg(count)

    return cmd


def consume(cursor: Cursor, raw: typing.Any) -> transform.ScanPage:  # noqa: ANN401
    """Parse a raw scan reply and advance ``cursor`` to the next position."""
    page = transform.ScanPage.from_raw(raw)
    cursor.value = page.cursor
    cursor.started = True

    _LOGGER.debug("scan page of %d item(s), next cursor %d", len(page.items), page.cursor)
    return page


async def iterate(fetch: PageFetcher, cursor: Cursor) -> collections.abc.AsyncIterator[typing.Any]:
    """Lazily yield every item of every page until ``cursor`` is exhausted.

    Failures are not retried; they end this iteration and leave ``cursor`` at
    the last page that succeeded.
    """
    while not cursor.exhausted:
        for item in await fetch(cursor):
            yield item
