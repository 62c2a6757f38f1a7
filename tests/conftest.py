from __future__ import annotations

import collections
import fnmatch

import pytest

from disguise import Session, SessionConfig
from disguise.error import ResponseError


_WRONGTYPE = "WRONGTYPE Operation against a key holding the wrong kind of value"


class RecordingTransport:
    """Records every call and answers from a queue of scripted replies."""

    def __init__(self, replies: list[object] | None = None) -> None:
        self.calls: list[tuple[str, tuple[object, ...]]] = []
        self.replies = collections.deque(replies or [])
        self.closed = False

    async def execute(self, name, args):
        self.calls.append((name, tuple(args)))
        if not self.replies:
            return "OK"

        reply = self.replies.popleft()
        if isinstance(reply, BaseException):
            raise reply
        return reply

    async def close(self) -> None:
        self.closed = True

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


class FakeServer:
    """A tiny in-memory keyspace answering the commands the tests exercise.

    Every write bumps a per-key version so connections can detect WATCH
    conflicts the way a real server does.
    """

    def __init__(self) -> None:
        self.data: dict[str, object] = {}
        self.versions: collections.Counter[str] = collections.Counter()
        self._cursors: dict[int, str] = {}
        self._next_cursor = 0

    def connect(self) -> FakeConnection:
        return FakeConnection(self)

    def _touch(self, key: str) -> None:
        self.versions[key] += 1

    def _get(self, key: str, kind: type, default=None):
        value = self.data.get(key, default)
        if value is not None and not isinstance(value, kind):
            raise ResponseError("WRONGTYPE", _WRONGTYPE)
        return value

    def _write(self, key: str, value: object) -> None:
        self.data[key] = value
        self._touch(key)

    def handle(self, name: str, args: tuple) -> object:  # noqa: C901, PLR0911, PLR0912
        args = tuple(str(arg) if isinstance(arg, int | float) else arg for arg in args)

        if name == "PING":
            return "PONG"

        if name in ("SET", "SETEX", "PSETEX"):
            key, value = (args[0], args[2]) if name != "SET" else (args[0], args[1])
            if name == "SET" and "NX" in args[2:] and key in self.data:
                return None
            self._write(key, value)
            return "OK"

        if name == "GET":
            return self._get(args[0], str)

        if name in ("INCR", "DECR", "INCRBY", "DECRBY"):
            key = args[0]
            step = args[1] if len(args) > 1 else "1"
            current = self._get(key, str, "0")
            try:
                amount = int(step) * (-1 if name.startswith("DECR") else 1)
                value = int(current) + amount
            except ValueError:
                raise ResponseError("ERR", "value is not an integer or out of range") from None
            self._write(key, str(value))
            return value

        if name == "INCRBYFLOAT":
            current = self._get(args[0], str, "0")
            try:
                value = float(current) + float(args[1])
            except ValueError:
                raise ResponseError("ERR", "value is not a valid float") from None
            self._write(args[0], repr(value))
            return repr(value)

        if name in ("LPUSH", "RPUSH"):
            items = self._get(args[0], list, [])
            for value in args[1:]:
                if name == "LPUSH":
                    items.insert(0, value)
                else:
                    items.append(value)
            self._write(args[0], items)
            return len(items)

        if name in ("LPOP", "RPOP"):
            items = self._get(args[0], list)
            if not items:
                return None
            value = items.pop(0 if name == "LPOP" else -1)
            self._touch(args[0])
            return value

        if name in ("BLPOP", "BRPOP"):
            for key in args[:-1]:
                items = self._get(key, list)
                if items:
                    self._touch(key)
                    return [key, items.pop(0 if name == "BLPOP" else -1)]
            return None

        if name == "LRANGE":
            items = self._get(args[0], list, [])
            start, end = int(args[1]), int(args[2])
            return items[start:] if end == -1 else items[start : end + 1]

        if name == "SADD":
            members = self._get(args[0], set, set())
            added = len(set(args[1:]) - members)
            members.update(args[1:])
            self._write(args[0], members)
            return added

        if name == "SMEMBERS":
            return sorted(self._get(args[0], set, set()))

        if name == "ZADD":
            scores = self._get(args[0], dict, {})
            pairs = list(zip(args[1::2], args[2::2], strict=True))
            added = sum(1 for _, member in pairs if member not in scores)
            for score, member in pairs:
                scores[member] = float(score)
            self._write(args[0], scores)
            return added

        if name == "ZRANGE":
            scores = self._get(args[0], dict, {})
            ordered = sorted(scores.items(), key=lambda item: (item[1], item[0]))
            start, end = int(args[1]), int(args[2])
            ordered = ordered[start:] if end == -1 else ordered[start : end + 1]
            if "WITHSCORES" in args[3:]:
                return [part for member, score in ordered for part in (member, repr(score))]
            return [member for member, _ in ordered]

        if name == "HSET":
            fields = self._get(args[0], dict, {})
            added = 0
            for field, value in zip(args[1::2], args[2::2], strict=True):
                added += field not in fields
                fields[field] = value
            self._write(args[0], fields)
            return added

        if name == "HSETNX":
            fields = self._get(args[0], dict, {})
            if args[1] in fields:
                return 0
            fields[args[1]] = args[2]
            self._write(args[0], fields)
            return 1

        if name == "HGETALL":
            fields = self._get(args[0], dict, {})
            return [part for item in fields.items() for part in item]

        if name == "DEL":
            removed = 0
            for key in args:
                if self.data.pop(key, None) is not None:
                    removed += 1
                    self._touch(key)
            return removed

        if name == "EXISTS":
            return sum(1 for key in args if key in self.data)

        if name == "SCAN":
            return self._scan(list(self.data), args[0], args[1:])

        if name in ("SSCAN", "HSCAN", "ZSCAN"):
            return self._scan_container(name, args[0], args[1], args[2:])

        msg = f"unknown command '{name}'"
        raise ResponseError("ERR", msg)

    @staticmethod
    def _scan_options(options: tuple) -> tuple[str | None, int]:
        pattern, count = None, 10
        for index in range(0, len(options), 2):
            if options[index] == "MATCH":
                pattern = options[index + 1]
            elif options[index] == "COUNT":
                count = int(options[index + 1])
        return pattern, count

    def _page(self, names: list[str], cursor: str, options: tuple) -> tuple[str, list[str]]:
        # Cursors remember the last name handed out, so keys added or removed
        # mid-scan never make the walk skip a key that stays put.
        pattern, count = self._scan_options(options)
        after = self._cursors.get(int(cursor)) if cursor != "0" else None
        remaining = [name for name in names if after is None or name > after]
        page = remaining[:count]

        following = "0"
        if len(remaining) > count:
            self._next_cursor += 1
            self._cursors[self._next_cursor] = page[-1]
            following = str(self._next_cursor)

        if pattern is not None:
            page = [name for name in page if fnmatch.fnmatchcase(name, pattern)]
        return following, page

    def _scan(self, items: list, cursor: str, options: tuple) -> list:
        following, page = self._page(sorted(items), cursor, options)
        return [following, page]

    def _scan_container(self, name: str, key: str, cursor: str, options: tuple) -> list:
        if name == "SSCAN":
            return self._scan(list(self._get(key, set, set())), cursor, options)

        entries = self._get(key, dict, {})
        following, fields = self._page(sorted(entries), cursor, options)
        flat = [part for field in fields for part in (field, repr(entries[field]) if name == "ZSCAN" else entries[field])]
        return [following, flat]


class FakeConnection:
    """One connection to a FakeServer, with its own WATCH and MULTI state."""

    def __init__(self, server: FakeServer) -> None:
        self.server = server
        self.calls: list[tuple[str, tuple[object, ...]]] = []
        self.watched: dict[str, int] = {}
        self.in_multi = False
        self.queued: list[tuple[str, tuple]] = []

    async def execute(self, name, args):
        self.calls.append((name, tuple(args)))

        if name == "WATCH":
            for key in args:
                self.watched[key] = self.server.versions[key]
            return "OK"

        if name == "UNWATCH":
            self.watched.clear()
            return "OK"

        if name == "MULTI":
            self.in_multi = True
            return "OK"

        if name == "EXEC":
            return self._exec()

        if self.in_multi:
            self.queued.append((name, tuple(args)))
            return "QUEUED"

        return self.server.handle(name, tuple(args))

    def _exec(self) -> list | None:
        queued, self.queued, self.in_multi = self.queued, [], False
        conflict = any(self.server.versions[key] != version for key, version in self.watched.items())
        self.watched.clear()
        if conflict:
            return None

        results: list[object] = []
        for name, args in queued:
            try:
                results.append(self.server.handle(name, args))
            except ResponseError as exc:
                results.append(exc)
        return results

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def recording() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def connection(server: FakeServer) -> FakeConnection:
    return server.connect()


@pytest.fixture
def session(connection: FakeConnection) -> Session:
    return Session(connection)


@pytest.fixture
def recording_session(recording: RecordingTransport) -> Session:
    return Session(recording, SessionConfig())
