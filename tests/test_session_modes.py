import asyncio

import pytest

from disguise import Queued, Session, SessionMode
from disguise.error import (
    InvalidEnumError,
    InvalidModeTransitionError,
    ResponseError,
    Stage,
    TransactionAbortedError,
    TypeMismatchError,
)


def test_session_starts_atomic(session) -> None:
    assert session.mode is SessionMode.ATOMIC
    assert session.watched == frozenset()


def test_multi_queues_commands_and_exec_returns_replies_in_order(session, connection) -> None:
    async def scenario():
        session.multi()
        first = await session.set("counter", 1)
        second = await session.incrby("counter", 4)
        third = await session.get("counter")
        return first, second, third, await session.exec()

    first, second, third, results = asyncio.run(scenario())

    assert isinstance(first, Queued)
    assert (first.index, second.index, third.index) == (0, 1, 2)
    assert results == [True, 5, "5"]
    assert connection.names == ["MULTI", "SET", "INCRBY", "GET", "EXEC"]
    assert session.mode is SessionMode.ATOMIC


def test_nothing_is_sent_before_exec(session, connection) -> None:
    async def scenario():
        session.multi(SessionMode.PIPELINE)
        await session.push("jobs", ["a", "b"])
        await session.llen("jobs")

    asyncio.run(scenario())

    assert connection.calls == []
    assert session.mode is SessionMode.PIPELINE


def test_pipeline_runs_without_multi_and_keeps_errors_in_place(session, connection, server) -> None:
    server.data["name"] = "alice"

    async def scenario():
        session.multi("pipeline")
        await session.push("jobs", ["a"], "RIGHT")
        await session.incr("name")
        await session.pop("jobs", "RIGHT")
        return await session.exec()

    pushed, failed, popped = asyncio.run(scenario())

    assert pushed == 1
    assert isinstance(failed, TypeMismatchError)
    assert popped == "a"
    assert connection.names == ["RPUSH", "INCR", "RPOP"]


def test_nested_multi_is_rejected(session) -> None:
    session.multi()

    with pytest.raises(InvalidModeTransitionError) as exc_info:
        session.multi(SessionMode.PIPELINE)

    assert exc_info.value.stage is Stage.SESSION
    assert exc_info.value.dispatched is False
    assert session.mode is SessionMode.MULTI


def test_multi_rejects_atomic_and_unknown_modes(session) -> None:
    with pytest.raises(InvalidModeTransitionError):
        session.multi(SessionMode.ATOMIC)

    with pytest.raises(InvalidEnumError):
        session.multi("BATCH")

    assert session.mode is SessionMode.ATOMIC


def test_exec_and_discard_outside_multi_are_rejected(session, connection) -> None:
    with pytest.raises(InvalidModeTransitionError):
        asyncio.run(session.exec())

    with pytest.raises(InvalidModeTransitionError):
        asyncio.run(session.discard())

    assert connection.calls == []


def test_watch_inside_multi_is_rejected(session, connection) -> None:
    session.multi()

    with pytest.raises(InvalidModeTransitionError, match="Cannot watch keys while the session is in MULTI mode"):
        asyncio.run(session.watch("balance"))

    assert connection.calls == []
    assert session.watched == frozenset()


def test_transaction_aborts_when_watched_key_changes(server, session) -> None:
    other = Session(server.connect())

    async def scenario():
        await session.set("balance", 100)
        await session.watch("balance")

        session.multi()
        await session.decrby("balance", 30)
        await session.set("audit", "withdrawn")

        await other.set("balance", 50)
        return await session.exec()

    with pytest.raises(TransactionAbortedError) as exc_info:
        asyncio.run(scenario())

    assert exc_info.value.watched == {"balance"}
    assert exc_info.value.discarded == 2
    assert exc_info.value.dispatched is True
    assert server.data["balance"] == "50"
    assert "audit" not in server.data
    assert session.mode is SessionMode.ATOMIC
    assert session.watched == frozenset()


def test_transaction_commits_when_watched_key_is_untouched(server, session) -> None:
    async def scenario():
        await session.set("balance", 100)
        await session.watch(["balance"])
        assert session.watched == {"balance"}

        session.multi()
        await session.decrby("balance", 30)
        return await session.exec()

    assert asyncio.run(scenario()) == [70]
    assert server.data["balance"] == "70"
    assert session.watched == frozenset()


def test_unwatch_twice_is_harmless(session, connection) -> None:
    async def scenario():
        await session.watch(["a", "b"])
        await session.unwatch()
        await session.unwatch()

    asyncio.run(scenario())

    assert session.watched == frozenset()
    assert connection.names == ["WATCH", "UNWATCH", "UNWATCH"]


def test_unwatch_releases_a_watch_before_exec(server, session) -> None:
    other = Session(server.connect())

    async def scenario():
        await session.watch("balance")
        session.multi()
        await session.set("balance", 1)
        await session.unwatch()
        await other.set("balance", 2)
        return await session.exec()

    assert asyncio.run(scenario()) == [True]
    assert server.data["balance"] == "1"


def test_discard_drops_queue_and_unwatches(session, connection) -> None:
    async def scenario():
        await session.watch("k")
        session.multi()
        await session.set("k", "v")
        await session.discard()

    asyncio.run(scenario())

    assert connection.names == ["WATCH", "UNWATCH"]
    assert session.mode is SessionMode.ATOMIC
    assert session.watched == frozenset()


def test_exec_resets_state_even_when_transport_fails(recording_session, recording) -> None:
    recording.replies.extend(["OK", "QUEUED", ConnectionResetError("gone")])

    async def scenario():
        recording_session.multi()
        await recording_session.set("k", "v")
        await recording_session.exec()

    with pytest.raises(ConnectionResetError):
        asyncio.run(scenario())

    assert recording_session.mode is SessionMode.ATOMIC


def test_execabort_from_server_is_surfaced(recording_session, recording) -> None:
    recording.replies.extend(
        [
            "OK",
            ResponseError("ERR", "wrong number of arguments for 'set' command"),
            ResponseError("EXECABORT", "Transaction discarded because of previous errors."),
        ]
    )

    async def scenario():
        recording_session.multi()
        await recording_session.set("k", "v")
        await recording_session.exec()

    with pytest.raises(ResponseError) as exc_info:
        asyncio.run(scenario())

    assert exc_info.value.code == "EXECABORT"
    assert recording.names == ["MULTI", "SET", "EXEC"]


def test_scans_and_blocking_pops_cannot_be_queued(session, connection) -> None:
    from disguise import Cursor

    session.multi()

    with pytest.raises(InvalidModeTransitionError):
        asyncio.run(session.scan(Cursor()))

    with pytest.raises(InvalidModeTransitionError):
        asyncio.run(session.bpop(["a"], 1))

    assert connection.calls == []


def test_pipeline_exec_releases_watched_keys(server, session, connection) -> None:
    other = Session(server.connect())

    async def scenario():
        await session.watch("balance")
        session.multi(SessionMode.PIPELINE)
        await session.get("balance")
        piped = await session.exec()

        await other.set("balance", 5)

        session.multi()
        await session.set("audit", "ok")
        return piped, await session.exec()

    piped, committed = asyncio.run(scenario())

    assert piped == [None]
    assert committed == [True]
    assert session.watched == frozenset()
    assert connection.names[:3] == ["WATCH", "GET", "UNWATCH"]
    assert server.data["audit"] == "ok"


def test_pipeline_without_watched_keys_sends_no_unwatch(session, connection) -> None:
    async def scenario():
        session.multi(SessionMode.PIPELINE)
        await session.get("k")
        return await session.exec()

    assert asyncio.run(scenario()) == [None]
    assert connection.names == ["GET"]
