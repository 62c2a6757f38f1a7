import asyncio

import pytest

from disguise import Command, Session
from disguise.dispatch import Dispatcher, classify
from disguise.error import ResponseError, Stage, TypeMismatchError


@pytest.mark.parametrize(
    ("code", "message"),
    [
        ("WRONGTYPE", "Operation against a key holding the wrong kind of value"),
        ("ERR", "value is not an integer or out of range"),
        ("ERR", "value is not a valid float"),
        ("ERR", "increment or decrement would overflow"),
    ],
)
def test_type_errors_are_reclassified(code, message) -> None:
    classified = classify(ResponseError(code, message))

    assert isinstance(classified, TypeMismatchError)
    assert classified.code == code
    assert classified.message == message
    assert classified.stage is Stage.RESPONSE


def test_other_errors_are_left_alone() -> None:
    original = ResponseError("ERR", "unknown command 'FOO'")

    assert classify(original) is original


def test_error_reply_is_parsed_into_code_and_message() -> None:
    exc = ResponseError.from_response("NOSCRIPT No matching script. Please use EVAL.")

    assert exc.code == "NOSCRIPT"
    assert exc.message == "No matching script. Please use EVAL."


def test_returned_error_replies_are_raised(recording) -> None:
    recording.replies.append(ResponseError("WRONGTYPE", "wrong kind of value"))
    dispatcher = Dispatcher(recording)

    async def run():
        return await dispatcher.send(Command("GET", "key"))

    with pytest.raises(TypeMismatchError) as exc_info:
        asyncio.run(run())

    assert dispatcher.last_error is exc_info.value


def test_raised_type_error_keeps_its_cause(recording) -> None:
    original = ResponseError("ERR", "value is not an integer or out of range")
    recording.replies.append(original)

    with pytest.raises(TypeMismatchError) as exc_info:
        asyncio.run(Dispatcher(recording).send(Command("INCR", "key")))

    assert exc_info.value.__cause__ is original


def test_transport_failures_propagate_unchanged(recording) -> None:
    failure = TimeoutError("read timed out")
    recording.replies.append(failure)
    dispatcher = Dispatcher(recording)

    with pytest.raises(TimeoutError) as exc_info:
        asyncio.run(dispatcher.send(Command("PING")))

    assert exc_info.value is failure
    assert dispatcher.last_error is None
    assert recording.calls == [("PING", ())]


def test_last_error_can_be_cleared(recording) -> None:
    recording.replies.extend([ResponseError("ERR", "syntax error"), "PONG"])
    session = Session(recording)

    with pytest.raises(ResponseError):
        asyncio.run(session.raw("BOGUS"))

    assert session.last_error is not None
    assert session.last_error.message == "syntax error"

    assert asyncio.run(session.ping()) == "PONG"
    assert session.last_error is not None

    session.clear_last_error()
    assert session.last_error is None


def test_commands_are_logged_when_enabled(recording, caplog) -> None:
    dispatcher = Dispatcher(recording, log_commands=True)

    with caplog.at_level("DEBUG", logger="disguise.dispatch"):
        asyncio.run(dispatcher.send(Command("GET", "key")))

    assert "dispatching GET key" in caplog.text


def test_commands_are_not_logged_by_default(recording, caplog) -> None:
    with caplog.at_level("DEBUG", logger="disguise.dispatch"):
        asyncio.run(Dispatcher(recording).send(Command("GET", "key")))

    assert "dispatching" not in caplog.text
