"""Module containing adapters from existing client runtimes to ``TransportProto``."""

import asyncio
import collections.abc
import dataclasses
import inspect
import typing

from disguise import error, normalize

__all__: collections.abc.Sequence[str] = ("ExecuteCommandTransport",)


def _is_pooled(client: typing.Any) -> bool:  # noqa: ANN401
    # redis-py style clients take a pool connection per call unless they were
    # created with single_connection_client=True or hold a connection already.
    if not hasattr(client, "connection_pool"):
        return False

    return not getattr(client, "single_connection_client", False) and getattr(client, "connection", None) is None


@dataclasses.dataclass(slots=True)
class ExecuteCommandTransport:
    """Adapt a client exposing ``execute_command(*args)`` as a transport.

    A session's WATCH, MULTI, queued commands and EXEC must all reach the same
    server connection, so the client has to be pinned to one connection. A
    ``redis.asyncio.Redis`` qualifies when created with
    ``single_connection_client=True``; a pooled one is rejected with
    ``StateError``. redis-anyio's ``RedisClient`` is pooled as well and should
    not be wrapped directly.

    A synchronous ``execute_command`` runs in a worker thread, so blocking
    commands do not stall the event loop.

    Exceptions listed in ``response_errors`` are the client's own server-error
    types; they are re-raised as ``disguise.error.ResponseError`` so the
    dispatcher can classify them. Every other exception propagates untouched.

    ``close`` calls the client's ``aclose`` or ``close`` if it has one and
    ``owns_client`` is set.
    """

    client: typing.Any
    response_errors: tuple[type[BaseException], ...] = ()
    owns_client: bool = False

    def __post_init__(self) -> None:
        if _is_pooled(self.client):
            msg = (
                f"{type(self.client).__name__} hands out a pool connection per command; "
                "create it with single_connection_client=True."
            )
            raise error.StateError(msg)

    async def execute(self, name: str, args: collections.abc.Sequence[normalize.Primitive], /) -> typing.Any:  # noqa: ANN401
        execute_command = self.client.execute_command

        try:
            if inspect.iscoroutinefunction(execute_command):
                reply = await execute_command(name, *args)
            else:
                reply = await asyncio.to_thread(execute_command, name, *args)
                if inspect.isawaitable(reply):
                    reply = await reply

        except self.response_errors as exc:
            raise error.ResponseError.from_response(str(exc)) from exc

        return reply

    async def close(self) -> None:
        if not self.owns_client:
            return

        closer = getattr(self.client, "aclose", None) or getattr(self.client, "close", None)
        if closer is None:
            return

        result = closer()
        if inspect.isawaitable(result):
            await result
