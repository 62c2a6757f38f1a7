"""Module containing the command dispatcher.

The dispatcher is the only place commands reach the transport. It performs no
retries: a transport failure propagates exactly as the transport raised it,
and server errors are only re-typed, never swallowed.
"""

import collections.abc
import dataclasses
import logging
import typing

from disguise import command, error, protocol, session, transform, validate

__all__: collections.abc.Sequence[str] = ("Dispatcher", "classify")

_LOGGER: typing.Final = logging.getLogger(__name__)

_TYPE_MISMATCH_MARKERS: typing.Final = (
    "not an integer",
    "not a valid float",
    "not a float",
    "increment or decrement would overflow",
)


def classify(exc: error.ResponseError) -> error.ResponseError:
    """Re-type a server error as ``TypeMismatchError`` where that is what it means."""
    if isinstance(exc, error.TypeMismatchError):
        return exc

    lowered = exc.message.lower()
    if exc.code == "WRONGTYPE" or any(marker in lowered for marker in _TYPE_MISMATCH_MARKERS):
        return error.TypeMismatchError(exc.code, exc.message)

    return exc


@dataclasses.dataclass(slots=True)
class Dispatcher:
    """Sends commands to a transport and surfaces their results or errors."""

    transport: protocol.TransportProto
    log_commands: bool = False
    last_error: error.ResponseError | None = dataclasses.field(default=None, init=False)

    def _fail(self, exc: error.ResponseError) -> error.ResponseError:
        classified = classify(exc)
        self.last_error = classified
        return classified

    async def raw(self, cmd: command.Command) -> typing.Any:  # noqa: ANN401
        """Execute ``cmd`` and return its untransformed reply."""
        if self.log_commands:
            _LOGGER.debug("dispatching %s", cmd)

        try:
            reply = await cmd.execute(self.transport)

        except error.ResponseError as exc:
            classified = self._fail(exc)
            if classified is exc:
                raise

            raise classified from exc

        if isinstance(reply, error.ResponseError):
            raise self._fail(reply)

        return reply

    async def send(self, cmd: command.Command) -> typing.Any:  # noqa: ANN401
        """Execute ``cmd`` and return its transformed result."""
        return cmd.apply(await self.raw(cmd))

    async def flush(self, batch: session.Batch) -> list[typing.Any]:
        """Execute a drained queue and return one result per queued command.

        A failing command yields its error in place of a result. For a MULTI
        batch, a nil EXEC reply means a watched key changed and none of the
        queued commands ran; that raises ``TransactionAbortedError``. A PIPELINE
        batch is followed by UNWATCH when keys were watched.
        """
        if batch.mode is validate.SessionMode.PIPELINE:
            results = await self._flush_pipeline(batch.commands)
            if batch.watched:
                # Without EXEC the server keeps watching until told otherwise.
                await self.raw(command.Command("UNWATCH"))

            return results

        return await self._flush_transaction(batch)

    async def _flush_pipeline(self, commands: list[command.Command]) -> list[typing.Any]:
        results: list[typing.Any] = []
        for cmd in commands:
            try:
                results.append(await self.send(cmd))
            except error.ResponseError as exc:
                results.append(exc)

        return results

    async def _flush_transaction(self, batch: session.Batch) -> list[typing.Any]:
        await self.raw(command.Command("MULTI"))

        for cmd in batch.commands:
            try:
                await self.raw(cmd)
            except error.ResponseError:
                # The server rejected the command while queueing it; EXEC
                # reports this as EXECABORT for the whole transaction.
                _LOGGER.debug("%s was rejected while queueing", cmd.name)

        replies = await self.raw(command.Command("EXEC"))
        if replies is None:
            _LOGGER.debug("transaction aborted, %d watched key(s) changed", len(batch.watched))
            watched = {transform.to_str(key) for key in batch.watched}
            raise error.TransactionAbortedError(watched, len(batch.commands))

        if len(replies) != len(batch.commands):
            msg = f"EXEC returned {len(replies)} replies for {len(batch.commands)} queued commands"
            raise error.ResponseError("PROTO", msg)

        results: list[typing.Any] = []
        for cmd, reply in zip(batch.commands, replies, strict=True):
            if isinstance(reply, error.ResponseError):
                results.append(self._fail(reply))
            else:
                results.append(cmd.apply(reply))

        return results
