"""Module containing the session façade and the client that hands sessions out."""

import collections.abc
import dataclasses
import logging
import types
import typing

from disguise import command, commands, config, dispatch, error, normalize, protocol, session, transform, validate

if typing.TYPE_CHECKING:
    import typing_extensions

__all__: collections.abc.Sequence[str] = ("Session", "Client")

_LOGGER: typing.Final = logging.getLogger(__name__)

TransportFactory: typing.TypeAlias = typing.Callable[[], protocol.TransportProto]


@dataclasses.dataclass(eq=False)
class Session(
    commands.StringCommands,
    commands.KeyCommands,
    commands.ListCommands,
    commands.SetCommands,
    commands.SortedSetCommands,
    commands.HashCommands,
    commands.BitmapCommands,
    commands.HyperLogLogCommands,
    commands.GeoCommands,
    commands.PubSubCommands,
    commands.ScriptingCommands,
    commands.ScanCommands,
    commands.ServerCommands,
):
    """One logical connection's view of the server.

    A session validates and normalises every call, then either executes it on
    its transport straight away (``ATOMIC`` mode) or queues it until ``exec``
    (``MULTI`` and ``PIPELINE`` modes). The mode and the set of watched keys
    live on the session; nothing is shared between sessions.

    Sessions are not safe for concurrent use. Use one session per task or
    thread, each with its own transport.
    """

    transport: protocol.TransportProto
    config: "config.SessionConfig" = dataclasses.field(default_factory=config.SessionConfig)

    _controller: session.ModeController = dataclasses.field(
        default_factory=session.ModeController,
        init=False,
        repr=False,
    )
    _dispatcher: dispatch.Dispatcher = dataclasses.field(init=False, repr=False)
    _on_close: typing.Callable[["Session"], None] | None = dataclasses.field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self._dispatcher = dispatch.Dispatcher(self.transport, log_commands=self.config.log_commands)

    # Hooks used by the command mixins.

    def _command(self, name: str, *args: typing.Any) -> command.Command:  # noqa: ANN401
        return command.Command(name, *args, prefix=self.config.key_prefix)

    async def _call(self, cmd: command.Command, /) -> typing.Any:  # noqa: ANN401
        if self._controller.buffering:
            return self._controller.enqueue(cmd)

        return await self._dispatcher.send(cmd)

    async def _call_atomic(self, cmd: command.Command, operation: str, /) -> typing.Any:  # noqa: ANN401
        self._controller.require_atomic(operation)
        return await self._dispatcher.send(cmd)

    @property
    def _scan_count(self) -> int | None:
        return self.config.scan_count

    async def _subscription(
        self,
        kind: str,
        channels: normalize.Primitive | collections.abc.Iterable[normalize.Primitive],
        callback: commands.pubsub.Callback | None,
        *,
        allow_empty: bool = False,
    ) -> typing.Any:  # noqa: ANN401
        names = normalize.variadic(channels, name="channels", allow_empty=allow_empty)  # type: ignore[arg-type]
        self._controller.require_atomic(f"{kind.lower()} to channels")

        subscribe = getattr(self.transport, "subscribe", None)
        if subscribe is None:
            msg = f"{type(self.transport).__name__} does not support pub/sub subscriptions."
            raise error.StateError(msg)

        return await typing.cast(protocol.SubscriberProto, self.transport).subscribe(kind, names, callback)

    # Session state.

    @property
    def mode(self) -> validate.SessionMode:
        """The current execution mode."""
        return self._controller.mode

    @property
    def watched(self) -> frozenset[normalize.Primitive]:
        """The keys currently under optimistic-lock surveillance, as sent to the server."""
        return frozenset(self._controller.watched)

    @property
    def last_error(self) -> error.ResponseError | None:
        """The most recent error the server replied with, if any."""
        return self._dispatcher.last_error

    def clear_last_error(self) -> None:
        self._dispatcher.last_error = None

    def get_option(self, name: str) -> typing.Any:  # noqa: ANN401
        if name not in config.SessionConfig.option_names():
            raise error.UnknownOptionError("session", frozenset({name}), config.SessionConfig.option_names())

        return getattr(self.config, name)

    def set_option(self, name: str, value: typing.Any) -> None:  # noqa: ANN401
        """Change a single session option; see ``SessionConfig``."""
        self.config = self.config.with_option(name, value)
        self._dispatcher.log_commands = self.config.log_commands

    def prefixed(self, key: normalize.Primitive) -> normalize.Primitive:
        """Return ``key`` as it is sent to the server, with the key prefix applied."""
        return command.prefix_key(self.config.key_prefix, key)

    # Transactions and pipelines.

    def multi(self, mode: validate.SessionMode | str = validate.SessionMode.MULTI) -> "typing_extensions.Self":
        """Start queueing commands.

        In ``MULTI`` mode the queue runs as a server-side transaction on
        ``exec``; in ``PIPELINE`` mode it is merely sent in one go. Nothing is
        sent to the server until ``exec``.
        """
        self._controller.enter(mode)
        return self

    async def exec(self) -> list[typing.Any]:
        """Run every queued command and return their results in queue order.

        A command that failed yields its error in place of a result. If a
        watched key was modified since ``watch``, a ``MULTI`` queue is dropped
        as a whole and ``TransactionAbortedError`` is raised. Either way the
        session is back in ``ATOMIC`` mode with no watched keys afterwards.
        """
        batch = self._controller.drain("exec")
        return await self._dispatcher.flush(batch)

    async def discard(self) -> None:
        """Drop every queued command and return to ``ATOMIC`` mode."""
        batch = self._controller.drain("discard")
        if batch.watched:
            await self._dispatcher.send(self._command("UNWATCH"))

    async def watch(
        self,
        keys: normalize.Primitive | collections.abc.Iterable[normalize.Primitive],
    ) -> bool:
        """Watch keys for modification by other clients until the next ``exec``.

        Only possible in ``ATOMIC`` mode, before ``multi``.
        """
        self._controller.require_atomic("watch keys")

        cmd = self._command("WATCH").keys(normalize.variadic(keys, name="keys"))  # type: ignore[arg-type]
        result = await self._dispatcher.send(cmd.set_transform(transform.to_ok))

        self._controller.watch(cmd.arguments)
        _LOGGER.debug("watching %d key(s)", len(self._controller.watched))
        return result

    async def unwatch(self) -> bool:
        """Stop watching every key. Safe to call at any time, any number of times."""
        self._controller.unwatch()
        return await self._dispatcher.send(self._command("UNWATCH").set_transform(transform.to_ok))

    async def close(self) -> None:
        """Reset this session and close its transport if the transport can be closed."""
        if self._controller.queue:
            _LOGGER.debug("closing session with %d unsent queued command(s)", len(self._controller.queue))

        self._controller.reset()

        close = getattr(self.transport, "close", None)
        if close is not None:
            await close()

        if self._on_close is not None:
            on_close, self._on_close = self._on_close, None
            on_close(self)

    async def __aenter__(self) -> "typing_extensions.Self":
        return self

    async def __aexit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_value: BaseException | None,
        _exc_tb: types.TracebackType | None,
    ) -> None:
        await self.close()


@dataclasses.dataclass(slots=True)
class Client:
    """Hands out sessions, each with a fresh transport from ``transport_factory``."""

    transport_factory: TransportFactory
    config: "config.SessionConfig" = dataclasses.field(default_factory=config.SessionConfig)

    _sessions: list[Session] = dataclasses.field(default_factory=list, init=False)

    def get_session(self, session_config: "config.SessionConfig | None" = None) -> Session:
        """Create a new session.

        The session uses this client's config unless ``session_config`` is
        given.
        """
        new = Session(self.transport_factory(), session_config or self.config)
        new._on_close = self._forget  # noqa: SLF001
        self._sessions.append(new)
        return new

    def _forget(self, closed: Session) -> None:
        self._sessions.remove(closed)

    async def close(self) -> None:
        """Close every session created by this client."""
        for opened in list(self._sessions):
            await opened.close()

    async def __aenter__(self) -> "typing_extensions.Self":
        return self

    async def __aexit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_value: BaseException | None,
        _exc_tb: types.TracebackType | None,
    ) -> None:
        await self.close()
