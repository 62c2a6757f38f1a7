"""Module containing protocols that prescribe disguise collaborators."""

import collections.abc
import typing

if typing.TYPE_CHECKING:
    from disguise import normalize

__all__: collections.abc.Sequence[str] = ("TransportProto", "SubscriberProto")


class TransportProto(typing.Protocol):
    """The external client runtime commands are ultimately executed on.

    The transport owns connections, authentication, codecs and cluster routing.
    disguise only ever calls ``execute``.
    """

    async def execute(
        self,
        name: str,
        args: collections.abc.Sequence["normalize.Primitive"],
        /,
    ) -> typing.Any:  # noqa: ANN401
        """Execute a single command and return its raw reply.

        A server error may either be raised or returned as a
        ``disguise.error.ResponseError`` instance. Any other exception is
        considered a transport failure and is propagated unchanged.
        """
        ...


class SubscriberProto(typing.Protocol):
    """Optional transport capability for pub/sub subscriptions."""

    async def subscribe(
        self,
        kind: str,
        channels: collections.abc.Sequence[str],
        callback: typing.Callable[..., typing.Any] | None,
        /,
    ) -> typing.Any:  # noqa: ANN401
        """Start (or stop) a subscription of the given kind.

        ``kind`` is one of ``SUBSCRIBE``, ``PSUBSCRIBE``, ``UNSUBSCRIBE`` and
        ``PUNSUBSCRIBE``.
        """
        ...
