import asyncio

from disguise import Client, Session, SessionConfig, SessionMode


def test_sessions_get_their_own_transport_and_state(server) -> None:
    client = Client(server.connect, SessionConfig(key_prefix="app:"))

    first = client.get_session()
    second = client.get_session(SessionConfig())

    assert first.transport is not second.transport
    assert first.config.key_prefix == "app:"
    assert second.config.key_prefix == ""

    first.multi()
    assert first.mode is SessionMode.MULTI
    assert second.mode is SessionMode.ATOMIC


def test_sessions_share_the_server_keyspace(server) -> None:
    client = Client(server.connect)

    async def scenario():
        await client.get_session().set("shared", "yes")
        return await client.get_session().get("shared")

    assert asyncio.run(scenario()) == "yes"


def test_closing_the_client_closes_every_session(recording) -> None:
    transport_class = type(recording)
    transports: list = []

    def factory():
        transports.append(transport_class())
        return transports[-1]

    async def scenario():
        async with Client(factory) as client:
            session = client.get_session()
            session.multi()
            await session.set("k", "v")
            client.get_session()
        return session

    session = asyncio.run(scenario())

    assert [transport.closed for transport in transports] == [True, True]
    assert session.mode is SessionMode.ATOMIC
    assert all(transport.calls == [] for transport in transports)


def test_session_context_manager_closes_transport(recording) -> None:
    async def scenario():
        async with Session(recording) as session:
            await session.ping()

    asyncio.run(scenario())

    assert recording.closed is True
    assert recording.names == ["PING"]


def test_session_close_tolerates_transports_without_close(server) -> None:
    session = Session(server.connect())

    asyncio.run(session.close())

    assert session.mode is SessionMode.ATOMIC


def test_sessions_closed_on_their_own_are_released(recording) -> None:
    transport_class = type(recording)
    transports: list = []
    closes: list[int] = []

    def factory():
        transport = transport_class()

        async def close(transport=transport) -> None:
            closes.append(id(transport))

        transport.close = close
        transports.append(transport)
        return transport

    client = Client(factory)

    async def scenario():
        for _ in range(3):
            async with client.get_session() as session:
                await session.ping()
        kept = client.get_session()
        await client.close()
        return kept

    kept = asyncio.run(scenario())

    assert closes == [id(transport) for transport in transports]
    assert client._sessions == []
    assert kept.mode is SessionMode.ATOMIC
