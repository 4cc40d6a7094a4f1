"""
Tests for single-flight token refresh and request replay.
"""
import asyncio
import os

import pytest
from unittest.mock import Mock

from gamelog.api.endpoints import REFRESH_PATH, game_entry_path
from gamelog.api.transport import ApiResponse
from gamelog.auth.refresh import RefreshState
from gamelog.errors import AuthenticationError, NetworkError, SessionExpiredError
from gamelog.models import CredentialPair

OLD_PAIR = CredentialPair(access="old-access", refresh="refresh-1")


async def wait_until(predicate, max_spins=200):
    for _ in range(max_spins):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition never became true")


def token_server(refresh_gate=None, refresh_response=None):
    """Protected endpoints accept only 'new-access'; refresh hands it out."""
    async def handler(request):
        if request.path == REFRESH_PATH:
            if refresh_gate is not None:
                await refresh_gate.wait()
            return refresh_response or ApiResponse(200, {"access": "new-access", "refresh": "refresh-2"})
        if request.headers.get("Authorization") == "Bearer new-access":
            return ApiResponse(200, {"path": request.path})
        return ApiResponse(401, {"detail": "Given token not valid for any token type"})
    return handler


@pytest.mark.asyncio
async def test_single_401_refreshes_and_replays(client, credential_store, fake_transport):
    credential_store.set(OLD_PAIR)
    fake_transport.handler = token_server()

    response = await client.get(game_entry_path(1))

    assert response.data == {"path": game_entry_path(1)}
    assert credential_store.get() == CredentialPair(access="new-access", refresh="refresh-2")
    refresh_requests = fake_transport.requests_to(REFRESH_PATH)
    assert len(refresh_requests) == 1
    assert refresh_requests[0].json == {"refresh": "refresh-1"}
    assert "Authorization" not in refresh_requests[0].headers


@pytest.mark.asyncio
async def test_concurrent_401s_share_one_refresh(client, credential_store, fake_transport):
    credential_store.set(OLD_PAIR)
    gate = asyncio.Event()
    fake_transport.handler = token_server(refresh_gate=gate)
    coordinator = client.refresh_coordinator

    tasks = [asyncio.ensure_future(client.get(game_entry_path(i))) for i in range(5)]
    await wait_until(lambda: coordinator.pending_count == 5)

    # Nobody settles while the refresh is outstanding
    assert coordinator.state is RefreshState.REFRESHING
    assert not any(task.done() for task in tasks)

    gate.set()
    responses = await asyncio.gather(*tasks)

    assert [r.data["path"] for r in responses] == [game_entry_path(i) for i in range(5)]
    assert len(fake_transport.requests_to(REFRESH_PATH)) == 1
    assert coordinator.state is RefreshState.IDLE
    assert coordinator.pending_count == 0


@pytest.mark.asyncio
async def test_refresh_failure_clears_session_and_rejects_all(client, credential_store, fake_transport, token_file):
    credential_store.set(OLD_PAIR)
    gate = asyncio.Event()
    fake_transport.handler = token_server(
        refresh_gate=gate,
        refresh_response=ApiResponse(401, {"detail": "Token is blacklisted"}),
    )
    coordinator = client.refresh_coordinator

    tasks = [asyncio.ensure_future(client.get(game_entry_path(i))) for i in range(3)]
    await wait_until(lambda: coordinator.pending_count == 3)
    gate.set()
    results = await asyncio.gather(*tasks, return_exceptions=True)

    assert all(isinstance(result, SessionExpiredError) for result in results)
    assert len({id(result) for result in results}) == 3
    assert credential_store.get() is None
    assert not os.path.exists(token_file)
    assert len(fake_transport.requests_to(REFRESH_PATH)) == 1
    assert coordinator.state is RefreshState.IDLE


@pytest.mark.asyncio
async def test_refresh_network_failure_expires_session(client, credential_store, fake_transport):
    credential_store.set(OLD_PAIR)

    async def handler(request):
        if request.path == REFRESH_PATH:
            raise NetworkError("Could not reach server")
        return ApiResponse(401)
    fake_transport.handler = handler

    with pytest.raises(SessionExpiredError) as exc_info:
        await client.get(game_entry_path(1))

    assert isinstance(exc_info.value.__cause__, NetworkError)
    assert credential_store.get() is None


@pytest.mark.asyncio
async def test_session_expired_listener_called_once(client, credential_store, fake_transport):
    credential_store.set(OLD_PAIR)
    fake_transport.handler = token_server(refresh_response=ApiResponse(401))
    listener = Mock()
    client.refresh_coordinator.on_session_expired(listener)

    await asyncio.gather(
        client.get(game_entry_path(1)),
        client.get(game_entry_path(2)),
        return_exceptions=True,
    )

    listener.assert_called_once()
    assert isinstance(listener.call_args[0][0], SessionExpiredError)


@pytest.mark.asyncio
async def test_refresh_without_rotation_keeps_refresh_token(client, credential_store, fake_transport):
    credential_store.set(OLD_PAIR)
    fake_transport.handler = token_server(refresh_response=ApiResponse(200, {"access": "new-access"}))

    await client.get(game_entry_path(1))

    assert credential_store.get() == CredentialPair(access="new-access", refresh="refresh-1")


@pytest.mark.asyncio
async def test_replay_that_fails_again_is_not_refreshed_twice(client, credential_store, fake_transport):
    credential_store.set(OLD_PAIR)

    async def handler(request):
        if request.path == REFRESH_PATH:
            return ApiResponse(200, {"access": "new-access", "refresh": "refresh-2"})
        return ApiResponse(401, {"detail": "Forbidden for this user"})
    fake_transport.handler = handler

    with pytest.raises(AuthenticationError) as exc_info:
        await client.get(game_entry_path(1))

    assert not isinstance(exc_info.value, SessionExpiredError)
    assert len(fake_transport.requests_to(REFRESH_PATH)) == 1
    assert len(fake_transport.requests_to(game_entry_path(1))) == 2


@pytest.mark.asyncio
async def test_stale_token_after_refresh_replays_without_new_refresh(client, credential_store, fake_transport):
    credential_store.set(OLD_PAIR)
    slow_gate = asyncio.Event()

    async def handler(request):
        if request.path == REFRESH_PATH:
            return ApiResponse(200, {"access": "new-access", "refresh": "refresh-2"})
        if request.headers.get("Authorization") == "Bearer new-access":
            return ApiResponse(200, {"path": request.path})
        if request.path == game_entry_path(2):
            # Sent with the old token, answered only after the refresh finished
            await slow_gate.wait()
        return ApiResponse(401)
    fake_transport.handler = handler

    slow = asyncio.ensure_future(client.get(game_entry_path(2)))
    await wait_until(lambda: len(fake_transport.requests) == 1)
    await client.get(game_entry_path(1))
    slow_gate.set()
    response = await slow

    assert response.data == {"path": game_entry_path(2)}
    assert len(fake_transport.requests_to(REFRESH_PATH)) == 1


@pytest.mark.asyncio
async def test_logout_during_refresh_discards_new_tokens(client, credential_store, fake_transport):
    credential_store.set(OLD_PAIR)
    gate = asyncio.Event()
    fake_transport.handler = token_server(refresh_gate=gate)
    coordinator = client.refresh_coordinator
    listener = Mock()
    coordinator.on_session_expired(listener)

    task = asyncio.ensure_future(client.get(game_entry_path(1)))
    await wait_until(lambda: coordinator.pending_count == 1)
    credential_store.clear()
    gate.set()

    with pytest.raises(SessionExpiredError):
        await task

    assert credential_store.get() is None
    assert coordinator.state is RefreshState.IDLE
    # The queued request is never replayed
    assert len(fake_transport.requests_to(game_entry_path(1))) == 1
    listener.assert_not_called()


@pytest.mark.asyncio
async def test_failed_refresh_keeps_session_started_meanwhile(client, credential_store, fake_transport):
    credential_store.set(OLD_PAIR)
    gate = asyncio.Event()
    fake_transport.handler = token_server(refresh_gate=gate, refresh_response=ApiResponse(401))
    coordinator = client.refresh_coordinator
    fresh_login = CredentialPair(access="login-access", refresh="login-refresh")

    task = asyncio.ensure_future(client.get(game_entry_path(1)))
    await wait_until(lambda: coordinator.pending_count == 1)
    credential_store.set(fresh_login)
    gate.set()

    with pytest.raises(SessionExpiredError):
        await task

    assert credential_store.get() == fresh_login


@pytest.mark.asyncio
async def test_late_401_after_failed_refresh_does_not_expire_twice(client, credential_store, fake_transport):
    credential_store.set(OLD_PAIR)
    slow_gate = asyncio.Event()

    async def handler(request):
        if request.path == game_entry_path(2):
            await slow_gate.wait()
        return ApiResponse(401)
    fake_transport.handler = handler
    coordinator = client.refresh_coordinator
    listener = Mock()
    coordinator.on_session_expired(listener)

    slow = asyncio.ensure_future(client.get(game_entry_path(2)))
    await wait_until(lambda: len(fake_transport.requests) == 1)
    with pytest.raises(SessionExpiredError):
        await client.get(game_entry_path(1))
    slow_gate.set()

    with pytest.raises(SessionExpiredError):
        await slow

    assert coordinator.refresh_count == 1
    assert len(fake_transport.requests_to(REFRESH_PATH)) == 1
    listener.assert_called_once()


@pytest.mark.asyncio
async def test_cycle_without_refresh_token_is_not_counted(client):
    coordinator = client.refresh_coordinator

    with pytest.raises(SessionExpiredError):
        await coordinator.wait_for_credentials()

    assert coordinator.refresh_count == 0
    assert coordinator.state is RefreshState.IDLE
