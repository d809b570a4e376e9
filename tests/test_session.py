"""
Test RouterSession state tracking and dial()
"""

import pytest

from mikrotik_wifi.devices import RouterSession, SessionState, dial
from mikrotik_wifi.exceptions import RouterCommandError, RouterConnectionError, SessionClosedError

from conftest import FakeRouterAdapter


@pytest.fixture
def session(params, router):
    adapter = FakeRouterAdapter(router)
    adapter.connect(params)
    return RouterSession(params, adapter)


def test_new_session_is_connected(session):
    assert session.state == SessionState.CONNECTED
    assert session.is_healthy()
    assert session.command_count == 0


def test_run_counts_commands(session):
    rows = session.run('/system/identity/print')

    assert rows == [{'name': 'MikroTik'}]
    assert session.command_count == 1
    assert session.last_activity >= session.created_at


def test_router_error_keeps_session_usable(session):
    with pytest.raises(RouterCommandError):
        session.run('/interface/wireless/set', '=.id=*99', '=ssid=x')

    assert session.error_count == 1
    assert session.state == SessionState.CONNECTED


def test_transport_error_marks_session(session):
    session.adapter.broken = True

    with pytest.raises(RouterConnectionError):
        session.run('/system/identity/print')

    assert session.state == SessionState.ERROR
    assert not session.is_healthy()


def test_closed_session_rejects_commands(session):
    session.close()
    session.close()

    assert session.state == SessionState.CLOSED
    assert not session.adapter.is_connected()
    with pytest.raises(SessionClosedError):
        session.run('/system/identity/print')


def test_stats(session):
    session.run('/system/identity/print')
    stats = session.get_stats()

    assert stats['address'] == '10.0.0.1:8728'
    assert stats['state'] == 'connected'
    assert stats['command_count'] == 1


def test_dial_returns_connected_session(params, router):
    session = dial(params, adapter_class=lambda: FakeRouterAdapter(router))

    assert isinstance(session, RouterSession)
    assert session.params is params
    assert session.is_healthy()


def test_dial_unreachable(params, router):
    router.reachable = False

    with pytest.raises(RouterConnectionError):
        dial(params, adapter_class=lambda: FakeRouterAdapter(router))
