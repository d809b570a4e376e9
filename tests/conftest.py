"""
Shared fixtures: an in-memory RouterOS stand-in and managers wired to it.
"""

import threading

import pytest

from mikrotik_wifi.adapters import RouterAdapter
from mikrotik_wifi.devices import ConnectionManager, ReconnectPolicy, RouterSession
from mikrotik_wifi.exceptions import RouterCommandError, RouterConnectionError
from mikrotik_wifi.utils import ConnectionParams
from mikrotik_wifi.wireless import WirelessManager


def parse_words(words):
    """Split API words into attribute and query dicts"""
    attributes, queries = {}, {}
    for word in words:
        key, _, value = word[1:].partition('=')
        if word.startswith('='):
            attributes[key] = value
        elif word.startswith('?'):
            queries[key] = value
    return attributes, queries


class FakeRouter:
    """Wireless interfaces and security profiles held in memory"""

    def __init__(self):
        self.tables = {
            '/interface/wireless': [],
            '/interface/wireless/security-profiles': [],
        }
        self.commands = []
        self.reachable = True
        self._next_id = 1
        self._lock = threading.Lock()

    def add_row(self, path, **values):
        row = {'.id': f'*{self._next_id}', **values}
        self._next_id += 1
        self.tables[path].append(row)
        return row

    def handle(self, command, *words):
        with self._lock:
            self.commands.append((command, words))

            if command == '/system/identity/print':
                return [{'name': 'MikroTik'}]

            path, _, action = command.rpartition('/')
            if path not in self.tables:
                raise RouterCommandError(f"no such command prefix: {command}")

            table = self.tables[path]
            attributes, queries = parse_words(words)

            if action == 'print':
                return [
                    dict(row) for row in table
                    if all(row.get(k) == v for k, v in queries.items())
                ]

            if action == 'add':
                if any(row.get('name') == attributes.get('name') for row in table):
                    raise RouterCommandError("failure: entry already exists")
                self.add_row(path, **attributes)
                return []

            target = [row for row in table if row['.id'] == attributes.get('.id')]
            if not target:
                raise RouterCommandError("no such item")

            if action == 'set':
                target[0].update(
                    {k: v for k, v in attributes.items() if k != '.id'}
                )
                return []

            if action == 'remove':
                table.remove(target[0])
                return []

            raise RouterCommandError(f"unknown action: {action}")


class FakeRouterAdapter(RouterAdapter):
    """Adapter bound to a FakeRouter"""

    VENDOR = "fake"
    PROTOCOL = "memory"

    def __init__(self, router):
        super().__init__()
        self.router = router
        self.broken = False

    def connect(self, params) -> bool:
        if not self.router.reachable:
            raise RouterConnectionError(f"connect to {params.full_address} timed out")
        self.connection = object()
        return True

    def disconnect(self):
        self.connection = None

    def run(self, command, *words):
        if self.broken or self.connection is None:
            raise RouterConnectionError("connection closed by peer")
        return self.router.handle(command, *words)


class CountingDialer:
    """Dialer that records every session it builds"""

    def __init__(self, router):
        self.router = router
        self.calls = 0
        self.sessions = []
        self.failures = []
        self._lock = threading.Lock()

    def fail_next(self, *errors):
        self.failures.extend(errors)

    def __call__(self, params):
        with self._lock:
            self.calls += 1
            if self.failures:
                raise self.failures.pop(0)

        adapter = FakeRouterAdapter(self.router)
        adapter.connect(params)
        session = RouterSession(params, adapter)
        with self._lock:
            self.sessions.append(session)
        return session


@pytest.fixture
def params():
    return ConnectionParams(address='10.0.0.1', username='admin', password='', port=8728)


@pytest.fixture
def router():
    return FakeRouter()


@pytest.fixture
def dialer(router):
    return CountingDialer(router)


@pytest.fixture
def fast_policy():
    return ReconnectPolicy(base_delay=0.001, factor=2.0, max_delay=0.01, jitter=0.0)


@pytest.fixture
def connection_manager(params, dialer, fast_policy):
    """Manager whose liveness loop will not fire during a test"""
    manager = ConnectionManager(
        params,
        dialer=dialer,
        keep_alive_interval=3600,
        reconnect_policy=fast_policy
    )
    yield manager
    manager.shutdown()


@pytest.fixture
def connected_manager(connection_manager):
    connection_manager.connect()
    return connection_manager


@pytest.fixture
def wireless(connected_manager):
    return WirelessManager(connected_manager)
