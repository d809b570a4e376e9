"""
Connection Manager

Owns the single session to the router: initial connect, periodic
liveness probing and reconnection with backoff.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional
import logging
import random
import threading

from mikrotik_wifi.exceptions import (
    MikrotikWifiError,
    NotConnectedError,
    RouterConnectionError,
)
from .session import RouterSession, dial

KEEP_ALIVE_INTERVAL = 30.0
PROBE_COMMAND = "/system/identity/print"


@dataclass(frozen=True)
class ReconnectPolicy:
    """
    Exponential backoff for steady-state reconnects.

    The delay before retry n (0-based) is min(max_delay, base_delay * factor**n)
    scaled by a random multiplier in [1 - jitter, 1]. There is no cap on the
    number of attempts.
    """
    base_delay: float = 1.0
    factor: float = 2.0
    max_delay: float = 60.0
    jitter: float = 0.5

    def delay(self, attempt: int, rng: Optional[random.Random] = None) -> float:
        rng = rng or random
        raw = min(self.max_delay, self.base_delay * (self.factor ** attempt))
        return raw * rng.uniform(1.0 - self.jitter, 1.0)


class ConnectionManager:
    """
    Manage the one connection to the router.

    Features:
    - Fatal initial connect (errors propagate to the caller)
    - Background liveness probe on a daemon thread
    - Non-fatal reconnect with exponential backoff and jitter
    - Atomic replacement of the shared session

    Readers always get whatever session is current at the instant of
    access; nobody waits for an in-progress reconnect. The lock guards only
    the reference swap, never a remote call. A replaced session is not
    closed here, so calls already in flight on it complete or fail against
    the old transport.
    """

    def __init__(
        self,
        params,
        dialer: Callable[..., RouterSession] = dial,
        keep_alive_interval: float = KEEP_ALIVE_INTERVAL,
        reconnect_policy: Optional[ReconnectPolicy] = None
    ):
        """
        Initialize connection manager.

        Args:
            params: ConnectionParams for the router
            dialer: Callable(params) -> RouterSession, raises RouterConnectionError
            keep_alive_interval: Seconds between liveness probes
            reconnect_policy: Backoff used when a probe fails
        """
        self.params = params
        self.dialer = dialer
        self.keep_alive_interval = keep_alive_interval
        self.reconnect_policy = reconnect_policy or ReconnectPolicy()

        self.logger = logging.getLogger(__name__)

        self._session: Optional[RouterSession] = None
        self._lock = threading.Lock()
        self._closed = False
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

        self.stats = {
            'total_connections': 0,
            'failed_connections': 0,
            'reconnections': 0,
            'probes': 0,
            'failed_probes': 0
        }

    @property
    def session(self) -> RouterSession:
        """Current session, read atomically"""
        with self._lock:
            session = self._session
        if session is None:
            raise NotConnectedError("No session to the router has been established")
        return session

    def get_session(self) -> RouterSession:
        return self.session

    @property
    def is_running(self) -> bool:
        """True while the liveness thread is alive"""
        return self._thread is not None and self._thread.is_alive()

    def _count(self, key: str):
        with self._lock:
            self.stats[key] += 1

    def _install(self, session: RouterSession) -> bool:
        """Publish a fully built session as the current one"""
        with self._lock:
            if self._closed:
                installed = False
            else:
                self._session = session
                self.stats['total_connections'] += 1
                installed = True

        if not installed:
            self.logger.info("Manager shut down while connecting, discarding new session")
            session.close()
        return installed

    def connect(self) -> RouterSession:
        """
        Establish the initial session and start the liveness loop.

        Returns:
            The installed RouterSession

        Raises:
            RouterConnectionError: If the router cannot be reached or
                authentication fails
        """
        self.logger.debug(
            f"Attempting to connect to RouterOS at address: {self.params.full_address}"
        )

        try:
            session = self.dialer(self.params)
        except RouterConnectionError as e:
            self._count('failed_connections')
            self.logger.error(f"Failed to connect to RouterOS: {e}")
            raise

        with self._lock:
            self._closed = False
        self._install(session)

        self.logger.info(f"✓ Connected to {self.params.full_address}")
        self.start()
        return session

    def run(self, command: str, *words: str) -> List[Dict]:
        """Issue one command on the current session. No retry."""
        return self.session.run(command, *words)

    def probe(self) -> bool:
        """
        Send the identity check on the current session.

        Returns:
            True if the router answered
        """
        with self._lock:
            session = self._session
            if session is not None:
                self.stats['probes'] += 1
        if session is None:
            return False

        try:
            session.run(PROBE_COMMAND)
            return True
        except MikrotikWifiError as e:
            self._count('failed_probes')
            self.logger.warning(f"Keep alive failed, attempting to reconnect: {e}")
            return False

    def reconnect(self) -> Optional[RouterSession]:
        """
        Replace the current session, retrying until it works.

        Unlike connect(), failures here are logged and retried with backoff;
        they never propagate.

        Returns:
            The new session, or None if the manager was stopped first
        """
        attempt = 0

        while not self._stop_event.is_set():
            try:
                session = self.dialer(self.params)
            except RouterConnectionError as e:
                self._count('failed_connections')
                delay = self.reconnect_policy.delay(attempt)
                attempt += 1
                self.logger.error(
                    f"Reconnect attempt {attempt} to {self.params.full_address} failed: {e}; "
                    f"retrying in {delay:.1f}s"
                )
                self._stop_event.wait(delay)
                continue

            if not self._install(session):
                return None

            self._count('reconnections')
            self.logger.info(
                f"✓ Reconnected to {self.params.full_address} after {attempt + 1} attempt(s)"
            )
            return session

        self.logger.info("Reconnect abandoned, connection manager is stopping")
        return None

    def check_and_repair(self) -> bool:
        """
        One liveness iteration: probe, and reconnect if the probe failed.

        Returns:
            True if the session was replaced
        """
        if self.probe():
            return False
        return self.reconnect() is not None

    def _liveness_loop(self):
        while not self._stop_event.wait(self.keep_alive_interval):
            try:
                self.check_and_repair()
            except Exception:
                self.logger.exception("Unexpected error in liveness loop")

    def start(self):
        """Start the liveness thread if it is not already running"""
        if self.is_running:
            if self._stop_event.is_set():
                self.logger.warning("Previous liveness thread is still stopping, not starting another")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._liveness_loop,
            name="routeros-keepalive",
            daemon=True
        )
        self._thread.start()
        self.logger.debug(f"Liveness loop started (interval {self.keep_alive_interval}s)")

    def stop(self, timeout: float = 5.0):
        """Signal the liveness thread to stop and wait for it"""
        self._stop_event.set()

        thread = self._thread
        if thread and thread is not threading.current_thread():
            thread.join(timeout)
            if thread.is_alive():
                self.logger.warning(f"Liveness thread did not stop within {timeout}s")
                # Keep the reference so start() cannot spawn a second loop
                return
        self._thread = None

    def shutdown(self):
        """Stop the liveness loop and close the current session"""
        self.logger.info("Shutting down connection manager...")
        self.stop()

        with self._lock:
            session = self._session
            self._session = None
            self._closed = True

        if session:
            session.close()

    def get_stats(self) -> Dict:
        """Get connection statistics"""
        with self._lock:
            session = self._session
            stats = dict(self.stats)

        return {
            **stats,
            'running': self.is_running,
            'session': session.get_stats() if session else None
        }

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
        return False
