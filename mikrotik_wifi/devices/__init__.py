"""
Device Connection Module

Provides router connection and session management:
- ConnectionManager: Owns the single router session and keeps it alive
- RouterSession: One authenticated connection

Usage:
    from mikrotik_wifi.devices import ConnectionManager

    with ConnectionManager(params) as conn_mgr:
        conn_mgr.connect()
        rows = conn_mgr.run('/interface/wireless/print')
"""

from .connection_manager import ConnectionManager, ReconnectPolicy, KEEP_ALIVE_INTERVAL
from .session import RouterSession, SessionState, dial

__all__ = [
    "ConnectionManager",
    "ReconnectPolicy",
    "KEEP_ALIVE_INTERVAL",
    "RouterSession",
    "SessionState",
    "dial",
]
