"""
Router Session

Represents one authenticated connection to the router.
"""

from enum import Enum
from datetime import datetime, timezone
from typing import Dict, List, Type
import logging

from mikrotik_wifi.adapters import RouterAdapter, RouterOSAdapter
from mikrotik_wifi.exceptions import RouterConnectionError, SessionClosedError


class SessionState(Enum):
    """Session states"""
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"
    CLOSED = "closed"


class RouterSession:
    """
    Authenticated session to a router.
    
    A session is built around an adapter that is already connected and is
    never re-pointed at another transport; replacing the connection means
    creating a new RouterSession.
    """
    
    def __init__(self, params, adapter: RouterAdapter):
        """
        Initialize router session.
        
        Args:
            params: ConnectionParams used to open the adapter
            adapter: Connected RouterAdapter instance
        """
        self.params = params
        self.adapter = adapter
        
        self.state = SessionState.CONNECTED
        self.created_at = datetime.now(timezone.utc)
        self.last_activity = self.created_at
        self.command_count = 0
        self.error_count = 0
        
        self.logger = logging.getLogger(f"{__name__}.{params.address}")
    
    def run(self, command: str, *words: str) -> List[Dict]:
        """
        Execute one command on the router.
        
        Args:
            command: Command path
            words: Attribute and query words
        
        Returns:
            Reply records
        """
        if self.state == SessionState.CLOSED:
            raise SessionClosedError("Session is closed")
        
        try:
            result = self.adapter.run(command, *words)
        except RouterConnectionError as e:
            self.error_count += 1
            self.state = SessionState.ERROR
            self.logger.debug(f"Transport failure on {command}: {e}")
            raise
        except Exception:
            self.error_count += 1
            raise
        
        self.command_count += 1
        self.update_last_activity()
        return result
    
    def update_last_activity(self):
        """Update last activity timestamp"""
        self.last_activity = datetime.now(timezone.utc)
    
    def is_healthy(self) -> bool:
        """Check if session is usable"""
        return (
            self.state == SessionState.CONNECTED and
            self.adapter.is_connected()
        )
    
    def get_stats(self) -> Dict:
        """Get session statistics"""
        return {
            'address': self.params.full_address,
            'state': self.state.value,
            'created_at': self.created_at.isoformat(),
            'last_activity': self.last_activity.isoformat(),
            'uptime_seconds': (datetime.now(timezone.utc) - self.created_at).total_seconds(),
            'command_count': self.command_count,
            'error_count': self.error_count
        }
    
    def close(self):
        """Close session"""
        if self.state != SessionState.CLOSED:
            self.adapter.disconnect()
            self.state = SessionState.CLOSED
            self.logger.info(f"Session closed for {self.params.full_address}")


def dial(params, adapter_class: Type[RouterAdapter] = RouterOSAdapter) -> RouterSession:
    """
    Open and authenticate a new session.
    
    Raises:
        RouterConnectionError: If the router cannot be reached or
            rejects the credentials
    """
    adapter = adapter_class()
    if not adapter.connect(params):
        raise RouterConnectionError(f"Failed to connect to {params.full_address}")
    return RouterSession(params, adapter)
