"""
MikroTik RouterOS API Adapter

Talks to RouterOS over its binary API (TCP 8728) using librouteros.

One librouteros Api reads and writes a single socket, so a command sentence
and its replies must not interleave with another caller's. The adapter
holds a transport lock for each full request/reply exchange; the liveness
probe and domain commands sharing one connection take turns.
"""

from typing import Dict, List
import threading

import librouteros
from librouteros.exceptions import LibRouterosError, TrapError, MultiTrapError

from mikrotik_wifi.exceptions import RouterConnectionError, RouterCommandError
from .base_adapter import RouterAdapter


class RouterOSAdapter(RouterAdapter):
    """Adapter for MikroTik RouterOS devices"""
    
    VENDOR = "mikrotik"
    PROTOCOL = "routeros-api"
    
    def __init__(self):
        super().__init__()
        self._transport_lock = threading.Lock()
    
    def connect(self, params) -> bool:
        """Connect and log in to the RouterOS API"""
        try:
            self.connection = librouteros.connect(
                host=params.address,
                username=params.username,
                password=params.password,
                port=params.port,
                timeout=params.timeout
            )
        except (LibRouterosError, OSError) as e:
            self.connection = None
            raise RouterConnectionError(
                f"Failed to connect to RouterOS at {params.full_address}: {e}"
            ) from e
        
        self.logger.info(f"Connected to RouterOS device {params.full_address}")
        return True
    
    def disconnect(self):
        """Close API connection"""
        with self._transport_lock:
            if self.connection:
                try:
                    self.connection.close()
                except (LibRouterosError, OSError) as e:
                    self.logger.debug(f"Error while closing connection: {e}")
                self.connection = None
    
    def run(self, command: str, *words: str) -> List[Dict]:
        """Send one API sentence and collect all !re replies"""
        with self._transport_lock:
            if self.connection is None:
                raise RouterConnectionError("Not connected to RouterOS")
            
            try:
                return list(self.connection.rawCmd(command, *words))
            except (TrapError, MultiTrapError) as e:
                raise RouterCommandError(str(e)) from e
            except (LibRouterosError, OSError) as e:
                raise RouterConnectionError(f"{command}: {e}") from e
