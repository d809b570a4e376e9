"""
Base Adapter Interface

Defines the contract for the transport that carries management commands
to the router.
"""

from abc import ABC, abstractmethod
from typing import Dict, List
import logging


def attribute(key: str, value) -> str:
    """Build an API attribute word (=key=value)"""
    return f"={key}={value}"


def query(key: str, value) -> str:
    """Build an API query word (?key=value)"""
    return f"?{key}={value}"


class RouterAdapter(ABC):
    """
    Base class for router transports.
    
    An adapter owns one authenticated connection. Commands are sent as a
    path plus raw words and come back as a list of reply records.
    """
    
    VENDOR: str = "generic"
    PROTOCOL: str = "generic"
    
    def __init__(self):
        self.connection = None
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
    
    @abstractmethod
    def connect(self, params) -> bool:
        """
        Open and authenticate the connection.
        
        Args:
            params: ConnectionParams (address, port, username, password)
        
        Returns:
            True if connected successfully
        
        Raises:
            RouterConnectionError: If the router is unreachable or
                rejects the credentials
        """
    
    @abstractmethod
    def disconnect(self):
        """Close connection to router"""
    
    @abstractmethod
    def run(self, command: str, *words: str) -> List[Dict]:
        """
        Issue one command.
        
        Args:
            command: Command path, e.g. /interface/wireless/print
            words: Attribute (=k=v) and query (?k=v) words
        
        Returns:
            Reply records, possibly empty
        """
    
    def is_connected(self) -> bool:
        """Check if currently connected to router"""
        return self.connection is not None
    
    def get_vendor_info(self) -> Dict:
        """Get vendor and protocol information"""
        return {
            'vendor': self.VENDOR,
            'protocol': self.PROTOCOL
        }
