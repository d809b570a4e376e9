"""
Exception hierarchy for mikrotik-wifi.
"""


class MikrotikWifiError(Exception):
    """Base class for all mikrotik-wifi errors"""


class RouterConnectionError(MikrotikWifiError):
    """Transport could not be opened, authenticated, or was lost"""


class RouterCommandError(MikrotikWifiError):
    """The router rejected a command (a !trap reply)"""


class NotConnectedError(MikrotikWifiError):
    """No session has been established yet"""


class SessionClosedError(MikrotikWifiError, RuntimeError):
    """Command issued on a session that was already closed"""


class WirelessOperationError(MikrotikWifiError):
    """A wireless domain operation failed"""

    def __init__(self, operation: str, ssid: str, cause: Exception):
        super().__init__(f"{operation} failed for '{ssid}': {cause}")
        self.operation = operation
        self.ssid = ssid
        self.cause = cause
