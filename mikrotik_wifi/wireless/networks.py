"""
Wireless Network Operations

List, create, update and remove wireless networks. Each network is a
wireless interface plus the security profile it points at; both are
created under the network's SSID, and a rename changes only the SSID. Every operation is a short sequence of single
request/response calls with no retry.
"""

from enum import Enum
from typing import Dict, List
import logging

from mikrotik_wifi.adapters import attribute, query
from mikrotik_wifi.exceptions import MikrotikWifiError, WirelessOperationError

WIRELESS_PATH = "/interface/wireless"
SECURITY_PROFILES_PATH = "/interface/wireless/security-profiles"
DEFAULT_MASTER_INTERFACE = "wlan1"


class NetworkProperty(Enum):
    """Network properties that can be updated"""
    SSID = "ssid"
    PASSWORD = "password"


class WirelessManager:
    """
    Wireless network operations on the router.

    Commands are issued through the ConnectionManager, so they always use
    the session that is current when each call is made.
    """

    def __init__(self, connection_manager, master_interface: str = DEFAULT_MASTER_INTERFACE):
        """
        Args:
            connection_manager: ConnectionManager holding the router session
            master_interface: Physical radio new virtual APs attach to
        """
        self.connection_manager = connection_manager
        self.master_interface = master_interface
        self.logger = logging.getLogger(__name__)

    def _run(self, operation: str, ssid: str, command: str, *words: str) -> List[Dict]:
        try:
            return self.connection_manager.run(command, *words)
        except MikrotikWifiError as e:
            raise WirelessOperationError(operation, ssid, e) from e

    def _find_rows(self, operation: str, ssid: str, path: str, key: str, value: str) -> List[Dict]:
        rows = self._run(operation, ssid, f"{path}/print", query(key, value))
        rows = [row for row in rows if '.id' in row]
        if not rows:
            raise WirelessOperationError(
                operation, ssid, LookupError(f"no entry in {path} with {key}={value}")
            )
        return rows

    def _find_ids(self, operation: str, ssid: str, path: str, key: str) -> List[str]:
        return [row['.id'] for row in self._find_rows(operation, ssid, path, key, ssid)]

    def _security_profiles(self, operation: str, ssid: str) -> List[str]:
        """Names of the security profiles used by the interfaces broadcasting ssid"""
        profiles: List[str] = []
        for row in self._find_rows(operation, ssid, WIRELESS_PATH, 'ssid', ssid):
            name = row.get('security-profile')
            if name and name not in profiles:
                profiles.append(str(name))
        if not profiles:
            raise WirelessOperationError(
                operation, ssid, LookupError(f"network {ssid} has no security profile")
            )
        return profiles

    def list_networks(self) -> List[str]:
        """
        List SSIDs of all wireless interfaces, in router order.

        Returns:
            SSIDs; an interface without an ssid yields an empty string
        """
        rows = self._run("list", "*", f"{WIRELESS_PATH}/print")
        return [str(row.get('ssid', '')) for row in rows]

    def create_network(self, ssid: str, password: str) -> None:
        """
        Create a WPA2-PSK security profile and a wireless interface using it.

        Args:
            ssid: Network name, also used for the profile and interface names
            password: WPA2 pre-shared key
        """
        existing = self._run("create", ssid, f"{WIRELESS_PATH}/print", query('ssid', ssid))
        if existing:
            self.logger.debug(f"{len(existing)} interface(s) already broadcast '{ssid}'")

        self._run(
            "create security profile", ssid,
            f"{SECURITY_PROFILES_PATH}/add",
            attribute('name', ssid),
            attribute('mode', 'dynamic-keys'),
            attribute('authentication-types', 'wpa2-psk'),
            attribute('wpa2-pre-shared-key', password),
        )

        self._run(
            "create", ssid,
            f"{WIRELESS_PATH}/add",
            attribute('name', ssid),
            attribute('ssid', ssid),
            attribute('security-profile', ssid),
            attribute('master-interface', self.master_interface),
        )

        self.logger.info(f"Created network {ssid} on {self.master_interface}")

    def update_network(self, ssid: str, prop, new_value: str) -> None:
        """
        Rename a network or rotate its key.

        Renaming touches only the wireless interface's ssid; rotating the
        password touches only the security profile the interface points
        at, which keeps its original name after a rename.

        Args:
            ssid: Current SSID of the network
            prop: NetworkProperty or its string value ("ssid" / "password")
            new_value: New SSID or pre-shared key

        Raises:
            ValueError: Unknown property (no remote call is made)
            WirelessOperationError: Network not found or router error
        """
        prop = NetworkProperty(prop)

        if prop is NetworkProperty.SSID:
            for item_id in self._find_ids("update", ssid, WIRELESS_PATH, 'ssid'):
                self._run(
                    "update", ssid,
                    f"{WIRELESS_PATH}/set",
                    attribute('.id', item_id),
                    attribute('ssid', new_value),
                )
        else:
            for profile in self._security_profiles("update", ssid):
                for row in self._find_rows("update", ssid, SECURITY_PROFILES_PATH, 'name', profile):
                    self._run(
                        "update", ssid,
                        f"{SECURITY_PROFILES_PATH}/set",
                        attribute('.id', row['.id']),
                        attribute('wpa2-pre-shared-key', new_value),
                    )

        self.logger.info(f"Updated {prop.value} of network {ssid}")

    def remove_network(self, ssid: str) -> None:
        """
        Remove the wireless interface(s) broadcasting an SSID.

        The security profile is left on the router.
        """
        for item_id in self._find_ids("remove", ssid, WIRELESS_PATH, 'ssid'):
            self._run("remove", ssid, f"{WIRELESS_PATH}/remove", attribute('.id', item_id))

        self.logger.info(f"Removed network {ssid}")
