"""
mikrotik-wifi Command Line Entry Point

Connects to one RouterOS device, runs a single wireless command, and exits.

Usage:
    mikrotik-wifi list
    mikrotik-wifi -a 10.0.0.1 -p secret create guest secret123
    mikrotik-wifi update guest password newsecret
    mikrotik-wifi remove guest

Connection flags fall back to MIKROTIK_ADDRESS, MIKROTIK_USERNAME,
MIKROTIK_PASSWORD and MIKROTIK_PORT, then to --config, then to defaults.
"""

import argparse
import logging
import sys
from typing import Mapping, Optional

import yaml
from colorama import Fore, Style, just_fix_windows_console

from mikrotik_wifi import __version__
from mikrotik_wifi.devices import ConnectionManager
from mikrotik_wifi.exceptions import RouterConnectionError, WirelessOperationError
from mikrotik_wifi.logging.logger import bind_router, configure_logging
from mikrotik_wifi.utils.config_loader import resolve_connection_params
from mikrotik_wifi.wireless import WirelessManager, NetworkProperty


def success(message: str):
    print(f"{Fore.GREEN}{message}{Style.RESET_ALL}")


def failure(message: str):
    print(f"{Fore.RED}{message}{Style.RESET_ALL}", file=sys.stderr)


def cmd_list(wireless: WirelessManager, args) -> int:
    try:
        ssids = wireless.list_networks()
    except WirelessOperationError as e:
        failure(f"Failed to list networks: {e.cause}")
        return 1

    for ssid in ssids:
        print(ssid)
    return 0


def cmd_create(wireless: WirelessManager, args) -> int:
    try:
        wireless.create_network(args.ssid, args.network_password)
    except WirelessOperationError as e:
        failure(f"Failed to create network: {e.cause}")
        return 1

    success(f"Network created successfully: {args.ssid}")
    return 0


def cmd_update(wireless: WirelessManager, args) -> int:
    try:
        wireless.update_network(args.ssid, args.property, args.new_value)
    except WirelessOperationError as e:
        failure(f"Failed to update network: {e.cause}")
        return 1

    success(f"Network updated successfully: {args.ssid}")
    return 0


def cmd_remove(wireless: WirelessManager, args) -> int:
    try:
        wireless.remove_network(args.ssid)
    except WirelessOperationError as e:
        failure(f"Failed to remove network: {e.cause}")
        return 1

    success(f"Network removed successfully: {args.ssid}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    # Connection options are accepted before or after the subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('-a', '--address', default=argparse.SUPPRESS,
                        help='Address of the RouterOS device (default: 192.168.88.1)')
    common.add_argument('-u', '--username', default=argparse.SUPPRESS,
                        help='Username for RouterOS authentication (default: admin)')
    common.add_argument('-p', '--password', default=argparse.SUPPRESS,
                        help='Password for RouterOS authentication (default: empty)')
    common.add_argument('-P', '--port', type=int, default=argparse.SUPPRESS,
                        help='Port of the RouterOS device API (default: 8728)')
    common.add_argument('--config', default=argparse.SUPPRESS,
                        help='YAML file with address/username/password/port')
    common.add_argument('--log-level', default=argparse.SUPPRESS,
                        choices=['debug', 'info', 'warning', 'error'],
                        help='Diagnostic log level (default: warning)')
    common.add_argument('--log-config', default=argparse.SUPPRESS,
                        help='YAML logging dictConfig file')

    parser = argparse.ArgumentParser(
        prog='mikrotik-wifi',
        description='MikroTik WiFi management tool',
        parents=[common]
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    subparsers.required = True

    list_parser = subparsers.add_parser('list', parents=[common], help='List all Wi-Fi networks')
    list_parser.set_defaults(handler=cmd_list)

    create_parser = subparsers.add_parser('create', parents=[common], help='Create a new Wi-Fi network')
    create_parser.add_argument('ssid')
    create_parser.add_argument('network_password', metavar='password')
    create_parser.set_defaults(handler=cmd_create)

    update_parser = subparsers.add_parser(
        'update', parents=[common],
        help="Update an existing Wi-Fi network's ssid or password"
    )
    update_parser.add_argument('ssid')
    update_parser.add_argument('property', choices=[p.value for p in NetworkProperty])
    update_parser.add_argument('new_value')
    update_parser.set_defaults(handler=cmd_update)

    remove_parser = subparsers.add_parser('remove', parents=[common], help='Remove an existing Wi-Fi network')
    remove_parser.add_argument('ssid')
    remove_parser.set_defaults(handler=cmd_remove)

    return parser


def main(argv=None, environ: Optional[Mapping[str, str]] = None) -> int:
    """
    Run one command against the router.

    Returns:
        Process exit status: 0 on success, 1 on connection or command failure
    """
    just_fix_windows_console()
    args = build_parser().parse_args(argv)

    level = getattr(args, 'log_level', None)
    configure_logging(
        getattr(args, 'log_config', None),
        level=getattr(logging, level.upper()) if level else None
    )
    logger = logging.getLogger('mikrotik_wifi.main')

    flags = {
        name: getattr(args, name, None)
        for name in ('address', 'username', 'password', 'port')
    }
    try:
        params = resolve_connection_params(flags, environ, getattr(args, 'config', None))
    except (OSError, ValueError, yaml.YAMLError) as e:
        failure(f"Invalid configuration: {e}")
        return 1

    bind_router(params.full_address)
    logger.debug(f"Resolved connection parameters: {params!r}")

    print(f"Attempting to connect to RouterOS at address: {params.full_address}", file=sys.stderr)
    manager = ConnectionManager(params)
    try:
        manager.connect()
    except RouterConnectionError as e:
        failure(f"Failed to connect to RouterOS: {e}")
        return 1

    try:
        return args.handler(WirelessManager(manager), args)
    finally:
        manager.shutdown()


def main_entry():
    sys.exit(main())


if __name__ == "__main__":
    main_entry()
