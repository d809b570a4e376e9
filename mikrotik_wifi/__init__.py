"""
mikrotik-wifi: MikroTik RouterOS wireless network management

Command-line client that lists, creates, updates and removes wireless
networks on a RouterOS device over its binary management API.
"""

from .__version__ import __version__

__all__ = [
    '__version__',
    'adapters',
    'devices',
    'wireless',
    'logging',
    'utils'
]
