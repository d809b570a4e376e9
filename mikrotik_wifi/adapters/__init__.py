"""
Router Adapters Module

Transport adapters for the router management API.

Usage:
    from mikrotik_wifi.adapters import RouterOSAdapter, query

    adapter = RouterOSAdapter()
    adapter.connect(params)
    rows = adapter.run('/interface/wireless/print', query('ssid', 'guest'))
"""

from .base_adapter import RouterAdapter, attribute, query
from .routeros_adapter import RouterOSAdapter

__all__ = [
    'RouterAdapter',
    'RouterOSAdapter',
    'attribute',
    'query'
]
