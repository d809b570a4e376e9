"""
Wireless Module

Domain operations on the router's wireless networks.
"""

from .networks import WirelessManager, NetworkProperty

__all__ = ['WirelessManager', 'NetworkProperty']
