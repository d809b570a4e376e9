from .config_loader import ConfigLoader, ConnectionParams, resolve_connection_params

__all__ = ['ConfigLoader', 'ConnectionParams', 'resolve_connection_params']
