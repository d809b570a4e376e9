"""
Configuration Loader

Resolves router connection parameters from command-line flags,
MIKROTIK_* environment variables and an optional YAML file.
"""

import yaml
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import logging
import os

logger = logging.getLogger(__name__)

ENV_PREFIX = "MIKROTIK_"


@dataclass(frozen=True)
class ConnectionParams:
    """Immutable connection parameters for one router"""
    address: str = "192.168.88.1"
    username: str = "admin"
    password: str = ""
    port: int = 8728
    timeout: float = 10.0
    
    @property
    def full_address(self) -> str:
        return f"{self.address}:{self.port}"
    
    def __repr__(self) -> str:
        return (
            f"ConnectionParams(address={self.address!r}, username={self.username!r}, "
            f"port={self.port}, timeout={self.timeout})"
        )


class ConfigLoader:
    """
    Load YAML configuration files.
    """
    
    @staticmethod
    def load(config_path: str, required_keys: Optional[list] = None) -> Dict[str, Any]:
        """
        Load a YAML configuration file.
        
        Args:
            config_path: Path to YAML file
            required_keys: List of keys that must be present in config
        
        Returns:
            Configuration dictionary
        
        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If required keys are missing or the file is not a mapping
            yaml.YAMLError: If YAML is invalid
        """
        path = Path(config_path)
        
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        
        with open(path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
        
        if config is None:
            config = {}
        
        if not isinstance(config, dict):
            raise ValueError(f"Configuration file must contain a mapping: {config_path}")
        
        if required_keys:
            missing = [key for key in required_keys if key not in config]
            if missing:
                raise ValueError(f"Missing required configuration keys: {missing}")
        
        return config
    

def _parse_port(value, source: str) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-integer port {value!r} from {source}")
        return None


def resolve_connection_params(
    flags: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
    config_path: Optional[str] = None
) -> ConnectionParams:
    """
    Resolve connection parameters.
    
    Precedence, highest first: explicit flag, MIKROTIK_* environment
    variable, YAML config file, built-in default. Flags set to None count
    as not given. No emptiness checks are made; an empty password is used
    as-is.
    
    Args:
        flags: Values from the command line (address, username, password, port)
        environ: Environment mapping (defaults to os.environ)
        config_path: Optional YAML file with the same keys
    
    Returns:
        Resolved ConnectionParams
    """
    flags = flags or {}
    environ = os.environ if environ is None else environ
    file_config = ConfigLoader.load(config_path) if config_path else {}
    
    resolved: Dict[str, Any] = {}
    for field in fields(ConnectionParams):
        name = field.name
        env_key = f"{ENV_PREFIX}{name.upper()}"
        
        candidates = [
            (flags.get(name), "command line"),
            (environ.get(env_key), env_key),
            (file_config.get(name), config_path),
        ]
        for value, source in candidates:
            if value is None:
                continue
            if name == "port":
                value = _parse_port(value, source)
                if value is None:
                    continue
            elif name == "timeout":
                try:
                    value = float(value)
                except (TypeError, ValueError):
                    logger.warning(f"Ignoring invalid timeout {value!r} from {source}")
                    continue
            else:
                value = str(value)
            resolved[name] = value
            break
    
    return ConnectionParams(**resolved)
