"""
Structured Logging

Diagnostics from every mikrotik_wifi module go through the package logger
and come out as one JSON object per line on stderr, tagged with the router
being managed. User-facing results are printed by the CLI, not logged.
"""

import json
import logging
import logging.config
import os
from datetime import datetime, timezone
from typing import Optional

import yaml

PACKAGE_LOGGER = "mikrotik_wifi"
DEFAULT_LEVEL = logging.WARNING


class StructuredFormatter(logging.Formatter):
    """One JSON object per record"""

    def __init__(self, router_id: str = "-"):
        super().__init__()
        self.router_id = router_id

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "router": self.router_id,
            "logger": record.name,
            "thread": record.threadName,
            "msg": record.getMessage(),
            "where": f"{record.module}:{record.lineno}",
        }

        # logger.info("...", extra={'extra_fields': {'ssid': 'guest'}})
        entry.update(getattr(record, 'extra_fields', {}))

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def _load_dict_config(config_path: str) -> None:
    with open(config_path, "r", encoding="utf-8") as handle:
        config = yaml.safe_load(handle)

    if not isinstance(config, dict):
        raise ValueError("logging config must be a mapping")

    for handler in config.get("handlers", {}).values():
        directory = os.path.dirname(handler.get("filename", ""))
        if directory:
            os.makedirs(directory, exist_ok=True)

    logging.config.dictConfig(config)


def configure_logging(
    config_path: Optional[str] = None,
    level: Optional[int] = None,
    router_id: str = "-"
) -> bool:
    """
    Set up the package logger.

    A YAML dictConfig file is applied first when given. The package logger
    always ends up with at least one StructuredFormatter handler. An explicit
    level overrides whatever the file set; without one, a file's level is
    kept and the fallback is WARNING.

    Args:
        config_path: Optional YAML logging config
        level: Level from the command line, or None
        router_id: Address shown in every entry

    Returns:
        True if the YAML config was applied
    """
    loaded = False
    problem = None
    if config_path:
        try:
            _load_dict_config(config_path)
            loaded = True
        except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
            problem = e

    package = logging.getLogger(PACKAGE_LOGGER)
    if not package.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(StructuredFormatter())
        package.addHandler(handler)
        package.propagate = False

    if level is not None:
        package.setLevel(level)
    elif not loaded:
        package.setLevel(DEFAULT_LEVEL)

    bind_router(router_id)

    if problem is not None:
        package.warning(f"Ignoring logging config {config_path}: {problem}")
    return loaded


def bind_router(router_id: str) -> None:
    """Tag entries from the package logger's handlers with router_id"""
    for handler in logging.getLogger(PACKAGE_LOGGER).handlers:
        if isinstance(handler.formatter, StructuredFormatter):
            handler.formatter.router_id = router_id
