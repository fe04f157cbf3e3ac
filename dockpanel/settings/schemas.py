"""Схема config.json по умолчанию."""

from __future__ import annotations

from typing import Any, Dict

# DEFAULT_CONFIG записывается на диск при первом запуске
DEFAULT_CONFIG: Dict[str, Any] = {
    "version": "1.0.0",
    "logging": {
        "enabled": True,
        "level": "INFO",
        "max_file_size_mb": 10,
        "max_archived_files": 5,
    },
    "docker": {
        "binary": "docker",
        "host": "",
        "check_daemon": True,
    },
    "containers": {
        "sort_column": "image",
        "sort_descending": False,
        "default_shell": "/bin/sh",
        "ls_all": True,
        "ls_filters": [],
        "ls_last": 0,
        "ls_no_trunc": False,
    },
}
