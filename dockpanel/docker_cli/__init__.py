"""Ядро: сборка команд docker CLI, разбор вывода и выбор контейнеров."""

from dockpanel.docker_cli.builder import build, listing_command
from dockpanel.docker_cli.exceptions import (
    DaemonUnavailableError,
    DockPanelError,
    EmptySelectionError,
    ExternalCommandError,
    InvalidOptionsError,
    InvalidTimestampError,
    MalformedListingError,
    NoTargetError,
    UnknownActionError,
)
from dockpanel.docker_cli.models import Action, BuiltCommand, ContainerRow
from dockpanel.docker_cli.parser import parse_listing
from dockpanel.docker_cli.selection import resolve

__all__ = [
    "Action",
    "BuiltCommand",
    "ContainerRow",
    "DaemonUnavailableError",
    "DockPanelError",
    "EmptySelectionError",
    "ExternalCommandError",
    "InvalidOptionsError",
    "InvalidTimestampError",
    "MalformedListingError",
    "NoTargetError",
    "UnknownActionError",
    "build",
    "listing_command",
    "parse_listing",
    "resolve",
]
