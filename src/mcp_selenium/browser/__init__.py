"""Browser driver launch and handles."""

from .base import DriverHandle
from .driver import SeleniumDriverHandle, launch
from .executable import find_driver_executable, resolve_browser_binary
from .options import LaunchConfig, build_launch_config

__all__ = [
    "DriverHandle",
    "SeleniumDriverHandle",
    "launch",
    "find_driver_executable",
    "resolve_browser_binary",
    "LaunchConfig",
    "build_launch_config",
]
