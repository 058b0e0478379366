"""Configuration management for browser automation."""

from .environment import get_env_config

from .paths import (
    make_profile_dir,
    remove_profile_dir,
)

__all__ = [
    "get_env_config",
    "make_profile_dir",
    "remove_profile_dir",
]
