"""Launch configuration for a new browser session."""

from dataclasses import dataclass, field
from typing import List, Optional

from ..constants import CHROME_BASELINE_ARGS, FIREFOX_BASELINE_ARGS, SUPPORTED_BROWSERS
from ..config.paths import make_profile_dir
from ..errors import InvalidCommand
from .executable import find_driver_executable, resolve_browser_binary

import logging
logger = logging.getLogger(__name__)


@dataclass
class LaunchConfig:
    """Everything launch() needs to start one browser."""

    kind: str
    arguments: List[str] = field(default_factory=list)
    driver_path: Optional[str] = None
    binary_path: Optional[str] = None
    profile_dir: Optional[str] = None


def baseline_arguments(kind: str) -> List[str]:
    return list(CHROME_BASELINE_ARGS if kind == "chrome" else FIREFOX_BASELINE_ARGS)


def merge_arguments(kind: str, extra: Optional[List[str]] = None) -> List[str]:
    """
    Baseline arguments followed by the caller's extras.

    The baseline cannot be switched off: extras that repeat a baseline flag
    are dropped, everything else is appended in order.
    """
    args = baseline_arguments(kind)
    for arg in extra or ():
        if not isinstance(arg, str) or not arg.strip():
            raise InvalidCommand(f"Browser arguments must be non-empty strings, got {arg!r}")
        arg = arg.strip()
        if arg in args:
            continue
        args.append(arg)
    return args


def normalize_options(options) -> dict:
    """Accept {headless, arguments} or a bare list of extra arguments."""
    if options is None:
        return {}
    if isinstance(options, (list, tuple)):
        return {"arguments": list(options)}
    if isinstance(options, dict):
        return dict(options)
    raise InvalidCommand(f"options must be an object or a list of arguments, got {type(options).__name__}")


def build_launch_config(kind: str, options, config: dict) -> LaunchConfig:
    """
    Resolve the driver, binary, arguments and a fresh profile directory.

    The driver lookup runs first so a missing driver leaves nothing on disk.
    """
    if kind not in SUPPORTED_BROWSERS:
        raise InvalidCommand(f"Unsupported browser '{kind}'. Expected one of: {', '.join(SUPPORTED_BROWSERS)}")

    opts = normalize_options(options)
    if opts.get("headless") is False:
        logger.warning("headless=False requested; headless mode is always on for unprivileged execution")

    driver_path = find_driver_executable(kind, config)
    arguments = merge_arguments(kind, opts.get("arguments"))

    return LaunchConfig(
        kind=kind,
        arguments=arguments,
        driver_path=driver_path,
        binary_path=resolve_browser_binary(kind, config),
        profile_dir=make_profile_dir(kind, config.get("tmp_dir")),
    )


__all__ = [
    "LaunchConfig",
    "baseline_arguments",
    "merge_arguments",
    "normalize_options",
    "build_launch_config",
]
