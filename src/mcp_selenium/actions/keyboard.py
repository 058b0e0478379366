"""Keyboard key resolution."""

from selenium.webdriver.common.keys import Keys

from ..errors import InvalidCommand


_ALIASES = {
    "ESC": "ESCAPE",
    "DEL": "DELETE",
    "CTRL": "CONTROL",
    "CMD": "COMMAND",
    "ARROWUP": "ARROW_UP",
    "ARROWDOWN": "ARROW_DOWN",
    "ARROWLEFT": "ARROW_LEFT",
    "ARROWRIGHT": "ARROW_RIGHT",
    "PAGEUP": "PAGE_UP",
    "PAGEDOWN": "PAGE_DOWN",
}


def resolve_key(key: str) -> str:
    """
    Translate a key name ('Enter', 'Tab', 'ArrowUp', 'a') into what Selenium sends.

    Single characters are sent as-is; longer names must match a Keys constant.
    """
    if not isinstance(key, str) or not key:
        raise InvalidCommand("key must be a non-empty string")
    if len(key) == 1:
        return key

    name = key.strip().upper().replace(" ", "_").replace("-", "_")
    name = _ALIASES.get(name.replace("_", ""), name)
    value = getattr(Keys, name, None)
    if isinstance(value, str):
        return value
    raise InvalidCommand(f"Unknown key: {key}")


__all__ = ["resolve_key"]
