"""Locator strategy resolution."""

from dataclasses import dataclass
from typing import Tuple

from selenium.webdriver.common.by import By

from .errors import InvalidLocatorValue, UnsupportedStrategy


_STRATEGIES = {
    "id": By.ID,
    "css": By.CSS_SELECTOR,
    "xpath": By.XPATH,
    "name": By.NAME,
    "tag": By.TAG_NAME,
    "class": By.CLASS_NAME,
}

SUPPORTED_STRATEGIES = tuple(_STRATEGIES)


@dataclass(frozen=True)
class Locator:
    """A (strategy, value) pair identifying a page element."""

    strategy: str
    value: str

    def query(self) -> Tuple[str, str]:
        return resolve(self.strategy, self.value)

    def __str__(self) -> str:
        return f"{self.strategy}={self.value!r}"


def get_by_selector(strategy: str) -> str:
    """Map a strategy name (case-insensitive) to Selenium's By constant."""
    if not isinstance(strategy, str):
        raise UnsupportedStrategy(strategy)
    by = _STRATEGIES.get(strategy.lower())
    if by is None:
        raise UnsupportedStrategy(strategy)
    return by


def resolve(strategy: str, value: str) -> Tuple[str, str]:
    """
    Build a Selenium query tuple from a (strategy, value) pair.

    Raises:
        UnsupportedStrategy: strategy is not one of id, css, xpath, name, tag, class.
        InvalidLocatorValue: value is empty or not a string.
    """
    by = get_by_selector(strategy)
    if not isinstance(value, str) or not value:
        raise InvalidLocatorValue(f"Locator value for strategy '{strategy}' must be a non-empty string")
    return by, value


__all__ = ["Locator", "SUPPORTED_STRATEGIES", "get_by_selector", "resolve"]
