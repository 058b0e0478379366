"""Driver-level steps used by the command dispatcher."""

from .elements import wait_for_element, perform
from .keyboard import resolve_key
from .navigation import navigate_to_url, wait_document_ready
from .screenshots import capture_png, save_png, encode_png

__all__ = [
    "wait_for_element",
    "perform",
    "resolve_key",
    "navigate_to_url",
    "wait_document_ready",
    "capture_png",
    "save_png",
    "encode_png",
]
