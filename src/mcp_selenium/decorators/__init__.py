# mcp_selenium/decorators/__init__.py

from .envelope import command_envelope, error_result

__all__ = [
    "command_envelope",
    "error_result",
]
