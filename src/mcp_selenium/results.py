"""Command and result value types exchanged with the transport."""

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union


@dataclass(frozen=True)
class Command:
    """
    A decoded automation command.

    Attributes:
        name: Operation name, e.g. "click_element".
        args: Operation-specific arguments (read-only once dispatched).
        timeout_ms: Optional override for the element / page-load wait.
    """

    name: str
    args: Mapping[str, Any] = field(default_factory=dict)
    timeout_ms: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "args", MappingProxyType(dict(self.args or {})))

    def arg(self, key: str, default: Any = None) -> Any:
        return self.args.get(key, default)


@dataclass(frozen=True)
class Ok:
    payload: dict = field(default_factory=dict)

    ok = True

    def to_dict(self) -> dict:
        return {"ok": True, **self.payload}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)


@dataclass(frozen=True)
class Err:
    message: str
    code: str = "error"
    details: Optional[dict] = None

    ok = False

    def to_dict(self) -> dict:
        payload = {"ok": False, "error": self.message, "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)


Result = Union[Ok, Err]


__all__ = ["Command", "Ok", "Err", "Result"]
