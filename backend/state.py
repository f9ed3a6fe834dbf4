from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional

from .restaurants import ResultSet


class ActionKind(str, Enum):
    NONE = "None"
    SET_LOCATION = "SetLocation"
    FIND_RESTAURANT = "FindRestaurant"
    READ_LIST = "ReadList"
    DETAILS = "Details"
    # Only reported for the turn that hit it, never stored
    BACK_LIMIT = "BackLimit"


@dataclass(frozen=True)
class LastAction:
    """What the previous turn did. ``value`` carries the ReadList start or Details position."""

    kind: ActionKind = ActionKind.NONE
    value: Optional[int] = None

    @classmethod
    def none(cls) -> "LastAction":
        return cls()

    @classmethod
    def set_location(cls) -> "LastAction":
        return cls(ActionKind.SET_LOCATION)

    @classmethod
    def find_restaurant(cls) -> "LastAction":
        return cls(ActionKind.FIND_RESTAURANT)

    @classmethod
    def read_list(cls, at: int) -> "LastAction":
        return cls(ActionKind.READ_LIST, at)

    @classmethod
    def details(cls, position: int) -> "LastAction":
        return cls(ActionKind.DETAILS, position)

    @classmethod
    def back_limit(cls) -> "LastAction":
        return cls(ActionKind.BACK_LIMIT)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "value": self.value}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "LastAction":
        if not isinstance(data, dict):
            return cls()
        try:
            kind = ActionKind(data.get("kind") or ActionKind.NONE.value)
        except ValueError:
            return cls()
        if kind == ActionKind.BACK_LIMIT:
            return cls()
        value = data.get("value")
        return cls(kind, int(value) if value is not None else None)

    def __str__(self) -> str:
        if self.value is None:
            return self.kind.value
        return f"{self.kind.value}({self.value})"


@dataclass
class UserState:
    """Per-user record persisted between turns."""

    location: Optional[str] = None
    last_action: LastAction = field(default_factory=LastAction)
    results: Optional[ResultSet] = None

    def copy(self) -> "UserState":
        results = replace(self.results) if self.results is not None else None
        return UserState(location=self.location, last_action=self.last_action, results=results)

    def to_dict(self) -> Dict[str, Any]:
        last_action = self.last_action
        if last_action.kind == ActionKind.BACK_LIMIT:
            last_action = LastAction()
        return {
            "location": self.location,
            "lastAction": last_action.to_dict(),
            "lastResponse": self.results.to_dict() if self.results is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "UserState":
        data = data or {}
        location = data.get("location")
        return cls(
            location=str(location) if location else None,
            last_action=LastAction.from_dict(data.get("lastAction")),
            results=ResultSet.from_dict(data.get("lastResponse")),
        )


__all__ = ["ActionKind", "LastAction", "UserState"]
