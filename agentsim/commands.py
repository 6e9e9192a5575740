"""Commands that agent programs send back to the simulation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class CommandType(Enum):
    MOVE = "move"
    SET_POSITION = "set_position"
    SET_COLOR = "set_color"
    SET_SHAPE = "set_shape"
    SPAWN = "spawn"
    STOP = "stop"
    MESSAGE = "message"
    ROTATE = "rotate"
    DELETE = "delete"


_RECOGNISED = {
    "move": CommandType.MOVE,
    "set_position": CommandType.SET_POSITION,
    "set_color": CommandType.SET_COLOR,
    "rotate": CommandType.ROTATE,
    "message": CommandType.MESSAGE,
    "spawn": CommandType.SPAWN,
    "stop": CommandType.STOP,
    "delete": CommandType.DELETE,
}


class UnknownCommandError(ValueError):
    """Raised when a command name is not recognised."""


def _json_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return 0


@dataclass
class AgentCommand:
    type: CommandType
    agent_id: int
    params: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "AgentCommand":
        name = data.get("command")
        try:
            kind = _RECOGNISED[name]
        except (KeyError, TypeError):
            raise UnknownCommandError(f"unrecognised command: {data!r}") from None
        params = data.get("params")
        return cls(
            type=kind,
            agent_id=_json_int(data.get("agent_id")),
            params=dict(params) if isinstance(params, dict) else {},
        )