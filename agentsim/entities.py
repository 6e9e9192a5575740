"""Objects and agents placed in the simulation world."""

from __future__ import annotations

import json
import logging
import math
import pathlib
from typing import Any, Iterable

from .geometry import Path, Point, calculate_penetration, simplify_path

log = logging.getLogger(__name__)

AGENT_ID_PLACEHOLDER = "AGENT_ID_REPLACE"


class SimObject:
    """A shaped object standing at a position in the world."""

    def __init__(self, object_id: int, name: str, shape: Path, position: Point = (0.0, 0.0)):
        self.id = object_id
        self.name = name
        self.shape = shape
        self.simple_shape = simplify_path(shape)
        self.position: Point = (float(position[0]), float(position[1]))
        self.rotation = 0.0

    def world_shape(self) -> Path:
        """The simplified outline moved to the object's position."""
        return self.simple_shape.translated(*self.position)

    def to_json(self) -> dict[str, Any]:
        rect = self.shape.bounding_rect()
        return {
            "id": self.id,
            "shapeName": self.name,
            "position": {"x": self.position[0], "y": self.position[1]},
            "shape": {
                "bounding_rect": {
                    "left": rect.left,
                    "top": rect.top,
                    "right": rect.right,
                    "bottom": rect.bottom,
                }
            },
        }


class Agent(SimObject):
    """An object driven by a program that reacts to simulation ticks."""

    def __init__(
        self,
        agent_id: int,
        shape: Path,
        code_path: str | pathlib.Path,
        shape_name: str,
        name: str = "agent",
        position: Point = (0.0, 0.0),
    ):
        super().__init__(agent_id, shape_name, shape, position)
        self.agent_name = name
        self.code_path = pathlib.Path(code_path)
        self.color: tuple[int, int, int] = (0, 0, 0)
        self.mailbox: list[dict[str, Any]] = []

    @property
    def code(self) -> str:
        """The agent's program with its id filled in; empty if unreadable."""
        try:
            text = self.code_path.read_text(encoding="utf-8")
        except OSError:
            return ""
        return text.replace(AGENT_ID_PLACEHOLDER, str(self.id))

    def send_message(self, message: dict[str, Any]) -> None:
        self.mailbox.append(message)

    def collect_mail(self) -> list[dict[str, Any]]:
        mail, self.mailbox = self.mailbox, []
        return mail

    def to_json(self) -> dict[str, Any]:
        data = super().to_json()
        data["is_agent"] = True
        data["id"] = self.id
        data["agent_name"] = self.agent_name
        red, green, blue = self.color
        data["color"] = {"r": red, "g": green, "b": blue}
        return data

    def collisions(self, others: Iterable[SimObject]) -> list[dict[str, Any]]:
        """Describe every other object overlapping this agent."""
        own = self.world_shape()
        found = []
        for other in others:
            if other is self:
                continue
            dx, dy = calculate_penetration(own, other.world_shape())
            length = math.hypot(dx, dy)
            if length <= 0:
                continue
            found.append(
                {
                    "penetration": {"x": dx, "y": dy, "length": length},
                    "type": "agent" if isinstance(other, Agent) else "object",
                }
            )
        return found

    def tick_payload(self, state: dict[str, Any], others: Iterable[SimObject]) -> str:
        """The compact JSON line sent to the agent program on a tick."""
        if not state:
            raise ValueError("empty simulation state")
        payload = dict(state)
        payload["mail"] = self.collect_mail()
        payload["collisions"] = self.collisions(others)
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False) + "\n"


def parse_agent_output(text: str) -> list[dict[str, Any]]:
    """Parse the JSON commands an agent program wrote, one per line.

    Lines that fail to parse are retried with single quotes turned into double
    quotes, and skipped if they still fail.
    """
    commands = []
    for line in text.splitlines():
        for candidate in (line, line.replace("'", '"')):
            try:
                document = json.loads(candidate)
            except ValueError:
                continue
            commands.append(document if isinstance(document, dict) else {})
            break
        else:
            log.debug("invalid JSON from agent: %r", line)
    return commands