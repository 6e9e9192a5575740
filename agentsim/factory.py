"""Templates from which agents of one kind are created."""

from __future__ import annotations

import pathlib
from dataclasses import dataclass
from typing import Any

from .entities import Agent
from .geometry import Path, Point


@dataclass
class AgentFactory:
    """An agent type: a shape, a program and the names that identify them."""

    shape: Path
    code_path: str | pathlib.Path
    name: str
    shape_name: str

    def create_agent(self, agent_id: int, position: Point = (0.0, 0.0)) -> Agent:
        return Agent(agent_id, self.shape, self.code_path, self.shape_name, self.name, position)

    def to_json(self) -> dict[str, Any]:
        return {self.name: {"shape_name": self.shape_name}}