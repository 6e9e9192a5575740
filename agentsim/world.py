"""The simulation world: shapes, agent types, the entities placed and the commands they send."""

from __future__ import annotations

import logging
import pathlib
import threading
from typing import Any, Callable

from .commands import AgentCommand, CommandType
from .entities import Agent, SimObject
from .factory import AgentFactory
from .geometry import Path, Point
from .mail import form_mail
from .project import ProjectStore
from .ticker import DEFAULT_INTERVAL_MS, Subject

log = logging.getLogger(__name__)

USER_CODE_PLACEHOLDER = "{USER_CODE}"

TickSink = Callable[[int, str], None]


def _number(value: Any) -> float:
    if isinstance(value, (bool, int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0.0
    return 0.0


def _integer(value: Any) -> int:
    return int(round(_number(value)))


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _position(value: Any) -> Point:
    data = _mapping(value)
    return (_number(data.get("x")), _number(data.get("y")))


class Simulation:
    """Everything placed in one project, driven by periodic ticks."""

    def __init__(self, project_path: str | pathlib.Path, sink: TickSink | None = None):
        self.store = ProjectStore(project_path)
        self.shapes: dict[str, Path] = {}
        self.factories: dict[str, AgentFactory] = {}
        self.objects: dict[int, SimObject] = {}
        self.agents: dict[int, Agent] = {}
        self._next_object_id = 0
        self._next_agent_id = 0
        self._lock = threading.RLock()
        self._sink = sink
        self.running = False
        self.subject = Subject()
        self.subject.subscribe(self._on_tick)
        if self.store.ensure_layout():
            self.load()

    @property
    def project_path(self) -> pathlib.Path:
        return self.store.root

    def _object_id(self) -> int:
        value = self._next_object_id
        self._next_object_id += 1
        return value

    def _agent_id(self) -> int:
        value = self._next_agent_id
        self._next_agent_id += 1
        return value

    def add_shape(self, name: str, path: Path) -> None:
        """Register a drawn shape under ``name``; empty shapes are rejected."""
        if path.is_empty():
            raise ValueError(f"shape {name!r} is empty")
        with self._lock:
            self.shapes[name] = path

    def create_agent_type(self, name: str, shape_name: str, code: str, template: str) -> AgentFactory:
        """Write the agent's program from ``template`` and register its type."""
        with self._lock:
            try:
                shape = self.shapes[shape_name]
            except KeyError:
                raise KeyError(f"unknown shape: {shape_name!r}") from None
            self.store.python_dir.mkdir(parents=True, exist_ok=True)
            code_path = self.store.python_dir / f"{name}.py"
            code_path.write_text(template.replace(USER_CODE_PLACEHOLDER, code), encoding="utf-8")
            factory = AgentFactory(shape, code_path, name, shape_name)
            self.factories[name] = factory
            return factory

    def spawn_object(self, name: str, position: Point = (0.0, 0.0)) -> SimObject:
        """Place a new object of shape ``name`` at ``position``."""
        with self._lock:
            try:
                shape = self.shapes[name]
            except KeyError:
                raise KeyError(f"unknown shape: {name!r}") from None
            object_id = self._object_id()
            placed = SimObject(object_id, name, shape, position)
            self.objects[object_id] = placed
            return placed

    def spawn_agent(self, name: str, position: Point = (0.0, 0.0)) -> Agent | None:
        """Place a new agent of type ``name``; ``None`` if there is no such type."""
        with self._lock:
            agent_id = self._agent_id()
            factory = self.factories.get(name)
            if factory is None:
                log.debug("no agent type named %r", name)
                return None
            agent = factory.create_agent(agent_id, position)
            self.agents[agent_id] = agent
            return agent

    def _agent(self, agent_id: int) -> Agent:
        try:
            return self.agents[agent_id]
        except KeyError:
            raise KeyError(f"no agent with id {agent_id}") from None

    def apply_command(self, data: dict[str, Any]) -> AgentCommand:
        """Carry out one command sent by an agent program and return it parsed."""
        command = AgentCommand.from_json(data)
        params = command.params
        with self._lock:
            kind = command.type
            if kind is CommandType.MOVE:
                agent = self._agent(command.agent_id)
                x, y = agent.position
                agent.position = (x + _number(params.get("dx")), y + _number(params.get("dy")))
            elif kind is CommandType.SET_POSITION:
                agent = self._agent(command.agent_id)
                agent.position = (_number(params.get("x")), _number(params.get("y")))
            elif kind is CommandType.SET_COLOR:
                agent = self._agent(command.agent_id)
                agent.color = (
                    _integer(params.get("r")),
                    _integer(params.get("g")),
                    _integer(params.get("b")),
                )
            elif kind is CommandType.SPAWN:
                position = _position(params.get("entity_pos"))
                entity_type = _text(params.get("entity_type"))
                entity_name = _text(params.get("entity_name"))
                if entity_type == "object":
                    self.spawn_object(entity_name, position)
                elif entity_type == "agent":
                    self.spawn_agent(entity_name, position)
            elif kind is CommandType.ROTATE:
                agent = self._agent(command.agent_id)
                agent.rotation += _number(params.get("angle"))
            elif kind is CommandType.MESSAGE:
                mail = form_mail(str(command.agent_id), _text(params.get("message")))
                self._agent(_integer(params.get("reciver"))).send_message(mail)
            elif kind is CommandType.STOP:
                self.agents.pop(command.agent_id, None)
            elif kind is CommandType.DELETE:
                agent = self._agent(command.agent_id)
                agent.send_message(form_mail("system", "delete"))
                del self.agents[command.agent_id]
        return command

    def current_state(self) -> dict[str, dict[str, Any]]:
        """Every object and agent described, keyed by id."""
        with self._lock:
            return {
                "objects": {str(key): value.to_json() for key, value in self.objects.items()},
                "agents": {str(key): value.to_json() for key, value in self.agents.items()},
            }

    def tick_payloads(self) -> dict[int, str]:
        """The line each agent program receives on a tick, keyed by agent id."""
        with self._lock:
            state = self.current_state()
            everything = [*self.objects.values(), *self.agents.values()]
            return {
                agent_id: agent.tick_payload(state, everything)
                for agent_id, agent in list(self.agents.items())
            }

    def _on_tick(self) -> None:
        for agent_id, payload in self.tick_payloads().items():
            if self._sink is None:
                log.debug("tick for agent %d: %s", agent_id, payload.rstrip())
            else:
                self._sink(agent_id, payload)

    def save(self) -> None:
        with self._lock:
            self.store.save(self.shapes, self.factories, self.current_state())

    def load(self) -> None:
        """Replace everything with what is stored in the project folder."""
        with self._lock:
            self.clear()
            self.shapes = self.store.load_shapes()
            self.factories = self.store.load_factories(self.shapes)
            state = self.store.load_state()

            max_id = 0
            for key, value in state["objects"].items():
                object_id = _integer(key) if key.lstrip("-").isdigit() else 0
                entry = _mapping(value)
                shape_name = _text(entry.get("shapeName"))
                shape = self.shapes.get(shape_name, Path())
                self.objects[object_id] = SimObject(
                    object_id, shape_name, shape, _position(entry.get("position"))
                )
                max_id = max(max_id, object_id)
            self._next_object_id = max_id + 1

            max_id = 0
            for key, value in state["agents"].items():
                agent_id = _integer(key) if key.lstrip("-").isdigit() else 0
                entry = _mapping(value)
                factory = self.factories.get(_text(entry.get("agent_name")))
                if factory is not None:
                    self.agents[agent_id] = factory.create_agent(
                        agent_id, _position(entry.get("position"))
                    )
                max_id = max(max_id, agent_id)
            self._next_agent_id = max_id + 1

    def clear(self) -> None:
        with self._lock:
            self.agents.clear()
            self.objects.clear()
            self.shapes.clear()
            self.factories.clear()

    def start(self, interval: int = DEFAULT_INTERVAL_MS) -> None:
        if self.running:
            return
        self.running = True
        self.subject.start(interval)

    def stop(self) -> None:
        if not self.running:
            return
        self.running = False
        self.subject.stop()