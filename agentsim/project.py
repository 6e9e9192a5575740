"""Project folders: their metadata and the files a simulation is saved in."""

from __future__ import annotations

import json
import logging
import pathlib
from typing import Any, Mapping

from .factory import AgentFactory
from .geometry import Path

log = logging.getLogger(__name__)

PROJECT_FILE = "project.json"
PROJECT_TYPE = "simulator_project"
PROJECT_VERSION = "1.0"
STATE_FILE = "state.json"


class ProjectError(Exception):
    """Raised when a project's files are inconsistent."""


def _read_json(path: pathlib.Path) -> Any:
    """Parse a JSON file; ``None`` when it cannot be read or parsed."""
    try:
        text = path.read_bytes()
    except OSError as error:
        log.debug("failed to open %s: %s", path, error)
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


def _write_json(path: pathlib.Path, data: Any) -> None:
    path.write_text(json.dumps(data, indent=4, ensure_ascii=False) + "\n", encoding="utf-8")


def is_project_folder(path: str | pathlib.Path) -> bool:
    """True when ``path`` holds project metadata of the simulator type."""
    meta = _read_json(pathlib.Path(path) / PROJECT_FILE)
    return isinstance(meta, dict) and meta.get("type") == PROJECT_TYPE


def create_project(parent: str | pathlib.Path, name: str) -> pathlib.Path:
    """Create the folder ``parent/name`` with its metadata file and return it."""
    if not name:
        raise ValueError("project name must not be empty")
    root = pathlib.Path(parent) / name
    root.mkdir(parents=True, exist_ok=True)
    meta = {"type": PROJECT_TYPE, "name": name, "version": PROJECT_VERSION}
    _write_json(root / PROJECT_FILE, meta)
    return root


class ProjectStore:
    """Reads and writes the shapes, agent types and state kept in a project folder."""

    def __init__(self, root: str | pathlib.Path):
        self.root = pathlib.Path(root)

    @property
    def objects_dir(self) -> pathlib.Path:
        return self.root / "objects"

    @property
    def agents_dir(self) -> pathlib.Path:
        return self.root / "agents"

    @property
    def python_dir(self) -> pathlib.Path:
        return self.root / "python"

    @property
    def state_file(self) -> pathlib.Path:
        return self.root / STATE_FILE

    def ensure_layout(self) -> bool:
        """Create any missing sub-folders; True if all of them already existed."""
        folders = (self.objects_dir, self.agents_dir, self.python_dir)
        complete = all(folder.is_dir() for folder in folders)
        for folder in folders:
            folder.mkdir(parents=True, exist_ok=True)
        return complete

    def save(
        self,
        shapes: Mapping[str, Path],
        factories: Mapping[str, AgentFactory],
        state: Mapping[str, Any],
    ) -> None:
        """Write every shape, every agent type and the simulation state."""
        log.debug("saving project to %s", self.root)
        self.ensure_layout()
        for name, shape in shapes.items():
            _write_json(self.objects_dir / f"{name}.json", shape.to_json())
        for name, factory in factories.items():
            _write_json(self.agents_dir / f"{name}.json", factory.to_json())
        _write_json(self.state_file, dict(state))

    def _json_files(self, folder: pathlib.Path) -> list[pathlib.Path]:
        if not folder.is_dir():
            return []
        return sorted(entry for entry in folder.glob("*.json") if entry.is_file())

    def load_shapes(self) -> dict[str, Path]:
        """Read the stored shapes, keyed by file name without its extension."""
        shapes: dict[str, Path] = {}
        for file in self._json_files(self.objects_dir):
            data = _read_json(file)
            shapes[file.stem] = Path.from_json(data if isinstance(data, list) else [])
        return shapes

    def load_factories(self, shapes: Mapping[str, Path]) -> dict[str, AgentFactory]:
        """Read the stored agent types, resolving their shapes in ``shapes``."""
        factories: dict[str, AgentFactory] = {}
        for file in self._json_files(self.agents_dir):
            name = file.stem
            data = _read_json(file)
            entry = data.get(name) if isinstance(data, dict) else None
            shape_name = entry.get("shape_name", "") if isinstance(entry, dict) else ""
            if not isinstance(shape_name, str):
                shape_name = ""
            try:
                shape = shapes[shape_name]
            except KeyError:
                raise ProjectError(
                    f"agent type {name!r} refers to unknown shape {shape_name!r}"
                ) from None
            code_path = (self.python_dir / f"{name}.py").resolve()
            factories[name] = AgentFactory(shape, code_path, name, shape_name)
        return factories

    def load_state(self) -> dict[str, dict[str, Any]]:
        """Read the saved objects and agents; both empty if nothing was saved."""
        data = _read_json(self.state_file)
        if not isinstance(data, dict):
            data = {}
        result: dict[str, dict[str, Any]] = {}
        for key in ("objects", "agents"):
            section = data.get(key)
            result[key] = section if isinstance(section, dict) else {}
        return result