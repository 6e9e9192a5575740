# agentsim

A small model for 2D agent simulations. The world holds **shapes** (polyline
outlines), **objects** placed from those shapes and **agents** created from
agent types. On every tick each agent receives the world state, its collected
mail and the list of things it collides with, and agents answer with JSON
commands: move, set a position, set a colour, rotate, send mail to another
agent, spawn new entities, stop or delete themselves.

Projects are kept on disk as plain JSON:

```
my_project/
    project.json        # {"type": "simulator_project", "name": ..., "version": "1.0"}
    objects/<shape>.json
    agents/<agent type>.json
    python/<agent type>.py
    state.json          # every object and agent, keyed by id
```

## Installation

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## Command line

```
agentsim PATH [--new NAME] [--commands FILE] [--ticks N] [--save]
```

- `PATH` is a project folder. It must contain a `project.json` of type
  `simulator_project`, otherwise the command reports it and exits with status 1.
- `--new NAME` creates the project `PATH/NAME` (folder and `project.json`) and
  opens it.
- `--commands FILE` reads JSON commands, one per line, and applies them in
  order. Lines that are not valid JSON are retried with single quotes turned
  into double quotes and skipped if they still fail. Rejected commands
  (unknown command names, unknown agent ids) are reported on stderr.
- `--ticks N` computes N ticks and writes every agent's tick message to stdout,
  one compact JSON line per agent per tick.
- `--save` writes the project back to its folder.

Finally the current state, `{"objects": {...}, "agents": {...}}`, is printed as
one JSON line. If an agent type in the project names a shape that does not
exist, loading fails and the command exits with status 1.

## Library overview

| Module               | What it provides                                                        |
|----------------------|-------------------------------------------------------------------------|
| `agentsim.geometry`  | `Path`, `PathElement`, `ElementType`, `Rect`, `simplify_path`, `nearest_point_on_path`, `calculate_penetration` |
| `agentsim.commands`  | `CommandType`, `AgentCommand.from_json`, `UnknownCommandError`          |
| `agentsim.mail`      | `form_mail(sender, message)`                                            |
| `agentsim.entities`  | `SimObject`, `Agent`, `parse_agent_output`                              |
| `agentsim.factory`   | `AgentFactory` with `create_agent` and `to_json`                        |
| `agentsim.ticker`    | `Subject`, a periodic notifier with `subscribe`, `notify`, `start`, `stop`, `is_running` |
| `agentsim.project`   | `is_project_folder`, `create_project`, `ProjectStore`, `ProjectError`   |
| `agentsim.world`     | `Simulation`, tying everything together                                 |
| `agentsim.cli`       | `main`, the `agentsim` command                                          |

### Shapes

```python
from agentsim.geometry import Path

square = Path()
square.move_to(0, 0)
square.line_to(10, 0)
square.line_to(10, 10)
square.line_to(0, 10)
square.line_to(0, 0)

data = square.to_json()          # list of {"type", "x", "y"} elements
same = Path.from_json(data)      # only move-to (0) and line-to (1) elements are kept
print(same.bounding_rect().center())   # (5.0, 5.0)
```

`simplify_path(path, tolerance=2.0)` drops vertices that lie within
`tolerance` of the last kept vertex. `calculate_penetration(path1, path2)`
returns `(0.0, 0.0)` when the outlines do not overlap; otherwise it takes the
centre of the overlap's bounding box and returns the difference between the
vertex of `path1` and the vertex of `path2` nearest to that centre.

### Commands and mail

```python
from agentsim.commands import AgentCommand, CommandType
from agentsim.mail import form_mail

cmd = AgentCommand.from_json(
    {"command": "move", "agent_id": 1, "params": {"dx": 5, "dy": 0}}
)
assert cmd.type is CommandType.MOVE

mail = form_mail("1", "hello")   # {"sender": "1", "message": "hello"}
```

Recognised command names are `move`, `set_position`, `set_color`, `rotate`,
`message`, `spawn`, `stop` and `delete`; any other name raises
`UnknownCommandError`. Parameters used by `Simulation.apply_command`:

| Command        | Parameters                                                        |
|----------------|-------------------------------------------------------------------|
| `move`         | `dx`, `dy`                                                        |
| `set_position` | `x`, `y`                                                          |
| `set_color`    | `r`, `g`, `b`                                                     |
| `rotate`       | `angle` (added to the current rotation)                           |
| `message`      | `reciver` (target agent id), `message`                            |
| `spawn`        | `entity_type` (`"object"` or `"agent"`), `entity_name`, `entity_pos` `{x, y}` |
| `stop`         | none; removes the agent                                           |
| `delete`       | none; mails the agent `{"sender": "system", "message": "delete"}` and removes it |

### Objects and agents

`SimObject` holds an id, a shape name, its shape, a simplified outline, a
position and a rotation; `to_json()` describes it with its id, `shapeName`,
position and the shape's bounding rectangle. `Agent` adds an agent name, a
colour, a mailbox and the path of its program; `Agent.code` is that program's
text with `AGENT_ID_REPLACE` replaced by the agent's id.
`Agent.tick_payload(state, others)` empties the mailbox into the state under
`mail`, adds `collisions` against `others`, and returns the compact JSON line
for that agent.

### Simulations

```python
from agentsim.geometry import Path
from agentsim.project import create_project
from agentsim.world import Simulation

root = create_project("/tmp", "demo")
sim = Simulation(root)

square = Path().move_to(0, 0).line_to(10, 0).line_to(10, 10).line_to(0, 10).line_to(0, 0)
sim.add_shape("square", square)
sim.create_agent_type("walker", "square", "def process_tick(state): pass", "{USER_CODE}")
agent = sim.spawn_agent("walker", (0, 0))
sim.apply_command({"command": "move", "agent_id": agent.id, "params": {"dx": 5, "dy": 0}})
print(sim.current_state()["agents"][str(agent.id)]["position"])   # {'x': 5.0, 'y': 0.0}
sim.save()
```

A `Simulation` keeps the shapes, agent types, objects and agents of one
project folder. When it is created it makes any missing `objects`, `agents`
and `python` folders; if they all existed already it loads the project.
`create_agent_type` writes `python/<name>.py` from a template in which
`{USER_CODE}` is replaced by the given code. `spawn_agent` returns `None` for
an unknown agent type; `spawn_object` raises `KeyError` for an unknown shape.
`save()` and `load()` write and read the project folder, and `clear()` forgets
everything in memory.

`start(interval)` and `stop()` run a `Subject` that ticks every `interval`
milliseconds (100 by default) on a background thread. On each tick every
agent's tick message is passed to the `sink(agent_id, line)` callable given to
`Simulation`, or logged at debug level when there is none.

## What this package does not do

- It does not run agent programs. The programs are written to and read from
  the project's `python` folder, and tick messages are produced for them, but
  nothing executes them; replies must be fed to `Simulation.apply_command` (or
  given to the command line with `--commands`).
- It has no graphical editor or view: shapes are built in code with `Path`,
  and the world is inspected through `current_state()`.