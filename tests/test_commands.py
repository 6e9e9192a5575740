import pytest

from agentsim.commands import AgentCommand, CommandType, UnknownCommandError


@pytest.mark.parametrize(
    "name, kind",
    [
        ("move", CommandType.MOVE),
        ("set_position", CommandType.SET_POSITION),
        ("set_color", CommandType.SET_COLOR),
        ("rotate", CommandType.ROTATE),
        ("message", CommandType.MESSAGE),
        ("spawn", CommandType.SPAWN),
        ("stop", CommandType.STOP),
        ("delete", CommandType.DELETE),
    ],
)
def test_recognised_commands(name, kind):
    cmd = AgentCommand.from_json({"command": name, "agent_id": 4, "params": {"dx": 1}})
    assert cmd.type is kind
    assert cmd.agent_id == 4
    assert cmd.params == {"dx": 1}


def test_missing_params_gives_empty_dict():
    cmd = AgentCommand.from_json({"command": "stop", "agent_id": 2})
    assert cmd.params == {}


def test_integral_float_id_accepted():
    cmd = AgentCommand.from_json({"command": "move", "agent_id": 7.0})
    assert cmd.agent_id == 7


def test_non_integral_id_becomes_zero():
    cmd = AgentCommand.from_json({"command": "move", "agent_id": "x"})
    assert cmd.agent_id == 0


@pytest.mark.parametrize("data", [{"command": "fly"}, {}, {"command": "set_shape"}])
def test_unknown_command_raises(data):
    with pytest.raises(UnknownCommandError):
        AgentCommand.from_json(data)