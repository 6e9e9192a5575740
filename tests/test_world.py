import json
import threading

import pytest

from agentsim.commands import UnknownCommandError
from agentsim.geometry import Path
from agentsim.project import create_project
from agentsim.world import Simulation

TEMPLATE = "# agent AGENT_ID_REPLACE\n{USER_CODE}\n"


def square(size=10.0):
    return (
        Path()
        .move_to(0, 0)
        .line_to(size, 0)
        .line_to(size, size)
        .line_to(0, size)
        .line_to(0, 0)
    )


@pytest.fixture
def project(tmp_path):
    return create_project(tmp_path, "demo")


@pytest.fixture
def sim(project):
    simulation = Simulation(project)
    simulation.add_shape("box", square())
    simulation.create_agent_type("walker", "box", "def process_tick(state): pass", TEMPLATE)
    return simulation


def test_new_project_gets_layout(project):
    Simulation(project)
    assert (project / "objects").is_dir()
    assert (project / "agents").is_dir()
    assert (project / "python").is_dir()


def test_add_shape_rejects_empty(project):
    simulation = Simulation(project)
    with pytest.raises(ValueError):
        simulation.add_shape("nothing", Path())
    assert simulation.shapes == {}


def test_create_agent_type_writes_program(sim, project):
    written = (project / "python" / "walker.py").read_text(encoding="utf-8")
    assert written == "# agent AGENT_ID_REPLACE\ndef process_tick(state): pass\n"
    assert sim.factories["walker"].shape_name == "box"


def test_create_agent_type_unknown_shape(sim):
    with pytest.raises(KeyError):
        sim.create_agent_type("ghost", "missing", "", TEMPLATE)


def test_agent_code_has_id_filled_in(sim):
    agent = sim.spawn_agent("walker")
    assert f"# agent {agent.id}" in agent.code


def test_spawn_object_ids_are_consecutive(sim):
    first = sim.spawn_object("box", (1.0, 2.0))
    second = sim.spawn_object("box")
    assert second.id == first.id + 1
    assert sim.objects[first.id].position == (1.0, 2.0)


def test_spawn_object_unknown_shape(sim):
    with pytest.raises(KeyError):
        sim.spawn_object("missing")


def test_spawn_agent_unknown_type(sim):
    assert sim.spawn_agent("missing") is None
    assert sim.agents == {}


def test_move_command(sim):
    agent = sim.spawn_agent("walker", (1.0, 1.0))
    sim.apply_command({"command": "move", "agent_id": agent.id, "params": {"dx": 2, "dy": -1}})
    assert agent.position == (3.0, 0.0)


def test_set_position_and_color(sim):
    agent = sim.spawn_agent("walker")
    sim.apply_command({"command": "set_position", "agent_id": agent.id, "params": {"x": 7, "y": 8}})
    sim.apply_command({"command": "set_color", "agent_id": agent.id, "params": {"r": 10, "g": 20, "b": 30}})
    assert agent.position == (7.0, 8.0)
    assert agent.to_json()["color"] == {"r": 10, "g": 20, "b": 30}


def test_rotate_accumulates(sim):
    agent = sim.spawn_agent("walker")
    for _ in range(2):
        sim.apply_command({"command": "rotate", "agent_id": agent.id, "params": {"angle": 15}})
    assert agent.rotation == 30.0


def test_message_delivered(sim):
    sender = sim.spawn_agent("walker")
    receiver = sim.spawn_agent("walker")
    sim.apply_command(
        {"command": "message", "agent_id": sender.id, "params": {"reciver": receiver.id, "message": "hi"}}
    )
    assert receiver.collect_mail() == [{"sender": str(sender.id), "message": "hi"}]


def test_stop_removes_agent(sim):
    agent = sim.spawn_agent("walker")
    sim.apply_command({"command": "stop", "agent_id": agent.id})
    assert agent.id not in sim.agents


def test_delete_mails_agent_then_removes(sim):
    agent = sim.spawn_agent("walker")
    sim.apply_command({"command": "delete", "agent_id": agent.id})
    assert agent.id not in sim.agents
    assert agent.collect_mail() == [{"sender": "system", "message": "delete"}]


def test_spawn_commands(sim):
    sim.apply_command(
        {
            "command": "spawn",
            "agent_id": 0,
            "params": {"entity_type": "object", "entity_name": "box", "entity_pos": {"x": 4, "y": 5}},
        }
    )
    sim.apply_command(
        {
            "command": "spawn",
            "agent_id": 0,
            "params": {"entity_type": "agent", "entity_name": "walker", "entity_pos": {"x": 6, "y": 9}},
        }
    )
    assert [o.position for o in sim.objects.values()] == [(4.0, 5.0)]
    assert [a.position for a in sim.agents.values()] == [(6.0, 9.0)]


def test_unknown_command(sim):
    with pytest.raises(UnknownCommandError):
        sim.apply_command({"command": "fly", "agent_id": 0})


def test_command_for_missing_agent(sim):
    with pytest.raises(KeyError):
        sim.apply_command({"command": "move", "agent_id": 42, "params": {"dx": 1, "dy": 1}})


def test_current_state_keys(sim):
    placed = sim.spawn_object("box")
    agent = sim.spawn_agent("walker")
    state = sim.current_state()
    assert list(state["objects"]) == [str(placed.id)]
    assert state["agents"][str(agent.id)]["agent_name"] == "walker"
    assert state["agents"][str(agent.id)]["is_agent"] is True


def test_tick_payload_carries_mail_and_collisions(sim):
    agent = sim.spawn_agent("walker", (0.0, 0.0))
    sim.spawn_object("box", (5.0, 0.0))
    agent.send_message({"sender": "system", "message": "hello"})
    payloads = sim.tick_payloads()
    decoded = json.loads(payloads[agent.id])
    assert payloads[agent.id].endswith("\n")
    assert decoded["mail"] == [{"sender": "system", "message": "hello"}]
    assert [c["type"] for c in decoded["collisions"]] == ["object"]
    assert json.loads(sim.tick_payloads()[agent.id])["mail"] == []


def test_save_and_load_round_trip(sim, project):
    placed = sim.spawn_object("box", (3.0, 4.0))
    agent = sim.spawn_agent("walker", (5.0, 6.0))
    sim.save()

    reopened = Simulation(project)
    assert reopened.shapes["box"].to_json() == square().to_json()
    assert set(reopened.factories) == {"walker"}
    assert reopened.objects[placed.id].position == (3.0, 4.0)
    assert reopened.agents[agent.id].position == (5.0, 6.0)
    assert reopened.spawn_agent("walker").id > agent.id
    assert reopened.spawn_object("box").id > placed.id


def test_clear_empties_everything(sim):
    sim.spawn_object("box")
    sim.spawn_agent("walker")
    sim.clear()
    assert (sim.shapes, sim.factories, sim.objects, sim.agents) == ({}, {}, {}, {})


def test_start_ticks_until_stopped(project):
    ticked = threading.Event()
    received = []

    def sink(agent_id, payload):
        received.append((agent_id, payload))
        ticked.set()

    simulation = Simulation(project, sink=sink)
    simulation.add_shape("box", square())
    simulation.create_agent_type("walker", "box", "pass", TEMPLATE)
    agent = simulation.spawn_agent("walker")
    simulation.start(10)
    try:
        assert ticked.wait(5)
        assert simulation.running
    finally:
        simulation.stop()
    assert not simulation.running
    assert received[0][0] == agent.id
    assert json.loads(received[0][1])["agents"][str(agent.id)]["agent_name"] == "walker"