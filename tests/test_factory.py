from agentsim.entities import Agent
from agentsim.factory import AgentFactory
from agentsim.geometry import Path


def make_factory(tmp_path):
    shape = Path().move_to(0, 0).line_to(10, 0).line_to(10, 10).line_to(0, 10)
    return AgentFactory(shape, tmp_path / "scout.py", "scout", "triangle")


def test_create_agent(tmp_path):
    factory = make_factory(tmp_path)
    agent = factory.create_agent(5, (3.0, 4.0))
    assert isinstance(agent, Agent)
    assert agent.id == 5
    assert agent.position == (3.0, 4.0)
    assert agent.agent_name == "scout"
    assert agent.name == "triangle"
    assert agent.shape == factory.shape
    assert agent.code_path == tmp_path / "scout.py"


def test_create_agent_default_position(tmp_path):
    agent = make_factory(tmp_path).create_agent(1)
    assert agent.position == (0.0, 0.0)


def test_to_json(tmp_path):
    assert make_factory(tmp_path).to_json() == {"scout": {"shape_name": "triangle"}}


def test_agents_are_independent(tmp_path):
    factory = make_factory(tmp_path)
    first = factory.create_agent(1)
    second = factory.create_agent(2)
    first.send_message({"sender": "0", "message": "x"})
    assert second.collect_mail() == []
    assert first.collect_mail() == [{"sender": "0", "message": "x"}]