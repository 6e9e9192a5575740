"""Command-line entry point: open a project, apply commands, run ticks."""

from __future__ import annotations

import argparse
import json
import pathlib
import sys

from .commands import UnknownCommandError
from .entities import parse_agent_output
from .project import ProjectError, create_project, is_project_folder
from .world import Simulation


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="agentsim", description="Run an agent simulation project.")
    parser.add_argument("path", help="project folder, or parent folder with --new")
    parser.add_argument("--new", metavar="NAME", help="create a new project NAME inside PATH")
    parser.add_argument("--commands", metavar="FILE", help="file of JSON commands, one per line")
    parser.add_argument("--ticks", type=int, default=0, help="number of ticks to run")
    parser.add_argument("--save", action="store_true", help="save the project afterwards")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)

    if args.new:
        root = create_project(args.path, args.new)
    else:
        root = pathlib.Path(args.path)
        if not is_project_folder(root):
            print(f"not a project folder or it is damaged: {root}", file=sys.stderr)
            return 1

    try:
        simulation = Simulation(root)
    except ProjectError as error:
        print(f"cannot load project: {error}", file=sys.stderr)
        return 1

    if args.commands:
        text = pathlib.Path(args.commands).read_text(encoding="utf-8")
        for command in parse_agent_output(text):
            try:
                simulation.apply_command(command)
            except (UnknownCommandError, KeyError) as error:
                print(f"command rejected: {error}", file=sys.stderr)

    for _ in range(max(args.ticks, 0)):
        for payload in simulation.tick_payloads().values():
            sys.stdout.write(payload)

    if args.save:
        simulation.save()

    print(json.dumps(simulation.current_state(), ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())