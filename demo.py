#!/usr/bin/env python3
"""
scratchdsl demo

Builds a small sample project and writes it either as a bare project.json or
as a complete .sb3 archive.

Usage:
    python demo.py output.sb3
    python demo.py project.json --deterministic
"""

import argparse
import sys

from scratchdsl.constants import KeyboardKey, StopType
from scratchdsl.errors import ScratchDslError
from scratchdsl.ids import IdGenerator
from scratchdsl.project import Project, build
from scratchdsl.project_io import write_project_json, write_sb3
from scratchdsl.reporters import greater_than, join, pick_random, x_position


def sample(project: Project) -> None:
    score = project.make_global_var("score", 0)
    game_over = project.make_broadcast("game over")

    cat = project.sprite("Cat")
    speed = cat.make_var("speed", 10)

    bounce = cat.procedure("bounce")
    times = bounce.number("times", "3")
    bounce.text("times")
    bounce.implement(lambda s: s.repeat(times, lambda r: (r.turn_right(180), r.move_steps(speed))))

    def on_flag(s):
        s.set(score, 0)
        s.go_to_xy(0, 0)
        s.forever(lambda loop: (
            loop.move_steps(speed),
            loop.if_on_edge_bounce(),
            loop.if_(greater_than(x_position(), 200), lambda hit: (
                hit.change_by(score, 1),
                hit.call(bounce, pick_random(1, 3)),
            )),
        ))

    cat.when_flag_clicked(on_flag)
    cat.when_key_pressed(KeyboardKey.SPACE, lambda s: s.broadcast(game_over))
    cat.when_i_receive(game_over, lambda s: (
        s.say_for_secs(join("Score: ", score), 2),
        s.stop(StopType.ALL),
    ))


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build a sample Scratch project with scratchdsl.")
    parser.add_argument("output", help="Output path; .sb3 writes an archive, anything else project.json")
    parser.add_argument("--deterministic", action="store_true", help="Use counting ids instead of random ones")
    parser.add_argument("--assets", action="append", default=[], help="Directory to search for asset files")
    parser.add_argument("--monitors", help="Take monitor data from an existing .sb3 or project.json")
    parser.add_argument("--indent", type=int, default=None, help="Indent project.json output")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    generator = IdGenerator.counting() if args.deterministic else None
    try:
        project = build(sample, generator)
        project.asset_directories.extend(args.assets)
        if args.monitors:
            project.extract_monitor_data_from(args.monitors)
        if args.output.lower().endswith(".sb3"):
            write_sb3(project, args.output)
        else:
            write_project_json(project, args.output, args.indent)
    except ScratchDslError as e:
        print(f"Error: {e}")
        sys.exit(1)

    diagnostics = project.diagnostics
    if diagnostics.all_diagnostics:
        print()
        diagnostics.print_all()
        print()
        print(f"Build completed with {diagnostics.summary()}")
    else:
        print(f"Successfully wrote {args.output}")


if __name__ == "__main__":
    main()
