"""Command-line entry point for the brainfuck interpreter: runs files and code, debugs, visualizes, generates code,
and serves the tutorial and the example and exercise catalogs. Called from the bf executable script. Every command
runs inside the error handling context manager.
"""

import argparse
import sys

from termcolor import colored

from bflearn import config
from bflearn.config import Options
from bflearn.lang.catalog import EXAMPLES, find_example
from bflearn.lang.display import animate
from bflearn.lang.error import ErrorHandler, GenericException
from bflearn.lang.exercises import EXERCISES, get_exercises, grade
from bflearn.lang.generate import generate, generate_looped
from bflearn.lang.session import Session
from bflearn.lang.shell import Debugger, Trainer, Tutorial
from bflearn.lang.tutorial import LESSONS, get_lesson


def _options(args, **extra):
    return Options(
        memory_size=args.memory_size,
        max_iterations=args.max_iterations,
        input_data=args.input if args.input is not None else "",
        **extra,
    )


def _read(path):
    try:
        with open(path, "r") as file:
            return file.read()
    except OSError:
        raise GenericException("'{}' could not be opened", path, diagnosis=False)


def run_file(args, error_handler):
    Session(error_handler, args.file, _options(args, debug=args.debug)).run(visualize=args.visualize)


def exec_code(args, error_handler):
    Session(error_handler, Session.EXEC_FILE, _options(args, debug=args.debug), code=args.code).run(
        visualize=args.visualize)


def debug_file(args, error_handler):
    Debugger(_read(args.file), args.file, _options(args)).cmdloop()


def visualize_code(args, error_handler):
    animate(args.code, speed=args.speed, options=_options(args))


def generate_text(args, error_handler):
    print(colored("Generated Brainfuck code:", config.COLORS["success"]))
    print(generate(args.text))
    print(colored("\nOptimized version:", config.COLORS["debug"]))
    print(generate_looped(args.text))


def examples(args, error_handler):
    if args.name is None:
        for category, programs in EXAMPLES.items():
            print(colored(f"{category}:", config.COLORS["info"], attrs=["bold"]))
            for name, example in programs.items():
                print(f"  {name:<12}{example.description}")
        return

    __, example = find_example(args.name)
    input_data = args.input if args.input is not None else example.input_data
    options = _options(args).override(input_data=input_data)
    print(colored(example.description, config.COLORS["info"]))
    print(colored(example.code, config.COLORS["debug"]))
    Session(error_handler, args.name, options, code=example.code).run()


def exercise(args, error_handler):
    exercises = get_exercises(args.level)

    if args.solution is None:
        Trainer(args.level, exercises, _options(args)).cmdloop()
        return

    if not 1 <= args.number <= len(exercises):
        raise GenericException("exercise number must be between 1 and {}", len(exercises), diagnosis=False)

    result = grade(args.solution, exercises[args.number - 1], _options(args))
    if result.passed:
        print(colored("✓ " + result.message, config.COLORS["success"]))
    else:
        print(colored("✗ " + result.message, config.COLORS["error"]))
        sys.exit(1)


def tutorial(args, error_handler):
    get_lesson(args.lesson)  # rejects numbers outside the lesson table
    Tutorial(LESSONS, args.lesson, _options(args)).cmdloop()


def build_parser():
    parser = argparse.ArgumentParser(prog="bf", description="Interactive Brainfuck learning CLI")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-i", "--input", help="input string for the program")
    common.add_argument("--memory-size", type=int, default=config.MEMORY_SIZE, help="number of memory cells")
    common.add_argument("--max-iterations", type=int, default=config.MAX_ITERATIONS,
                        help="instructions executed before the run is stopped")

    running = argparse.ArgumentParser(add_help=False)
    running.add_argument("-d", "--debug", action="store_true", help="show iterations and final memory")
    running.add_argument("-v", "--visualize", action="store_true", help="show memory visualization")

    commands = parser.add_subparsers(dest="command", required=True)

    cmd = commands.add_parser("run", parents=[common, running], help="run a Brainfuck program from file")
    cmd.add_argument("file")
    cmd.set_defaults(func=run_file)

    cmd = commands.add_parser("exec", parents=[common, running], help="execute Brainfuck code directly")
    cmd.add_argument("code")
    cmd.set_defaults(func=exec_code)

    cmd = commands.add_parser("debug", parents=[common], help="debug a Brainfuck program step by step")
    cmd.add_argument("file")
    cmd.set_defaults(func=debug_file)

    cmd = commands.add_parser("visualize", parents=[common], help="visualize Brainfuck code execution")
    cmd.add_argument("code")
    cmd.add_argument("-s", "--speed", type=int, default=config.ANIMATION_SPEED, help="animation speed (ms)")
    cmd.set_defaults(func=visualize_code)

    cmd = commands.add_parser("generate", help="generate Brainfuck code that outputs the given text")
    cmd.add_argument("text")
    cmd.set_defaults(func=generate_text)

    cmd = commands.add_parser("tutorial", parents=[common], help="start the interactive Brainfuck tutorial")
    cmd.add_argument("-l", "--lesson", type=int, default=1, help="lesson to start from")
    cmd.set_defaults(func=tutorial)

    cmd = commands.add_parser("examples", parents=[common], help="list example programs, or run one")
    cmd.add_argument("name", nargs="?")
    cmd.set_defaults(func=examples)

    cmd = commands.add_parser("exercise", parents=[common], help="practice with exercises")
    cmd.add_argument("level", nargs="?", default="beginner", choices=list(EXERCISES))
    cmd.add_argument("-n", "--number", type=int, default=1, help="exercise to grade (with --solution)")
    cmd.add_argument("--solution", help="grade this solution instead of starting the trainer")
    cmd.set_defaults(func=exercise)

    return parser


def main(argv=None):
    """Runs the bf command line. Called from bf executable script."""
    with ErrorHandler() as error_handler:
        args = build_parser().parse_args(argv)
        args.func(args, error_handler)
