"""Colorized terminal rendering of memory and code, and a step-by-step execution animation built on
Interpreter.step.
"""

import time

from termcolor import colored

from bflearn import config
from bflearn.lang.error import GenericException
from bflearn.pure.lexical import clean
from bflearn.pure.machine import Interpreter

CLEAR = "\033[2J\033[H"
CODE_WINDOW = 60


def _printable(value):
    return chr(value) if 32 <= value <= 126 else "."


def render_memory(memory, pointer=0, start=0, visible=config.VISIBLE_CELLS, cell_width=config.CELL_WIDTH):
    """Returns a boxed view of memory[start:start + visible]: values, ASCII, indices and a marker under pointer.
    Cells past the end of memory are shown as 0.
    """
    pad = cell_width - 1
    values, chars, indices = ["│"], ["│"], ["│"]
    marker = " "

    for idx in range(start, start + visible):
        value = memory[idx] if idx < len(memory) else 0
        cell_color = config.COLORS["debug"] if value == 0 else "white"

        values.append(colored(str(value).rjust(pad), cell_color) + "│")
        chars.append(colored(_printable(value).rjust(pad), "yellow") + "│")
        indices.append(colored(str(idx).rjust(pad), attrs=["dark"]) + "│")

        if idx == pointer:
            half = cell_width // 2
            marker += " " * half + colored("▲", config.COLORS["success"]) + " " * (cell_width - half)
        else:
            marker += " " * (cell_width + 1)

    width = visible * (cell_width + 1)
    rule = colored("─" * (width + 1), config.COLORS["debug"])
    divider = colored("├" + "─" * (width - 1) + "┤", config.COLORS["debug"])

    lines = [
        colored("Memory Visualization:", config.COLORS["info"]),
        rule,
        "".join(values),
        divider,
        "".join(chars),
        divider,
        "".join(indices),
        rule,
        marker,
        "",
        colored(f"Non-zero cells: {sum(1 for value in memory if value)}", config.COLORS["debug"]),
        colored(f"Pointer position: {pointer}", config.COLORS["debug"]),
    ]
    return "\n".join(lines)


def render_code(code, position, window=CODE_WINDOW):
    """Returns a window of the cleaned program around position with the current instruction highlighted."""
    code = clean(code)
    start = max(0, position - window // 2)
    end = min(len(code), start + window)

    shown = ""
    for idx in range(start, end):
        if idx == position:
            shown += colored(code[idx], "black", "on_green")
        else:
            shown += colored(code[idx], config.COLORS["debug"])

    if start > 0:
        shown = "..." + shown
    if end < len(code):
        shown += "..."

    return colored("Code:", config.COLORS["info"]) + "\n" + shown


def render_frame(code, step_result, memory):
    """One animation frame for a StepResult: the instruction just executed and the state it left behind."""
    record, step_state = step_result.record, step_result.state
    start = max(0, step_state.pointer - config.VISIBLE_CELLS // 2)
    frame = [
        colored("Brainfuck Execution Visualizer\n", config.COLORS["info"], attrs=["bold"]),
        render_code(code, record.instruction_pointer),
        "",
        colored("Current instruction: ", "yellow") + colored(record.instruction, config.COLORS["success"]),
        colored(f"Position: {record.instruction_pointer}", config.COLORS["debug"]),
        render_memory(memory, step_state.pointer, start),
    ]
    if step_state.output:
        frame.append(colored("\nOutput so far: ", "yellow") + step_state.output)
    return "\n".join(frame)


def animate(code, input_data=None, speed=config.ANIMATION_SPEED, options=None, sleep=time.sleep):
    """Drives Interpreter.step over code, redrawing a frame every speed ms (speed 0 draws nothing until the end).
    Stops at the iteration ceiling. Returns the interpreter so callers can inspect the final state.
    """
    interpreter = Interpreter(options, input_data=input_data)

    try:
        while True:
            if interpreter.state.iterations >= interpreter.options.max_iterations:
                print(colored("\n✗ Error: ", config.COLORS["error"]) +
                      f"Maximum iterations ({interpreter.options.max_iterations}) exceeded")
                break

            result = interpreter.step(code)
            if result.done:
                print(colored("\n✓ Program completed successfully", config.COLORS["success"]))
                if result.output:
                    print(colored("Final output: ", "yellow") + result.output)
                break

            if speed > 0:
                print(CLEAR + render_frame(code, result, interpreter.state.memory))
                sleep(speed / 1000)

    except GenericException as error:
        print(colored("\n✗ Error: ", config.COLORS["error"]) + str(error))
        if interpreter.output:
            print(colored("Partial output: ", "yellow") + interpreter.output)

    return interpreter
