"""Exercises and grading. Graders never look inside a program: they compare observable behavior (success, output, and
a prefix of final memory), running every case on its own Interpreter instance.
"""

import random
from dataclasses import dataclass, field

from bflearn.lang.error import GenericException
from bflearn.pure.machine import Interpreter


@dataclass
class Case:
    input_data: str = ""
    expected_output: str = None
    expected_memory: list = None


@dataclass
class Exercise:
    title: str
    description: str
    cases: list
    hint: str
    solution: str
    setup: str = ""  # run before the submitted code


@dataclass
class Grade:
    passed: bool
    message: str
    failures: list = field(default_factory=list)


FIBONACCI_STEP = "<[->>+<<]>[-<+>>+<]>.[-<+>]<"

EXERCISES = {
    "beginner": [
        Exercise("Set Cell Value", "Set the current cell to the value 10",
                 [Case(expected_memory=[10])], "Use the + command 10 times", "++++++++++"),
        Exercise("Clear Cell", "Clear a cell that contains the value 5",
                 [Case(expected_memory=[0])], "Use a loop with the - command", "[-]", setup="+++++"),
        Exercise("Move Value", "Move the value 3 from cell 0 to cell 1",
                 [Case(expected_memory=[0, 3])], "Decrement source while incrementing destination", "[->+<]",
                 setup="+++"),
        Exercise("Output Character", "Output the letter \"A\" (ASCII 65)",
                 [Case(expected_output="A")], "Set cell to 65 then use the . command", "++++++++[>++++++++<-]>+."),
        Exercise("Simple Loop", "Output \"AAA\" (three A's)",
                 [Case(expected_output="AAA")], "Set up the ASCII value, then use a counter loop",
                 "+++[>++++++++[>++++++++<-]>+.[-]<<-]"),
    ],
    "intermediate": [
        Exercise("Add Two Cells", "Add cell 0 (value 3) to cell 1 (value 5); the pointer starts on cell 1",
                 [Case(expected_memory=[0, 8])], "Move back and add first cell to second", "<[->+<]",
                 setup="+++>+++++"),
        Exercise("Copy Value", "Copy the value 4 from cell 0 to cell 1 (preserve original)",
                 [Case(expected_memory=[4, 4])], "Use a temporary cell to preserve the original",
                 "[->+>+<<]>>[-<<+>>]", setup="++++"),
        Exercise("Input Echo", "Read a character and output it twice",
                 [Case("X", expected_output="XX"), Case("q", expected_output="qq")], "Read, output, output again",
                 ",.."),
        Exercise("Multiplication", "Multiply cell 0 (3) by cell 1 (4) into cell 2, leaving cells 0 and 1 empty",
                 [Case(expected_memory=[0, 0, 12])], "Use nested loops to add repeatedly",
                 "<[->[->+>+<<]>>[-<<+>>]<<<]>[-]", setup="+++>++++"),
        Exercise("Count to Five", "Output the digits 1 through 5",
                 [Case(expected_output="12345")], "Start at ASCII 49 (1) and increment",
                 "+++++++[>+++++++<-]>.+.+.+.+."),
    ],
    "advanced": [
        Exercise("Reverse Input", "Read three characters and output them in reverse order",
                 [Case("ABC", expected_output="CBA"), Case("xyz", expected_output="zyx")],
                 "Store in different cells, then output backwards", ",>,>,.<.<."),
        Exercise("Uppercase Converter", "Convert a lowercase letter to uppercase",
                 [Case("a", expected_output="A"), Case("z", expected_output="Z")],
                 "Subtract 32 from the ASCII value", "," + "-" * 32 + "."),
        Exercise("Sum Inputs", "Read two bytes and output their sum as a byte",
                 [Case("\x02\x03", expected_output="\x05"), Case("\x0a\x14", expected_output="\x1e")],
                 "Move the second value onto the first", ",>,[-<+>]<."),
        Exercise("Fibonacci Sequence", "Output first 5 Fibonacci numbers as byte values",
                 [Case(expected_output="\x01\x01\x02\x03\x05")],
                 "Keep two cells for previous numbers, add them for next", "+.>+." + FIBONACCI_STEP * 3),
        Exercise("Division", "Divide cell 0 (12) by cell 1 (3) into cell 2, keeping the divisor in cell 1",
                 [Case(expected_memory=[0, 3, 4])], "Repeatedly subtract the divisor and count",
                 "<[>[-<->>>+<<]>>[-<<+>>]<+<<]", setup="++++++++++++>+++"),
    ],
}


def get_exercises(level):
    try:
        return EXERCISES[level]
    except KeyError:
        msg = "invalid level '{}'. Choose: {}"
        raise GenericException(msg, (level, ", ".join(EXERCISES)), diagnosis=False)


def check_case(code, case, options=None):
    """Runs code on a fresh interpreter and returns a failure message for case, or None if it passes."""
    interpreter = Interpreter(options)
    result = interpreter.execute(code, input_data=case.input_data)

    if not result.success:
        return f"Execution error: {result.error}"

    if case.expected_output is not None and result.output != case.expected_output:
        return f"Output mismatch. Expected: {case.expected_output!r}, Got: {result.output!r}"

    if case.expected_memory is not None:
        memory = interpreter.memory_snapshot(0, len(case.expected_memory))
        if memory != list(case.expected_memory):
            return f"Memory mismatch. Expected: {list(case.expected_memory)}, Got: {memory}"

    return None


def grade(code, exercise, options=None):
    """Grades a submitted solution (run after exercise.setup) against every case of exercise."""
    full_code = exercise.setup + code

    for case in exercise.cases:
        failure = check_case(full_code, case, options)
        if failure:
            return Grade(False, failure, [failure])

    return Grade(True, "All tests passed!")


def validate(reference, candidate, inputs=("",), memory_cells=0, options=None):
    """Compares the observable behavior of two programs over inputs: success, error category, output and, if
    memory_cells, that many cells of final memory. Every run gets its own Interpreter.
    """
    failures = []

    for input_data in inputs:
        runs = []
        for code in (reference, candidate):
            interpreter = Interpreter(options)
            result = interpreter.execute(code, input_data=input_data)
            runs.append((result, interpreter.memory_snapshot(0, memory_cells)))

        (expected, expected_memory), (actual, actual_memory) = runs
        if (expected.success, expected.category) != (actual.success, actual.category):
            expected_status = "succeeded" if expected.success else f"failed with {expected.error}"
            actual_status = "succeeded" if actual.success else f"failed with {actual.error}"
            failures.append(f"input {input_data!r}: reference {expected_status}, candidate {actual_status}")
        elif expected.output != actual.output:
            failures.append(f"input {input_data!r}: expected output {expected.output!r}, got {actual.output!r}")
        elif expected_memory != actual_memory:
            failures.append(f"input {input_data!r}: expected memory {expected_memory}, got {actual_memory}")

    if failures:
        return Grade(False, failures[0], failures)
    return Grade(True, f"Programs agree on {len(inputs)} input(s)")


def random_exercise(level="beginner", rng=random):
    """Builds a parameterized exercise whose solution passes its own cases. Returns None for unknown levels."""
    if level == "beginner":
        if rng.random() < 0.5:
            value = rng.randint(1, 20)
            return Exercise(f"Set cell to {value}", f"Set the current cell to the value {value}",
                            [Case(expected_memory=[value])], f"Use {value} plus signs", "+" * value)

        value, distance = rng.randint(1, 10), rng.randint(1, 3)
        return Exercise(f"Move {value} right {distance} cells",
                        f"Move the value {value} from cell 0 to cell {distance}",
                        [Case(expected_memory=[0] * distance + [value])], "Use a loop to move the value",
                        "[-" + ">" * distance + "+" + "<" * distance + "]", setup="+" * value)

    if level == "intermediate":
        a, b = rng.randint(2, 6), rng.randint(2, 6)
        return Exercise(f"Multiply {a} * {b}", f"Calculate {a} * {b} and store in cell 1",
                        [Case(expected_memory=[0, a * b])], "Use nested loops",
                        "+" * a + "[->" + "+" * b + "<]")

    return None
