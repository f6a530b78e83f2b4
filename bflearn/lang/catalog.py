"""Example brainfuck programs, grouped by category."""

from collections import namedtuple

from bflearn.lang.error import GenericException

Example = namedtuple("Example", ["code", "description", "input_data"], defaults=[""])

HELLO_WORLD = ("++++++++++[>+++++++>++++++++++>+++>+<<<<-]>++.>+.+++++++..+++.>++."
               "<<+++++++++++++++.>.+++.------.--------.>+.>.")

EXAMPLES = {
    "basic": {
        "hello": Example(HELLO_WORLD, "Classic Hello World program"),
        "cat": Example(",[.,]", "Echoes input until null character", "cat\0"),
        "echo255": Example(",+[-.,+]", "Echo program that exits on 255", "hi\xff"),
        "clear": Example("[-]", "Sets current cell to zero"),
        "move": Example("[->>+<<]", "Moves value two cells to the right"),
    },
    "intermediate": {
        "add": Example(",>,<[->+<]>.", "Adds the codes of two input characters", "\x20\x21"),
        "upper": Example(",----------[----------------------.,----------]", "Uppercases letters until newline",
                         "brainfuck\n"),
        "fibonacci": Example("+.>+.>>>+++++++++++[<<<[->>+<<]>>[-<+<+>>]<<<[->+<]>>[-<<+>>]<.>>>-]",
                             "Generates Fibonacci numbers as raw byte values"),
        "copy": Example("[->>+>+<<<]>>>[-<<<+>>>]", "Copies value to another cell"),
    },
    "guide": {
        "findzero": Example("[>]", "Finds first zero cell to the right"),
        "if": Example(">[-]>[-]<<[>+>+<<-]>[<+>-]>[code[-]]", "If-then construct template"),
        "ifzero": Example(">[-]+<[>-]<[code[-]]", "If x=0 construct template"),
    },
}


def find_example(name):
    """Returns (category, Example) for name, searching every category."""
    for category, examples in EXAMPLES.items():
        if name in examples:
            return category, examples[name]
    raise GenericException("no example named '{}'", name, diagnosis=False)
