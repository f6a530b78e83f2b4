"""Brainfuck preprocessing: comment stripping and bracket matching.

The `pure` directory contains the brainfuck core (preprocessing and execution), with no terminal I/O.

Formally, a brainfuck program can be defined as

```
<program>     ::= (<instruction> | <loop> | <comment>)*
<instruction> ::= ">" | "<" | "+" | "-" | "." | ","
<loop>        ::= "[" <program> "]"          ; brackets must balance
<comment>     ::= any other character         ; dropped before execution
```

Comments are dropped completely: every index used after preprocessing (instruction pointer, jump table, error
positions) refers to the cleaned program, not to the original source.
"""

from dataclasses import dataclass, field

from bflearn.lang.error import GenericException, ProgramSyntaxError


INSTRUCTIONS = "><+-.,[]"


@dataclass
class Program:
    """A cleaned program, its bidirectional jump table, and the (line, column) each instruction came from."""
    code: str
    jumps: dict = field(default_factory=dict)
    positions: list = field(default_factory=list)

    def match(self, idx):
        """Index of the bracket matching the one at idx."""
        try:
            return self.jumps[idx]
        except KeyError:
            msg = "no matching bracket for '{}' at position {}"
            raise GenericException(msg, (self.code[idx:idx + 1], idx), internal=True)

    def source_pos(self, idx):
        """(line, column) of cleaned instruction idx in the original source, 1-based. None if unknown."""
        if 0 <= idx < len(self.positions):
            return self.positions[idx]
        return None

    def __len__(self):
        return len(self.code)


def clean(source):
    """Strips every character that is not one of the 8 instructions."""
    return "".join(char for char in source if char in INSTRUCTIONS)


def locate(source):
    """Returns the (line, column) of every instruction character in source, in order."""
    positions = []
    line, col = 1, 0
    for char in source:
        if char == "\n":
            line, col = line + 1, 0
            continue
        col += 1
        if char in INSTRUCTIONS:
            positions.append((line, col))
    return positions


def build_jump_table(code, positions=()):
    """Matches brackets in a cleaned program with a stack of open '[' positions. Raises ProgramSyntaxError on an
    unmatched ']' (at its position) or unmatched '[' (at the earliest unmatched one). Never returns a partial table.
    positions are the source (line, column) pairs from locate, used to place the error.
    """
    def fail(msg, position):
        source_pos = positions[position] if position < len(positions) else None
        return ProgramSyntaxError(msg, position, start=position, end=position + 1, source=code, source_pos=source_pos)

    stack, jumps = [], {}

    for position, command in enumerate(code):
        if command == "[":
            stack.append(position)
        elif command == "]":
            if not stack:
                raise fail("Unmatched ] at position {}", position)
            start = stack.pop()
            jumps[start] = position
            jumps[position] = start

    if stack:
        raise fail("Unmatched [ at position {}", stack[0])

    return jumps


def preprocess(source):
    """Cleans source and builds its jump table. Pure: touches no interpreter state."""
    code = clean(source)
    positions = locate(source)
    return Program(code, build_jump_table(code, positions), positions)
