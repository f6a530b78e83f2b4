"""Brainfuck execution. A single State value is threaded through the shared step primitive (advance), and the two
entry points are built on top of it:

- Interpreter.execute: preprocess, then advance until the program ends or fails. Used by run/exec and by graders.
- Interpreter.step: advance exactly one instruction per call. Used by debuggers and visualizers, which call it
  repeatedly under their own control; nothing here waits, paces or renders.

Instruction semantics:

```
>   pointer += 1                      ; fails with "Memory overflow" past the last cell (no wraparound)
<   pointer -= 1                      ; fails with "Memory underflow" before cell 0
+   cell = (cell + 1) mod 256
-   cell = (cell - 1) mod 256
.   append chr(cell) to output
,   cell = next input char, or 0 once input is exhausted
[   if cell == 0: jump to matching ]  ; the shared +1 then lands just past it
]   if cell != 0: jump to matching [  ; the shared +1 then lands on the first body instruction
```
"""

from dataclasses import dataclass, field
from enum import Enum

from bflearn import config
from bflearn.config import Options
from bflearn.lang.error import BoundsError, GenericException, ProgramSyntaxError, ResourceLimitError
from bflearn.pure.lexical import preprocess


class Phase(Enum):
    NOT_STARTED = "not started"
    RUNNING = "running"
    DONE = "done"


@dataclass
class StepRecord:
    """The instruction at instruction_pointer and the cell under the data pointer, as fetched."""
    instruction: str
    pointer: int
    value: int
    instruction_pointer: int

    def as_dict(self):
        return {
            "instruction": self.instruction,
            "pointer": self.pointer,
            "value": self.value,
            "instructionPointer": self.instruction_pointer,
        }


@dataclass
class StepState(StepRecord):
    """Observable state once an instruction has run: the instruction executed, then the data pointer, the cell under
    it, the next instruction_pointer and all output so far, every one of them read after execution.
    """
    output: str = ""

    def as_dict(self):
        result = super().as_dict()
        result["output"] = self.output
        return result


@dataclass
class State:
    """Everything one run owns. Never shared between Interpreter instances."""
    memory: bytearray
    input_data: object = ""
    pointer: int = 0
    instruction_pointer: int = 0
    input_cursor: int = 0
    output: list = field(default_factory=list)
    iterations: int = 0
    history: list = field(default_factory=list)
    phase: Phase = Phase.NOT_STARTED
    program: object = None

    @classmethod
    def fresh(cls, options):
        return cls(bytearray(options.memory_size), options.input_data)

    @property
    def text(self):
        return "".join(self.output)

    def read_input(self):
        """Next input value, or 0 once input is exhausted."""
        if self.input_cursor >= len(self.input_data):
            return 0

        char = self.input_data[self.input_cursor]
        self.input_cursor += 1
        return char % 256 if isinstance(char, int) else ord(char) % 256


@dataclass
class ExecResult:
    success: bool
    output: str = ""
    error: str = None
    category: str = None
    iterations: int = 0
    final_memory: list = None
    history: list = None
    exception: GenericException = field(default=None, repr=False, compare=False)

    @classmethod
    def failure(cls, error, state):
        """Failed run: keeps whatever output was produced before error."""
        return cls(False, state.text, str(error), error.category, state.iterations, exception=error)

    def as_dict(self):
        result = {"success": self.success, "output": self.output, "iterations": self.iterations}
        if not self.success:
            result["error"] = self.error
        result["finalMemory"] = self.final_memory
        result["history"] = None if self.history is None else [record.as_dict() for record in self.history]
        return result


@dataclass
class StepResult:
    """Either done, with the final output, or the state after one instruction. record is that same step as fetched,
    before it ran.
    """
    done: bool
    output: str = ""
    state: StepState = None
    record: StepRecord = field(default=None, repr=False, compare=False)

    def as_dict(self):
        if self.done:
            return {"done": True, "output": self.output}
        return {"done": False, "state": self.state.as_dict()}


def _fail(error_cls, msg, exprs, state, program):
    """Builds error_cls pointing at the current instruction."""
    ip = state.instruction_pointer
    return error_cls(msg, exprs, start=ip, end=ip + 1, source=program.code, source_pos=program.source_pos(ip))


def advance(state, program, record=False):
    """Executes the instruction at state.instruction_pointer and returns its StepRecord. Raises BoundsError if the
    data pointer would leave memory; state is left as it was before the failing instruction, apart from the
    iteration counter.
    """
    ip = state.instruction_pointer
    command = program.code[ip]
    memory, pointer = state.memory, state.pointer

    step_record = StepRecord(command, pointer, memory[pointer], ip)
    if record:
        state.history.append(step_record)
    state.iterations += 1

    if command == ">":
        if pointer + 1 >= len(memory):
            raise _fail(BoundsError, "Memory overflow", None, state, program)
        state.pointer += 1

    elif command == "<":
        if pointer - 1 < 0:
            raise _fail(BoundsError, "Memory underflow", None, state, program)
        state.pointer -= 1

    elif command == "+":
        memory[pointer] = (memory[pointer] + 1) % 256

    elif command == "-":
        memory[pointer] = (memory[pointer] - 1) % 256

    elif command == ".":
        state.output.append(chr(memory[pointer]))

    elif command == ",":
        memory[pointer] = state.read_input()

    elif command == "[":
        if memory[pointer] == 0:
            state.instruction_pointer = program.match(ip)

    elif command == "]":
        if memory[pointer] != 0:
            state.instruction_pointer = program.match(ip)

    state.instruction_pointer += 1
    return step_record


class Interpreter:
    """Owns one memory buffer and its pointers. Use one instance per concurrently running program."""

    def __init__(self, options=None, **overrides):
        self.options = (options if options is not None else Options()).override(**overrides)
        self.state = State.fresh(self.options)

    def reset(self):
        """Zeroes memory, resets pointers and input, clears output, iterations and any loaded program."""
        self.state = State.fresh(self.options)

    @property
    def output(self):
        return self.state.text

    @property
    def pointer(self):
        return self.state.pointer

    @property
    def phase(self):
        return self.state.phase

    def execute(self, code, input_data=None, memory_size=None, max_iterations=None, debug=None):
        """Runs code to completion on freshly reset state. Keyword arguments override self.options for this call only.
        Program failures are returned as an unsuccessful ExecResult, never raised.
        """
        options = self.options.override(input_data=input_data, memory_size=memory_size,
                                        max_iterations=max_iterations, debug=debug)
        self.state = state = State.fresh(options)

        try:
            program = preprocess(code)
        except ProgramSyntaxError as error:
            state.phase = Phase.DONE
            return ExecResult.failure(error, state)

        state.program = program
        state.phase = Phase.RUNNING

        try:
            while state.instruction_pointer < len(program):
                if state.iterations >= options.max_iterations:
                    raise _fail(ResourceLimitError, "Maximum iterations ({}) exceeded", options.max_iterations,
                                state, program)
                advance(state, program, record=options.debug)
        except GenericException as error:
            return ExecResult.failure(error, state)
        finally:
            state.phase = Phase.DONE

        return ExecResult(
            success=True,
            output=state.text,
            iterations=state.iterations,
            final_memory=list(state.memory[:config.SNAPSHOT_CELLS]) if options.debug else None,
            history=list(state.history) if options.debug else None,
        )

    def step(self, code):
        """Executes one instruction of code. The first call resets and preprocesses code; later calls ignore code and
        continue the loaded program until it is done. Raises ProgramSyntaxError/BoundsError, after which the
        instance is done until reset. Never records history, whatever options.debug says.
        """
        if self.state.phase is Phase.NOT_STARTED:
            self.reset()
            try:
                self.state.program = preprocess(code)
            except ProgramSyntaxError:
                self.state.phase = Phase.DONE
                raise
            self.state.phase = Phase.RUNNING

        state = self.state
        if state.phase is Phase.DONE or state.instruction_pointer >= len(state.program):
            state.phase = Phase.DONE
            return StepResult(done=True, output=state.text)

        try:
            step_record = advance(state, state.program)
        except GenericException:
            state.phase = Phase.DONE
            raise

        step_state = StepState(step_record.instruction, state.pointer, state.memory[state.pointer],
                               state.instruction_pointer, state.text)
        return StepResult(done=False, state=step_state, record=step_record)

    def memory_snapshot(self, start=0, length=20):
        """Copy of memory[start:start + length], clamped to the buffer."""
        size = len(self.state.memory)
        start = min(max(start, 0), size)
        end = min(start + max(length, 0), size)
        return list(self.state.memory[start:end])
