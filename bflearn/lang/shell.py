"""Handles interactive modes for the brainfuck interpreter: a step debugger driving Interpreter.step one instruction
per command, an exercise trainer and the tutorial. Uses cmd as backend.
"""

import cmd

from termcolor import colored

from bflearn import config
from bflearn.lang.display import render_code, render_memory
from bflearn.lang.error import ErrorHandler
from bflearn.lang.exercises import grade
from bflearn.lang.tutorial import REFERENCE, check_attempt
from bflearn.pure.machine import Interpreter, Phase


class Debugger(cmd.Cmd):
    """Brainfuck step debugger shell."""
    intro = colored("Starting debugger... Use commands: n (next), c (continue), m (memory), v (view), q (quit)",
                    config.COLORS["info"])
    prompt = "(bf) "
    SNAPSHOT = (0, 30)  # default memory command range

    def __init__(self, code, path="<debug>", options=None, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.code = code
        self.interpreter = Interpreter(options)
        self.error_handler = ErrorHandler(fatal=False)
        self.error_handler.register_file(path)

        self.steps = 0

    @property
    def finished(self):
        return self.interpreter.phase is Phase.DONE

    def _step(self, verbose=True):
        """Executes one instruction. Returns False once the program has finished (or failed)."""
        if self.finished:
            self.error_handler.warn("program has finished; type 'reset' to start over", diagnosis=False)
            return False

        with self.error_handler:
            result = self.interpreter.step(self.code)

            if result.done:
                print(colored("Program finished", config.COLORS["success"]))
                print(colored("Output: ", "yellow") + result.output)
                return False

            if verbose:
                record, state = result.record, result.state
                print(colored(f"Step {self.steps}: {record.instruction} at position {record.instruction_pointer}",
                              config.COLORS["debug"]))
                print(colored(f"Memory[{state.pointer}] = {state.value}", config.COLORS["debug"]))
            self.steps += 1
            return True

        return False  # error was thrown by error_handler

    def do_next(self, arg):
        """Executes the next instruction (or the next N instructions): next [N]"""
        count = int(arg) if arg.strip().isdigit() else 1
        for _ in range(count):
            if not self._step():
                break

    do_n = do_next

    def do_continue(self, arg):
        """Runs until the program finishes or the iteration ceiling is reached."""
        while not self.finished:
            if self.interpreter.state.iterations >= self.interpreter.options.max_iterations:
                msg = "maximum iterations ({}) reached; program paused"
                self.error_handler.warn(msg, self.interpreter.options.max_iterations, diagnosis=False)
                return
            if not self._step(verbose=False):
                break

    do_c = do_continue

    def do_memory(self, arg):
        """Shows a memory snapshot: memory [START] [LENGTH]"""
        start, length = Debugger.SNAPSHOT
        parts = arg.split()
        try:
            if parts:
                start = int(parts[0])
            if len(parts) > 1:
                length = int(parts[1])
        except ValueError:
            self.error_handler.warn("memory expects integers START LENGTH, got '{}'", arg, diagnosis=False)
            return

        print(colored("Memory snapshot:", config.COLORS["info"]))
        print(self.interpreter.memory_snapshot(start, length))

    do_m = do_memory

    def do_view(self, arg):
        """Shows the code around the next instruction and the memory around the data pointer."""
        state = self.interpreter.state
        print(render_code(self.code, state.instruction_pointer))
        print(render_memory(state.memory, state.pointer, max(0, state.pointer - config.VISIBLE_CELLS // 2)))

    do_v = do_view

    def do_output(self, arg):
        """Shows the output produced so far."""
        print(colored("Output: ", "yellow") + self.interpreter.output)

    def do_reset(self, arg):
        """Restarts the program from the beginning."""
        self.interpreter.reset()
        self.steps = 0
        print(colored("Program reset", config.COLORS["info"]))

    def emptyline(self):
        """Empty line steps once."""
        self.do_next("")

    def default(self, line):
        self.error_handler.warn("unrecognized command '{}'", line, diagnosis=False)

    def do_EOF(self, arg):
        """Exits debugger."""
        print()
        return self.do_quit(arg)

    def do_quit(self, arg):
        """Exits debugger."""
        print(colored("Debugging stopped", "yellow"))
        return True

    do_q = do_quit


class Trainer(cmd.Cmd):
    """Exercise shell: any line that is not a command is graded as a solution to the current exercise."""
    prompt = "solution> "

    def __init__(self, level, exercises, options=None, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.level = level
        self.exercises = exercises
        self.options = options
        self.error_handler = ErrorHandler(fatal=False)

        self.current = 0
        self.score = 0

    @property
    def exercise(self):
        return self.exercises[self.current]

    def preloop(self):
        title = f"\nBrainfuck Exercises - {self.level.capitalize()} Level"
        print(colored(title, config.COLORS["info"], attrs=["bold"]))
        print(colored("Type a solution, or 'hint', 'solution', 'skip', 'quit'.", config.COLORS["debug"]))
        self._announce()

    def _announce(self):
        exercise = self.exercise
        print(colored(f"\nExercise {self.current + 1}/{len(self.exercises)}: {exercise.title}", "yellow"))
        print(exercise.description)
        if exercise.setup:
            print(colored(f"Starting setup: {exercise.setup}", config.COLORS["debug"]))

    def _advance(self):
        """Moves to the next exercise. Returns True (stop) after the last one."""
        self.current += 1
        if self.current >= len(self.exercises):
            self.summary()
            return True
        self._announce()
        return False

    def summary(self):
        total = len(self.exercises)
        print(colored("\n" + "=" * 50, config.COLORS["info"]))
        print(colored("Exercise Session Complete!", config.COLORS["info"], attrs=["bold"]))
        print(colored(f"Your score: {self.score}/{total}", "yellow"))

        if self.score == total:
            print(colored("Perfect score! Excellent work!", config.COLORS["success"], attrs=["bold"]))
        elif self.score >= total * 0.7:
            print(colored("Good job! Keep practicing!", config.COLORS["success"]))
        else:
            print(colored("Keep learning! Practice makes perfect!", "yellow"))

    def default(self, line):
        """Grades line as a solution."""
        with self.error_handler:
            result = grade(line, self.exercise, self.options)
            if result.passed:
                print(colored("✓ Correct! Well done!", config.COLORS["success"]))
                self.score += 1
                return self._advance()

            print(colored("✗ Not quite right. ", config.COLORS["error"]) + result.message)
            print(colored("Type 'hint' for a hint or 'solution' to see one.", config.COLORS["debug"]))
        return False

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_hint(self, arg):
        """Shows a hint for the current exercise."""
        print(colored("Hint: ", "yellow") + self.exercise.hint)

    def do_solution(self, arg):
        """Shows a solution for the current exercise."""
        print(colored("Solution: ", config.COLORS["success"]) + self.exercise.solution)

    def do_skip(self, arg):
        """Moves on to the next exercise without scoring."""
        return self._advance()

    def do_EOF(self, arg):
        """Exits trainer."""
        print()
        return self.do_quit(arg)

    def do_quit(self, arg):
        """Exits trainer."""
        self.summary()
        return True


class Tutorial(cmd.Cmd):
    """Lesson shell: any line that is not a command is checked against the current lesson's practice exercise."""
    prompt = "tutorial> "

    def __init__(self, lessons, start=1, options=None, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.lessons = lessons
        self.options = options
        self.error_handler = ErrorHandler(fatal=False)

        self.current = start - 1
        self.completed = set()

    @property
    def lesson(self):
        return self.lessons[self.current]

    def preloop(self):
        print(colored("\nWelcome to the Brainfuck Interactive Tutorial!", config.COLORS["info"], attrs=["bold"]))
        print(colored("Commands: next, lesson N, lessons, show, hint, solution, reference, quit. "
                      "Any other line is checked as your solution.", config.COLORS["debug"]))
        self._show()

    def _show(self):
        lesson = self.lesson
        print(colored(f"\nLesson {self.current + 1}: {lesson.title}", config.COLORS["info"], attrs=["bold"]))
        print(colored("=" * 50, config.COLORS["info"]))
        print(lesson.content)

        if lesson.practice:
            print(colored("\nPractice Exercise:", "yellow"))
            print(lesson.practice.task)
        else:
            print(colored("\nType 'next' to continue.", config.COLORS["debug"]))

    def _practice(self):
        """Current lesson's practice, or None after warning that it has none."""
        if self.lesson.practice is None:
            self.error_handler.warn("lesson {} has no practice exercise", self.current + 1, diagnosis=False)
        return self.lesson.practice

    def _print_output(self, code):
        result = Interpreter(self.options).execute(code)
        if result.output:
            print(colored("Output: " + result.output, config.COLORS["debug"]))

    def default(self, line):
        """Checks line as a solution to the current practice exercise."""
        if self._practice() is None:
            return False

        with self.error_handler:
            result = check_attempt(line, self.lesson, self.options)
            if result.passed:
                print(colored("✓ Correct! Well done!", config.COLORS["success"]))
                self._print_output(line)
                self.completed.add(self.current)
            else:
                print(colored("✗ Not quite right. ", config.COLORS["error"]) + result.message)
                print(colored("Type 'hint' for a hint or 'solution' to see one.", config.COLORS["debug"]))
        return False

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_next(self, arg):
        """Moves on to the next lesson."""
        if self.current + 1 >= len(self.lessons):
            print(colored("\nCongratulations! You've completed the tutorial!", config.COLORS["success"],
                          attrs=["bold"]))
            return self.do_quit(arg)

        self.current += 1
        self._show()
        return False

    def do_lesson(self, arg):
        """Jumps to a lesson: lesson N"""
        if not arg.strip().isdigit() or not 1 <= int(arg) <= len(self.lessons):
            self.error_handler.warn("lesson expects a number between 1 and {}", len(self.lessons), diagnosis=False)
            return

        self.current = int(arg) - 1
        self._show()

    def do_lessons(self, arg):
        """Lists all lessons."""
        for idx, lesson in enumerate(self.lessons):
            mark = colored("✓", config.COLORS["success"]) if idx in self.completed else " "
            print(f"{mark} {idx + 1}. {lesson.title}")

    def do_show(self, arg):
        """Shows the current lesson again."""
        self._show()

    do_retry = do_show

    def do_hint(self, arg):
        """Shows a hint for the current practice exercise."""
        if self._practice() is not None:
            print(colored("Hint: ", "yellow") + self.lesson.practice.hint)

    def do_solution(self, arg):
        """Shows a solution for the current practice exercise and what it prints."""
        if self._practice() is not None:
            print(colored("Solution: ", config.COLORS["success"]) + self.lesson.practice.solution)
            self._print_output(self.lesson.practice.solution)

    def do_reference(self, arg):
        """Shows the quick reference."""
        print(colored("\nBrainfuck Quick Reference", config.COLORS["info"], attrs=["bold"]))
        for section, entries in REFERENCE.items():
            print(colored(f"\n{section}:", "yellow"))
            for code, text in entries:
                print(f"  {code:<10} : {text}" if code else f"  • {text}")

    def do_EOF(self, arg):
        """Exits tutorial."""
        print()
        return self.do_quit(arg)

    def do_quit(self, arg):
        """Exits tutorial."""
        practiced = sum(1 for lesson in self.lessons if lesson.practice)
        print(colored(f"Practice exercises solved: {len(self.completed)}/{practiced}", "yellow"))
        print(colored("Thanks for learning Brainfuck!", config.COLORS["info"]))
        return True
