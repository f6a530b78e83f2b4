import io
import unittest
from contextlib import redirect_stdout

from bflearn.config import Options
from bflearn.lang.exercises import get_exercises
from bflearn.lang.shell import Debugger, Trainer, Tutorial
from bflearn.lang.tutorial import LESSONS
from bflearn.pure.machine import Phase


def run_commands(shell, *lines):
    """Feeds lines to shell.onecmd, returning (last stop flag, captured stdout)."""
    stdout = io.StringIO()
    stop = False
    with redirect_stdout(stdout):
        for line in lines:
            stop = shell.onecmd(line)
            if stop:
                break
    return stop, stdout.getvalue()


class DebuggerTestCase(unittest.TestCase):

    def test_next(self):
        debugger = Debugger("+++.")
        __, stdout = run_commands(debugger, "n", "next")

        self.assertIn("Step 0: + at position 0", stdout)
        self.assertIn("Step 1: + at position 1", stdout)
        self.assertIn("Memory[0] = 1", stdout)
        self.assertEqual([2], debugger.interpreter.memory_snapshot(0, 1))

        __, stdout = run_commands(debugger, "next 5")
        self.assertIn("Program finished", stdout)
        self.assertTrue(debugger.finished)

    def test_empty_line_steps(self):
        debugger = Debugger("+>+")
        run_commands(debugger, "", "")
        self.assertEqual(2, debugger.steps)
        self.assertEqual(1, debugger.interpreter.pointer)

    def test_continue(self):
        debugger = Debugger("++++++++[>++++++++<-]>+.")
        __, stdout = run_commands(debugger, "c")
        self.assertIn("Program finished", stdout)
        self.assertIn("A", stdout)
        self.assertIs(Phase.DONE, debugger.interpreter.phase)

    def test_continue_ceiling(self):
        debugger = Debugger("+[]", options=Options(max_iterations=50))
        __, stdout = run_commands(debugger, "continue")
        self.assertIn("maximum iterations", stdout)
        self.assertFalse(debugger.finished)
        self.assertEqual(50, debugger.interpreter.state.iterations)

    def test_continue_keeps_no_history(self):
        debugger = Debugger("+[+]", "<x>", Options(debug=True))
        run_commands(debugger, "continue")
        self.assertEqual(512, debugger.interpreter.state.iterations)
        self.assertEqual(0, len(debugger.interpreter.state.history))

    def test_memory(self):
        debugger = Debugger("+>++>+++")
        __, stdout = run_commands(debugger, "c", "m 0 4", "memory x")
        self.assertIn("[1, 2, 3, 0]", stdout)
        self.assertIn("memory expects integers", stdout)

    def test_errors_are_not_fatal(self):
        debugger = Debugger("+<")
        stop, stdout = run_commands(debugger, "n", "n", "n")
        self.assertFalse(stop)
        self.assertIn("Memory underflow", stdout)
        self.assertIn("program has finished", stdout)

        debugger = Debugger("[[]")
        __, stdout = run_commands(debugger, "n")
        self.assertIn("Unmatched [ at position ", stdout)

    def test_reset(self):
        debugger = Debugger("+.")
        run_commands(debugger, "c", "reset")
        self.assertEqual(0, debugger.steps)
        self.assertIs(Phase.NOT_STARTED, debugger.interpreter.phase)

        run_commands(debugger, "n")
        self.assertEqual([1], debugger.interpreter.memory_snapshot(0, 1))

    def test_view_and_output(self):
        debugger = Debugger(",.", options=Options(input_data="Z"))
        __, stdout = run_commands(debugger, "n", "n", "output", "v")
        self.assertIn("Z", stdout)
        self.assertIn("Memory Visualization:", stdout)
        self.assertIn("Pointer position: 0", stdout)

    def test_quit(self):
        stop, stdout = run_commands(Debugger("+"), "q")
        self.assertTrue(stop)
        self.assertIn("Debugging stopped", stdout)

        stop, __ = run_commands(Debugger("+"), "bogus", "quit")
        self.assertTrue(stop)


class TrainerTestCase(unittest.TestCase):

    def test_session(self):
        exercises = get_exercises("beginner")
        trainer = Trainer("beginner", exercises)

        __, stdout = run_commands(trainer, "++++++++++", "+", "hint", "solution")
        self.assertIn("Correct!", stdout)
        self.assertIn("Not quite right.", stdout)
        self.assertIn("Use a loop with the - command", stdout)
        self.assertEqual(1, trainer.current)
        self.assertEqual(1, trainer.score)

        stop, stdout = run_commands(trainer, "[-]", "skip", "skip", "skip")
        self.assertTrue(stop)
        self.assertEqual(2, trainer.score)
        self.assertIn("Your score: 2/5", stdout)
        self.assertIn("Keep learning!", stdout)

    def test_errors_are_not_fatal(self):
        trainer = Trainer("beginner", get_exercises("beginner"))
        stop, stdout = run_commands(trainer, "[[")
        self.assertFalse(stop)
        self.assertIn("Unmatched [ at position", stdout)
        self.assertEqual(0, trainer.current)

    def test_quit(self):
        trainer = Trainer("intermediate", get_exercises("intermediate"))
        stop, stdout = run_commands(trainer, "quit")
        self.assertTrue(stop)
        self.assertIn("Your score: 0/5", stdout)


class TutorialTestCase(unittest.TestCase):

    def test_practice_lesson(self):
        tutorial = Tutorial(LESSONS, start=2)
        __, stdout = run_commands(tutorial, "show", "++++", "hint", "solution", "+++++")

        self.assertIn("Lesson 2: The Eight Commands", stdout)
        self.assertIn("Not quite right.", stdout)
        self.assertIn("Use the + command five times", stdout)
        self.assertIn("Correct!", stdout)
        self.assertEqual({1}, tutorial.completed)

        __, stdout = run_commands(tutorial, "next", "+>++>+++")
        self.assertIn("Lesson 3: Memory and Pointer Movement", stdout)
        self.assertEqual({1, 2}, tutorial.completed)

    def test_output_is_shown(self):
        tutorial = Tutorial(LESSONS, start=4)
        __, stdout = run_commands(tutorial, "+++++++++[>++++++++<-]>.")
        self.assertIn("Correct!", stdout)
        self.assertIn("Output: H", stdout)

    def test_lesson_without_practice(self):
        tutorial = Tutorial(LESSONS)
        __, stdout = run_commands(tutorial, "+++", "hint")
        self.assertIn("has no practice exercise", stdout)
        self.assertEqual(set(), tutorial.completed)

    def test_navigation(self):
        tutorial = Tutorial(LESSONS)
        __, stdout = run_commands(tutorial, "lesson 9", "lesson 99", "lesson x")
        self.assertEqual(8, tutorial.current)
        self.assertIn("Conditional Execution", stdout)
        self.assertIn("lesson expects a number between 1 and ", stdout)

        __, stdout = run_commands(tutorial, "lessons", "reference")
        self.assertIn("10. Advanced Techniques", stdout)
        self.assertIn("Copy value", stdout)
        self.assertIn("Remember ASCII values", stdout)

        stop, stdout = run_commands(tutorial, "next", "next")
        self.assertTrue(stop)
        self.assertEqual(len(LESSONS) - 1, tutorial.current)
        self.assertIn("completed the tutorial", stdout)
        self.assertIn("Practice exercises solved: 0/9", stdout)

    def test_quit(self):
        stop, stdout = run_commands(Tutorial(LESSONS), "quit")
        self.assertTrue(stop)
        self.assertIn("Thanks for learning Brainfuck!", stdout)


if __name__ == '__main__':
    unittest.main()
