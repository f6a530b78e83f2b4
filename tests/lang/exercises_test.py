import random
import unittest

from bflearn.config import Options
from bflearn.lang.catalog import EXAMPLES, find_example
from bflearn.lang.error import GenericException
from bflearn.lang.exercises import (EXERCISES, Case, Exercise, check_case, get_exercises, grade, random_exercise,
                                    validate)
from bflearn.pure.lexical import preprocess
from bflearn.pure.machine import Interpreter


class ExercisesTestCase(unittest.TestCase):

    def test_solutions_pass(self):
        for level, exercises in EXERCISES.items():
            for exercise in exercises:
                result = grade(exercise.solution, exercise)
                self.assertTrue(result.passed, f"{level}: {exercise.title}: {result.message}")
                self.assertEqual("All tests passed!", result.message)

    def test_wrong_solutions(self):
        beginner = get_exercises("beginner")
        cases = {
            (0, "+++++++++"): "Memory mismatch. Expected: [10], Got: [9]",
            (3, "+."): "Output mismatch. Expected: 'A', Got: '\\x01'",
            (1, "<"): "Execution error: Memory underflow",
            (1, "[-"): "Execution error: Unmatched [ at position 5",
        }
        for (idx, solution), message in cases.items():
            result = grade(solution, beginner[idx])
            self.assertFalse(result.passed, solution)
            self.assertEqual(message, result.message, solution)

    def test_setup_is_prepended(self):
        exercise = Exercise("Clear", "Clear cell", [Case(expected_memory=[0])], "", "[-]", setup="+++")
        self.assertTrue(grade("[-]", exercise).passed)
        self.assertFalse(grade("", exercise).passed)

    def test_check_case(self):
        self.assertIsNone(check_case(",.", Case("q", expected_output="q")))
        self.assertIsNotNone(check_case(",.", Case("q", expected_output="r")))

        case = Case(expected_memory=[1])
        self.assertEqual("Execution error: Maximum iterations (10) exceeded",
                         check_case("+[]", case, Options(max_iterations=10)))

    def test_get_exercises(self):
        self.assertEqual(5, len(get_exercises("advanced")))
        self.assertRaises(GenericException, get_exercises, "expert")

    def test_random_exercise(self):
        rng = random.Random(7)
        for level in ("beginner", "intermediate"):
            for _ in range(20):
                exercise = random_exercise(level, rng)
                self.assertTrue(grade(exercise.solution, exercise).passed, exercise.title)

        self.assertIsNone(random_exercise("advanced", rng))


class ValidateTestCase(unittest.TestCase):

    def test_agree(self):
        result = validate(",[.,]", ",[.,]", inputs=["abc", "", "x\0y"], memory_cells=5)
        self.assertTrue(result.passed)
        self.assertEqual("Programs agree on 3 input(s)", result.message)

        # same behavior from different code
        self.assertTrue(validate("++[-]", "[-]", memory_cells=1).passed)
        self.assertTrue(validate(",>,<.", ",.>,", inputs=["ab"]).passed)

    def test_disagree(self):
        result = validate(",.", ",..", inputs=["a", "b"])
        self.assertFalse(result.passed)
        self.assertEqual(2, len(result.failures))
        self.assertEqual("input 'a': expected output 'a', got 'aa'", result.message)

        result = validate("+", "++", memory_cells=1)
        self.assertEqual("input '': expected memory [1], got [2]", result.message)

        # memory is ignored unless asked for
        self.assertTrue(validate("+", "++").passed)

        result = validate("+", "<")
        self.assertEqual("input '': reference succeeded, candidate failed with Memory underflow", result.message)

    def test_independent_instances(self):
        # a candidate that fails must not leak state into the next input's runs
        result = validate(",.", ",.>>>", inputs=["a", "b"], options=Options(memory_size=3))
        self.assertFalse(result.passed)
        self.assertEqual(2, len(result.failures))


class CatalogTestCase(unittest.TestCase):

    def test_examples_preprocess(self):
        for category, examples in EXAMPLES.items():
            for name, example in examples.items():
                self.assertTrue(preprocess(example.code).code, f"{category}/{name}")

    def test_examples(self):
        cases = {
            "hello": "Hello World!\n",
            "cat": "cat",
            "echo255": "hi",
            "add": "A",
            "upper": "BRAINFUCK",
        }
        for name, expected in cases.items():
            __, example = find_example(name)
            result = Interpreter().execute(example.code, input_data=example.input_data)
            self.assertTrue(result.success, name)
            self.assertEqual(expected, result.output, name)

    def test_find_example(self):
        self.assertEqual("guide", find_example("findzero")[0])
        self.assertRaises(GenericException, find_example, "nope")


if __name__ == '__main__':
    unittest.main()
