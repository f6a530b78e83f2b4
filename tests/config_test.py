import unittest

from bflearn import config
from bflearn.config import Options
from bflearn.lang.error import ConfigError


class OptionsTestCase(unittest.TestCase):

    def test_defaults(self):
        options = Options()
        self.assertEqual(config.MEMORY_SIZE, options.memory_size)
        self.assertEqual(config.MAX_ITERATIONS, options.max_iterations)
        self.assertFalse(options.debug)
        self.assertEqual("", options.input_data)

    def test_validation(self):
        should_fail = [
            {"memory_size": 0},
            {"memory_size": -5},
            {"memory_size": 2.5},
            {"memory_size": True},
            {"max_iterations": 0},
            {"max_iterations": "10"},
            {"input_data": 5},
            {"input_data": ["a"]},
        ]
        for case in should_fail:
            self.assertRaises(ConfigError, Options, **case)

        for input_data in ("abc", b"abc", bytearray(b"abc")):
            self.assertEqual(input_data, Options(input_data=input_data).input_data)

    def test_override(self):
        options = Options(memory_size=10)
        overridden = options.override(memory_size=None, max_iterations=7, debug=True)

        self.assertEqual(10, overridden.memory_size)
        self.assertEqual(7, overridden.max_iterations)
        self.assertTrue(overridden.debug)
        self.assertEqual(config.MAX_ITERATIONS, options.max_iterations)  # original untouched

        self.assertRaises(ConfigError, options.override, speed=3)
        self.assertRaises(ConfigError, options.override, memory_size=-1)

    def test_message(self):
        with self.assertRaises(ConfigError) as context:
            Options(memory_size=0)
        self.assertEqual("memory_size must be a positive integer, got '0'", str(context.exception))
        self.assertEqual("ConfigError", context.exception.category)


if __name__ == '__main__':
    unittest.main()
