"""Session control for the brainfuck interpreter: loads a program from a file or a literal string, runs it to
completion, and reports the result. Failures are thrown through the session's ErrorHandler.
"""

from termcolor import colored

from bflearn import config
from bflearn.config import Options
from bflearn.lang.display import render_memory
from bflearn.lang.error import GenericException
from bflearn.pure.machine import Interpreter


class Session:
    """Governs one program run, with control over interpreter options."""
    EXEC_FILE = "<exec>"  # filename used for code given on the command line
    SHOWN_CELLS = 20      # final memory cells printed in debug mode

    def __init__(self, error_handler, path, options=None, code=None):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path  # used for error messages
        self.options = options if options is not None else Options()
        self.interpreter = Interpreter(self.options)
        self.result = None

        if code is not None:
            self.code = code  # path is only a display name

        elif path == Session.EXEC_FILE:
            raise GenericException("'{}' requires code to execute", Session.EXEC_FILE, diagnosis=False)

        else:
            try:
                with open(path, "r") as file:
                    self.code = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

    def run(self, visualize=False):
        """Runs this session's program and prints its output. Partial output is printed before any error is thrown."""
        self.result = self.interpreter.execute(self.code)

        if not self.result.success:
            if self.result.output:
                print(colored("Partial output: ", "yellow") + self.result.output)
            self.error_handler.throw(self.result.exception)
            return self.result

        print(colored("✓ Program executed successfully", config.COLORS["success"]))
        print(colored("Output: ", "yellow") + self.result.output)

        if self.options.debug:
            print(colored("Iterations: ", config.COLORS["info"]) + str(self.result.iterations))
            print(colored(f"Final memory (first {Session.SHOWN_CELLS} cells):", config.COLORS["info"]))
            print(self.result.final_memory[:Session.SHOWN_CELLS])

        if visualize:
            print(render_memory(self.interpreter.state.memory, self.interpreter.pointer))

        return self.result
