"""Error handling for the brainfuck interpreter. Only GenericExceptions should be encountered during running: if another
type of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw an interpreter error/warning."""
    category = "error"

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False, source=None,
                 source_pos=None):
        """Parses args for GenericException or warning. exprs are formatted into msg. source is the offending expr
        (usually the cleaned program) that start and end index into, and defaults to exprs[0]. source_pos is the
        (line, column) of start in the original source, if known.
        """
        if exprs is None:
            exprs = ""
        if isinstance(exprs, (str, int)):
            exprs = [exprs]
        exprs = [str(expr) for expr in exprs]

        self.message = msg.format(*exprs)
        self.colored_msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = source if source is not None else exprs[0]
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal
        self.source_pos = source_pos

        super().__init__(self.message)


class ProgramSyntaxError(GenericException):
    """Unmatched bracket found while preprocessing. The program never starts."""
    category = "SyntaxError"


class BoundsError(GenericException):
    """Data pointer moved outside of memory."""
    category = "BoundsError"


class ResourceLimitError(GenericException):
    """Iteration ceiling exceeded, usually an infinite loop."""
    category = "ResourceLimitError"


class ConfigError(GenericException):
    category = "ConfigError"


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom interpreter errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"
    WINDOW = 30  # max chars of program shown on each side of a diagnosis

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = []

    def register_file(self, path):
        """Registers path in traceback. Errors are reported against every registered file."""
        if path not in self.traceback:
            self.traceback.append(path)

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded. Long exprs are cut down to a window around
        the offending part.
        """
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        offset = max(error.start - ErrorHandler.WINDOW, 0)
        expr = error.expr[offset:error.end + ErrorHandler.WINDOW]
        start, end = error.start - offset, max(error.end - offset, 1)

        prefix = "  ..." if offset else "  "
        diagnosis = prefix + expr[:start]
        diagnosis += colored(expr[start:end], color, attrs=["bold"])
        diagnosis += expr[end:]
        if error.end + ErrorHandler.WINDOW < len(error.expr):
            diagnosis += "..."
        diagnosis += "\n"

        diagnosis += " " * len(prefix) + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), color, attrs=["bold"])

        return diagnosis

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = GenericException(*args, **kwargs)

        location = f"{self.traceback[0]}: " if self.traceback else ""

        error_msg = colored(location, attrs=["bold"]) if location else ""
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.colored_msg

        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error, warning=True))

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a GenericException, and self.traceback must be a
        list of the files the error may have originated from.
        """
        error_msg = ""
        if error.source_pos is not None:
            line_num, col = error.source_pos
            for file in self.traceback:
                error_msg += f"  File '{file}', line {line_num}, column {col}:\n"

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored(f"{error.category}: ", ErrorHandler.ERROR, attrs=["bold"]) + error.colored_msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
