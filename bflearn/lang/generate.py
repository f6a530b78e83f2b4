"""Generates brainfuck programs that print a given text. Cell 0 holds the current character; the looped variant also
uses cell 1 as a loop counter, which is always 0 between characters.
"""

from bflearn.lang.error import GenericException

LOOP_THRESHOLD = 15  # differences above this are built with a multiplication loop


def _check(text):
    for idx, char in enumerate(text):
        if ord(char) > 255:
            raise GenericException("'{}' cannot be stored in a byte cell", char, start=idx, end=idx + 1, source=text)


def generate(text):
    """Straight-line program: a run of + or - from the previous character, then '.'."""
    _check(text)

    code, current = [], 0
    for char in text:
        diff = ord(char) - current
        code.append("+" * diff if diff > 0 else "-" * -diff)
        code.append(".")
        current = ord(char)
    return "".join(code)


def generate_looped(text):
    """Shorter program for texts with large jumps between characters: adds factor * times to cell 0 through a
    counter in cell 1, then the remainder.
    """
    _check(text)

    code, current = [], 0
    for char in text:
        diff = ord(char) - current
        sign = "+" if diff > 0 else "-"
        diff = abs(diff)

        if diff > LOOP_THRESHOLD:
            times = int(diff ** 0.5)
            factor, remainder = divmod(diff, times)
            code.append(">" + "+" * times + "[<" + sign * factor + ">-]<")
            diff = remainder

        code.append(sign * diff + ".")
        current = ord(char)
    return "".join(code)
