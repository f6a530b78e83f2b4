"""Tutorial lessons. A practice attempt is correct when it behaves like the lesson's solution: both succeed with the
same output and the same first PRACTICE_CELLS cells of memory.
"""

from collections import namedtuple

from bflearn.lang.error import GenericException
from bflearn.lang.exercises import validate

PRACTICE_CELLS = 10

Practice = namedtuple("Practice", ["task", "solution", "hint"])
Lesson = namedtuple("Lesson", ["title", "content", "practice"], defaults=[None])

LESSONS = [
    Lesson("Introduction to Brainfuck", """
Brainfuck is a minimal language created by Urban Müller in 1993. It has only 8 commands and is still
Turing-complete.

A program works on:
- a memory array of 30,000 byte cells, all starting at 0
- a data pointer, starting at the leftmost cell
- an instruction pointer, walking through the program
- an input stream and an output stream"""),

    Lesson("The Eight Commands", """
>  move the data pointer one cell right
<  move the data pointer one cell left
+  increment the current cell
-  decrement the current cell
.  output the current cell as an ASCII character
,  read one byte of input into the current cell
[  if the current cell is 0, jump past the matching ]
]  if the current cell is not 0, jump back to the matching [

Every other character is a comment.""",
           Practice("Write a program that sets the first cell to 5", "+++++", "Use the + command five times")),

    Lesson("Memory and Pointer Movement", """
Memory is one long row of cells:

[0][0][0][0][0][0][0]...
 ^
pointer

>+>++ moves right, adds 1, moves right again and adds 2, leaving [0][1][2].""",
           Practice("Set the first three cells to 1, 2, 3", "+>++>+++", "Add values then move right with >")),

    Lesson("Input and Output", """
. prints the current cell as a character, and , reads one byte into it.

To print 'A' (ASCII 65), build 65 with a loop and print it:

++++++++[>++++++++<-]>+.

The loop adds 8 to cell 1 eight times (8*8 = 64), then one more + makes 65.""",
           Practice("Output the letter \"H\" (ASCII 72)", "+++++++++[>++++++++<-]>.",
                    "Try 9*8=72, use a loop for efficiency")),

    Lesson("Loops", """
[ skips its body when the current cell is 0, and ] repeats it while the cell is not 0.

[-]     decrements the cell until it reaches 0
[->+<]  moves the current cell's value into the next cell""",
           Practice("Write a program to clear the current cell (set it to 0)", "[-]", "Keep decrementing until zero")),

    Lesson("Your First Real Program: Cat", """
The cat program echoes its input:

,[.,]

, reads the first character, and the loop prints it and reads the next one until a 0 byte arrives.""",
           Practice("Write the cat program", ",[.,]", "Read, loop while outputting and reading")),

    Lesson("Moving and Copying Values", """
Move a value right:   [->+<]
Copy a value:         [->+>+<<]>>[-<<+>>]   (the second loop restores the original from a temporary cell)
Add to the left cell: [-<+>]""",
           Practice("Move the value in the current cell two cells to the right", "[->>+<<]",
                    "Similar to [->+<] but move two cells")),

    Lesson("Hello World Explained", """
Hello World starts by filling several cells with one loop:

++++++++++[>+++++++>++++++++++>+++>+<<<<-]

which leaves 70, 100, 30 and 10 in cells 1 to 4. Each character is then a small adjustment away:
>++. prints 'H' (70+2=72), >+. prints 'e' (100+1=101), and so on.""",
           Practice("Output \"Hi\" using the loop technique", "+++++++++[>++++++++>++++++++++++<<-]>.>---.",
                    "Set up base values with one loop, then adjust each one")),

    Lesson("Conditional Execution (If-Then)", """
There is no if statement, but a loop that clears its own condition runs at most once:

x[ ...code... x[-] ]

The body runs only when x is not 0, and clearing x at the end of the body leaves the loop.""",
           Practice("If the current cell is not zero, print \"1\" (the cell starts at 1)",
                    "+[>+++++++[>+++++++<-]>.[-]<<[-]]", "Build ASCII 49 inside the loop, then clear the condition")),

    Lesson("Advanced Techniques", """
- Multiplication: nested loops for repeated addition
- Division: repeated subtraction with a counter
- Comparison: decrement two cells together until one reaches 0
- Arrays: use the pointer position as the index

Multiply 3*5: +++[->+++++<]> adds 5 to the next cell three times, giving 15.""",
           Practice("Multiply 4*3 using loops", "++++[->+++<]>", "Add 3 to next cell, 4 times")),
]

REFERENCE = {
    "Commands": [
        (">", "Move pointer right"),
        ("<", "Move pointer left"),
        ("+", "Increment current cell"),
        ("-", "Decrement current cell"),
        (".", "Output ASCII character"),
        (",", "Input one byte"),
        ("[", "Jump past ] if cell is 0"),
        ("]", "Jump back to [ if cell is not 0"),
    ],
    "Common Patterns": [
        ("[-]", "Clear cell"),
        ("[->+<]", "Move value right"),
        ("[->+>+<<]", "Copy value"),
        (",[.,]", "Cat program"),
        ("[>]", "Find next zero"),
    ],
    "Tips": [
        ("", "Use loops for efficient value setting"),
        ("", "Remember ASCII values (A=65, a=97, 0=48)"),
        ("", "Comments are any non-command characters"),
        ("", "Cells wrap at 256 (byte overflow)"),
    ],
}


def get_lesson(number):
    """Lesson by 1-based number."""
    if not 1 <= number <= len(LESSONS):
        raise GenericException("lesson number must be between 1 and {}", len(LESSONS), diagnosis=False)
    return LESSONS[number - 1]


def check_attempt(attempt, lesson, options=None):
    """Grades attempt against lesson's practice. Returns a Grade."""
    return validate(lesson.practice.solution, attempt, memory_cells=PRACTICE_CELLS, options=options)
