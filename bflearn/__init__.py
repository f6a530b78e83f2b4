"""Interactive Brainfuck learning CLI."""
