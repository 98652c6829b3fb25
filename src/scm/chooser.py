"""Selection between several candidate remotes or reference branches."""

import sys
from typing import Protocol, TextIO

from common.logger import console

from .errors import InteractiveInputFailure


class Chooser(Protocol):
    """Pick one of several choices.

    Implementations return the 0-based index of the selected choice.
    """

    def choose(self, request: str, choices: list[str]) -> int: ...


class ConsoleChooser:
    """Ask the operator through a numbered menu, re-prompting on bad input."""

    def __init__(self, input_stream: TextIO | None = None):
        self.input_stream = input_stream

    def choose(self, request: str, choices: list[str]) -> int:
        if not choices:
            raise ValueError("choices cannot be empty")

        stream = self.input_stream or sys.stdin
        menu = "\n".join(f"{i}: {choice}" for i, choice in enumerate(choices, 1))

        while True:
            console.print(f"\n{request}\n\n{menu}\n", markup=False, highlight=False)
            console.print("Selection: ", end="", markup=False)
            try:
                line = stream.readline()
            except OSError as e:
                raise InteractiveInputFailure(
                    "Error reading from input, code-critic will now exit."
                ) from e
            if not line:
                raise InteractiveInputFailure(
                    "Input closed before a selection was made, code-critic will now exit."
                )

            try:
                selection = int(line.strip())
            except ValueError:
                console.print("Invalid choice.")
                continue

            if 1 <= selection <= len(choices):
                return selection - 1
            console.print("Invalid choice.")


class FirstChoiceChooser:
    """Non-interactive chooser that always takes the first candidate."""

    def choose(self, request: str, choices: list[str]) -> int:
        if not choices:
            raise ValueError("choices cannot be empty")
        return 0
