"""Raw path commands as produced by the path tokenizer.

A raw command is one chunk of a path description: a command letter from the
supported alphabet followed by its operands. Chunks with more operands than
the command's arity carry implicit repetitions of the same command.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum


class CommandType(str, Enum):
    """Supported path command letters."""

    MOVE_TO = "M"
    LINE_TO = "L"
    CUBIC_TO = "C"
    QUAD_TO = "Q"
    CLOSE = "Z"


# Operands consumed by one application of each command.
COMMAND_ARITY: dict[CommandType, int] = {
    CommandType.MOVE_TO: 2,
    CommandType.LINE_TO: 2,
    CommandType.CUBIC_TO: 6,
    CommandType.QUAD_TO: 4,
    CommandType.CLOSE: 0,
}

SUPPORTED_LETTERS = frozenset("MmLlCcQqZz")


@dataclass(frozen=True, slots=True)
class RawCommand:
    """A parsed path chunk.

    Attributes:
        letter: Command letter exactly as written (case carries relativity)
        operands: Numeric operands in source order
    """

    letter: str
    operands: tuple[float, ...] = ()

    def __post_init__(self) -> None:
        if self.letter not in SUPPORTED_LETTERS:
            raise ValueError(f"Unsupported command letter: {self.letter!r}")

    @property
    def command_type(self) -> CommandType:
        """Command type regardless of relativity."""
        return CommandType(self.letter.upper())

    @property
    def is_relative(self) -> bool:
        """True for lowercase (relative) commands."""
        return self.letter.islower()

    @property
    def arity(self) -> int:
        """Number of operands consumed by one application."""
        return COMMAND_ARITY[self.command_type]

    @property
    def repeat_count(self) -> int:
        """How many times this command is applied."""
        if self.arity == 0:
            return 1
        return len(self.operands) // self.arity

    def groups(self) -> Iterator[tuple[float, ...]]:
        """Yield operand groups, one per application of the command.

        Close commands yield a single empty group.
        """
        if self.arity == 0:
            yield ()
            return
        for start in range(0, len(self.operands), self.arity):
            yield self.operands[start:start + self.arity]
