"""Resolve raw path commands into absolute drawing ops.

Interpretation is a fold over the command list. The accumulator carries the
ops emitted so far and the cursor; nothing outside the accumulator is mutated,
so every call starts from a clean (0, 0) cursor.

Cursor rules:
- Absolute commands (M, L, C, Q) use operands as coordinates directly.
- Relative commands (m, l, c, q) add each operand pair to the cursor at the
  start of the operand group, control points included.
- After each positional op the cursor moves to the op's anchor point.
- Z/z closes the contour and leaves the cursor where it was.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from functools import reduce

from fontcaster.config import UnsupportedCommandPolicy
from fontcaster.core.parser import PathCommandParser
from fontcaster.domain.commands import CommandType, RawCommand
from fontcaster.domain.ops import (
    ORIGIN,
    ClosePath,
    CubicCurveTo,
    Cursor,
    DrawingOp,
    LineTo,
    MoveTo,
    PositionalOp,
    QuadCurveTo,
)


@dataclass(frozen=True)
class OpChunk:
    """Ops emitted by one command, linked to the chunks before it."""

    ops: tuple[DrawingOp, ...]
    previous: "OpChunk | None" = None


@dataclass(frozen=True)
class InterpreterState:
    """Accumulator threaded through the fold.

    Emitted ops are kept as a persistent linked list of per-command chunks,
    so each step only allocates the ops of its own command.
    """

    emitted: OpChunk | None = None
    cursor: Cursor = ORIGIN

    @property
    def ops(self) -> tuple[DrawingOp, ...]:
        """All emitted ops in source order."""
        chunks: list[tuple[DrawingOp, ...]] = []
        node = self.emitted
        while node is not None:
            chunks.append(node.ops)
            node = node.previous
        return tuple(op for chunk in reversed(chunks) for op in chunk)


def _resolve(cursor: Cursor, relative: bool, values: tuple[float, ...]) -> list[float]:
    """Turn an operand group into absolute coordinates."""
    if not relative:
        return list(values)
    return [
        value + (cursor.x if index % 2 == 0 else cursor.y)
        for index, value in enumerate(values)
    ]


def _build_op(command_type: CommandType, coords: list[float]) -> PositionalOp:
    if command_type == CommandType.MOVE_TO:
        return MoveTo(*coords)
    if command_type == CommandType.LINE_TO:
        return LineTo(*coords)
    if command_type == CommandType.CUBIC_TO:
        return CubicCurveTo(*coords)
    return QuadCurveTo(*coords)


def step(state: InterpreterState, command: RawCommand) -> InterpreterState:
    """Apply one raw command (with all of its repetitions) to the state."""
    if command.command_type == CommandType.CLOSE:
        return InterpreterState(
            emitted=OpChunk((ClosePath(),), state.emitted), cursor=state.cursor
        )

    ops: list[DrawingOp] = []
    cursor = state.cursor
    for group in command.groups():
        op = _build_op(command.command_type, _resolve(cursor, command.is_relative, group))
        ops.append(op)
        cursor = op.end
    return InterpreterState(emitted=OpChunk(tuple(ops), state.emitted), cursor=cursor)


def interpret(
    commands: Iterable[RawCommand],
    start: Cursor = ORIGIN,
) -> tuple[list[DrawingOp], Cursor]:
    """Interpret raw commands into drawing ops.

    Args:
        commands: Raw commands in source order
        start: Initial cursor position

    Returns:
        Tuple of (drawing ops, final cursor)
    """
    final = reduce(step, commands, InterpreterState(cursor=start))
    return list(final.ops), final.cursor


class PathInterpreter:
    """Parses and interprets path description strings.

    Example:
        interpreter = PathInterpreter()
        ops, cursor = interpreter.run("M0,0 L10,0 L10,10 Z")
        # ops == [MoveTo(0, 0), LineTo(10, 0), LineTo(10, 10), ClosePath()]
        # cursor == Cursor(10, 10)
    """

    def __init__(self, parser: PathCommandParser | None = None) -> None:
        self.parser = parser or PathCommandParser()

    @classmethod
    def with_policy(cls, unsupported: UnsupportedCommandPolicy) -> "PathInterpreter":
        """Create an interpreter whose parser uses the given policy."""
        return cls(PathCommandParser(unsupported=unsupported))

    def run(self, text: str) -> tuple[list[DrawingOp], Cursor]:
        """Parse and interpret a path description string.

        Raises:
            MalformedPathError: If the string cannot be tokenized
        """
        return interpret(self.parser.parse(text))
