"""Tokenizer for path description strings.

Splits a path description (the ``d`` attribute of an SVG path element) into
raw commands. Every ASCII letter except ``e``/``E`` starts a new chunk; the
chunk runs until the next such letter. Operands inside a chunk are separated
by whitespace and/or commas.

Example:
    >>> PathCommandParser().parse("M0,0 L10,0 10,10 Z")
    [RawCommand(letter='M', operands=(0.0, 0.0)),
     RawCommand(letter='L', operands=(10.0, 0.0, 10.0, 10.0)),
     RawCommand(letter='Z', operands=())]
"""

import logging
import math
import re
from collections.abc import Iterator

from fontcaster.config import UnsupportedCommandPolicy
from fontcaster.domain.commands import COMMAND_ARITY, SUPPORTED_LETTERS, CommandType, RawCommand
from fontcaster.exceptions import MalformedPathError, UnsupportedCommandError

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[\s,]+")
_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# 'e'/'E' belong to number exponents, never to commands.
_EXPONENT_LETTERS = frozenset("eE")


def _is_command_letter(char: str) -> bool:
    return char.isascii() and char.isalpha() and char not in _EXPONENT_LETTERS


def _iter_chunks(text: str) -> Iterator[tuple[int, str, str]]:
    """Yield (offset, letter, body) for each command chunk in text.

    Raises:
        MalformedPathError: If non-blank text precedes the first command
    """
    start: int | None = None
    for index, char in enumerate(text):
        if not _is_command_letter(char):
            continue
        if start is None:
            if text[:index].strip():
                raise MalformedPathError(text[:index].strip(), "missing command letter", 0)
        else:
            yield start, text[start], text[start + 1:index]
        start = index

    if start is None:
        if text.strip():
            raise MalformedPathError(text.strip(), "missing command letter", 0)
        return
    yield start, text[start], text[start + 1:]


def _parse_operands(letter: str, body: str, offset: int) -> tuple[float, ...]:
    tokens = [token for token in _SEPARATORS.split(body.strip()) if token]
    operands: list[float] = []
    for token in tokens:
        if _NUMBER.fullmatch(token) is None:
            raise MalformedPathError(
                f"{letter}{body}".strip(), f"'{token}' is not a number", offset
            )
        value = float(token)
        if not math.isfinite(value):
            raise MalformedPathError(
                f"{letter}{body}".strip(), f"'{token}' is not a finite number", offset
            )
        operands.append(value)
    return tuple(operands)


class PathCommandParser:
    """Splits path description strings into raw commands.

    Chunks with more operands than the command's arity are kept as a single
    RawCommand; RawCommand.groups() yields one operand group per implicit
    repetition.

    Example:
        parser = PathCommandParser(unsupported=UnsupportedCommandPolicy.REJECT)
        commands = parser.parse("M0 0 A 5 5 0 0 1 10 10")  # raises
    """

    def __init__(
        self,
        unsupported: UnsupportedCommandPolicy = UnsupportedCommandPolicy.SKIP,
    ) -> None:
        """Initialize the parser.

        Args:
            unsupported: Whether to skip or reject letters outside the
                supported alphabet (arcs, shorthand curves, H/V lines)
        """
        self.unsupported = unsupported

    def parse(self, text: str) -> list[RawCommand]:
        """Tokenize a path description string.

        Args:
            text: Path description, e.g. "M0,0 L10,0 L10,10 Z"

        Returns:
            Raw commands in source order

        Raises:
            MalformedPathError: If a chunk's operands are not numbers or do
                not fill whole operand groups
            UnsupportedCommandError: If an unsupported letter is found and the
                policy is REJECT
        """
        commands: list[RawCommand] = []
        for offset, letter, body in _iter_chunks(text):
            if letter not in SUPPORTED_LETTERS:
                if self.unsupported == UnsupportedCommandPolicy.REJECT:
                    raise UnsupportedCommandError(letter, f"{letter}{body}".strip(), offset)
                logger.debug("Skipping unsupported path command %r at offset %d", letter, offset)
                continue

            operands = _parse_operands(letter, body, offset)
            self._check_arity(letter, body, operands, offset)
            commands.append(RawCommand(letter=letter, operands=operands))

        return commands

    @staticmethod
    def _check_arity(letter: str, body: str, operands: tuple[float, ...], offset: int) -> None:
        arity = COMMAND_ARITY[CommandType(letter.upper())]
        chunk = f"{letter}{body}".strip()
        if arity == 0:
            if operands:
                raise MalformedPathError(chunk, "close command takes no operands", offset)
            return
        if not operands:
            raise MalformedPathError(chunk, f"expected at least {arity} operands", offset)
        if len(operands) % arity:
            raise MalformedPathError(
                chunk,
                f"{len(operands)} operands do not form groups of {arity}",
                offset,
            )


def parse_path(
    text: str,
    unsupported: UnsupportedCommandPolicy = UnsupportedCommandPolicy.SKIP,
) -> list[RawCommand]:
    """Tokenize a path description string with a one-off parser."""
    return PathCommandParser(unsupported=unsupported).parse(text)
