from __future__ import annotations

import re

from src.domain.entities.operation import (
    ConvertToGray,
    FlipHorizontal,
    FlipVertical,
    Operation,
    Resize,
    Rotate,
    RotateLeft,
    RotateRight,
    Thumbnail,
)
from src.domain.errors import (
    MalformedCommandArgument,
    NoParametersSpecified,
    UnrecognizedCommand,
)

COMMAND_SEPARATOR = ","
ARGUMENT_SEPARATOR = "-"

_SIGNED_INT = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_INT = re.compile(r"[0-9]+")

# rotate degrees fit a signed 32-bit integer, resize percent an unsigned 16-bit one
ROTATE_RANGE = (-(2**31), 2**31 - 1)
RESIZE_RANGE = (0, 2**16 - 1)

# Commands that take no argument, keyed by their exact (case-sensitive) name.
_SIMPLE_COMMANDS: dict[str, Operation] = {
    "fliph": FlipHorizontal(),
    "flipv": FlipVertical(),
    "rotateleft": RotateLeft(),
    "rotateright": RotateRight(),
    "grayscale": ConvertToGray(),
    "thumbnail": Thumbnail(),
}

class CommandParser:
    """Parse a comma-separated command list into an ordered list of operations.

    Grammar::

        commands := token ("," token)*
        token    := name ["-" argument]

    ``rotate`` requires a signed integer argument and ``resize`` an unsigned
    one. Parsing is fail-fast: the first bad token aborts the whole list.
    """

    @staticmethod
    def parse(command_string: str | None) -> list[Operation]:
        if command_string is None or not command_string.strip():
            raise NoParametersSpecified()
        return [
            CommandParser.parse_token(token.strip())
            for token in command_string.split(COMMAND_SEPARATOR)
        ]

    @staticmethod
    def parse_token(token: str) -> Operation:
        name, separator, argument = token.partition(ARGUMENT_SEPARATOR)

        if name == "rotate":
            degrees = CommandParser._integer(token, argument, _SIGNED_INT, ROTATE_RANGE)
            return Rotate(degrees=degrees)
        if name == "resize":
            percent = CommandParser._integer(token, argument, _UNSIGNED_INT, RESIZE_RANGE)
            return Resize(percent=percent)

        operation = _SIMPLE_COMMANDS.get(name)
        if operation is None:
            raise UnrecognizedCommand(name)
        if separator:
            raise MalformedCommandArgument(token, f"'{name}' takes no argument")
        return operation

    @staticmethod
    def _integer(
        token: str, argument: str, pattern: re.Pattern[str], bounds: tuple[int, int]
    ) -> int:
        if not argument:
            raise MalformedCommandArgument(token, "missing argument")
        if not pattern.fullmatch(argument):
            raise MalformedCommandArgument(token)
        try:
            value = int(argument)
        except ValueError:
            # longer than the interpreter's int conversion limit
            raise MalformedCommandArgument(token, "argument out of range") from None
        low, high = bounds
        if not low <= value <= high:
            raise MalformedCommandArgument(token, f"argument must be between {low} and {high}")
        return value


def parse(command_string: str | None) -> list[Operation]:
    return CommandParser.parse(command_string)
