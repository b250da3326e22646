"""
Command vocabulary for the calculator.

Adapters (web, CLI) translate clicks and key presses into these commands;
apply_command() folds one command into a CalculatorState.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Union

from . import evaluator
from .state import INITIAL_STATE, CalculatorState, Operator


class CommandError(ValueError):
    """Raised when adapter input cannot be turned into a command."""


@dataclass(frozen=True, slots=True)
class Digit:
    value: str

    def __post_init__(self) -> None:
        if self.value not in evaluator.DIGITS:
            raise CommandError(f"Invalid digit: {self.value!r}")


@dataclass(frozen=True, slots=True)
class DecimalPoint:
    pass


@dataclass(frozen=True, slots=True)
class Operation:
    operator: Operator


@dataclass(frozen=True, slots=True)
class Equals:
    pass


@dataclass(frozen=True, slots=True)
class Clear:
    pass


@dataclass(frozen=True, slots=True)
class Backspace:
    pass


@dataclass(frozen=True, slots=True)
class ToggleSign:
    pass


@dataclass(frozen=True, slots=True)
class Percent:
    pass


Command = Union[Digit, DecimalPoint, Operation, Equals, Clear, Backspace, ToggleSign, Percent]

# Keypad labels and ASCII keyboard aliases
OPERATOR_ALIASES: Dict[str, Operator] = {
    "+": Operator.ADD,
    "-": Operator.SUBTRACT,
    "−": Operator.SUBTRACT,
    "×": Operator.MULTIPLY,
    "*": Operator.MULTIPLY,
    "÷": Operator.DIVIDE,
    "/": Operator.DIVIDE,
}

KEY_COMMANDS: Dict[str, Command] = {
    ".": DecimalPoint(),
    "Enter": Equals(),
    "=": Equals(),
    "Escape": Clear(),
    "Backspace": Backspace(),
    "%": Percent(),
}

_HANDLERS: Dict[type, Callable[[CalculatorState, Command], CalculatorState]] = {
    Digit: lambda s, c: evaluator.input_digit(s, c.value),
    DecimalPoint: lambda s, c: evaluator.input_decimal(s),
    Operation: lambda s, c: evaluator.perform_operation(s, c.operator),
    Equals: lambda s, c: evaluator.calculate(s),
    Clear: lambda s, c: evaluator.clear_all(s),
    Backspace: lambda s, c: evaluator.backspace(s),
    ToggleSign: lambda s, c: evaluator.toggle_sign(s),
    Percent: lambda s, c: evaluator.percentage(s),
}


def parse_operator(symbol: str) -> Operator:
    try:
        return OPERATOR_ALIASES[symbol]
    except KeyError:
        raise CommandError(f"Unknown operator: {symbol!r}") from None


def apply_command(state: CalculatorState, command: Command) -> CalculatorState:
    """Return the state that follows `command`."""
    handler = _HANDLERS.get(type(command))
    if handler is None:
        raise CommandError(f"Unsupported command: {command!r}")
    return handler(state, command)


def run_commands(
    commands: Iterable[Command], state: CalculatorState = INITIAL_STATE
) -> CalculatorState:
    for command in commands:
        state = apply_command(state, command)
    return state


def command_from_key(key: str) -> Optional[Command]:
    """
    Map a keyboard key to a command.

    Args:
        key: Key name as reported by the browser or typed on the CLI
             (e.g. "7", "*", "Enter", "Escape")

    Returns:
        The matching command, or None for keys the keypad ignores
    """
    if key in evaluator.DIGITS:
        return Digit(key)
    if key in ("+", "-", "*", "/"):
        return Operation(OPERATOR_ALIASES[key])
    return KEY_COMMANDS.get(key)


def command_from_payload(action: str, value: Optional[str] = None) -> Command:
    """
    Build a command from an API request.

    Args:
        action: One of digit, decimal, operator, equals, clear, backspace,
                toggle_sign, percent
        value: Digit or operator symbol for the actions that need one

    Returns:
        The matching command

    Raises:
        CommandError: If the action is unknown or its value is invalid
    """
    if action == "digit":
        if not isinstance(value, str):
            raise CommandError("digit action requires a string value")
        return Digit(value)
    if action == "operator":
        if not isinstance(value, str):
            raise CommandError("operator action requires a string value")
        return Operation(parse_operator(value))

    simple = {
        "decimal": DecimalPoint,
        "equals": Equals,
        "clear": Clear,
        "backspace": Backspace,
        "toggle_sign": ToggleSign,
        "percent": Percent,
    }
    if action not in simple:
        raise CommandError(f"Unknown action: {action}")
    return simple[action]()


__all__ = [
    "Backspace",
    "Clear",
    "Command",
    "CommandError",
    "DecimalPoint",
    "Digit",
    "Equals",
    "Operation",
    "Percent",
    "ToggleSign",
    "apply_command",
    "command_from_key",
    "command_from_payload",
    "parse_operator",
    "run_commands",
]
