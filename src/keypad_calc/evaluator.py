"""
Calculator state machine.

Each transition is a pure function taking a CalculatorState and returning a
new one. Operations chain left to right with immediate evaluation: pressing
an operator resolves the pending operation before queuing the next one.
The Evaluator class owns one state record for an interactive session.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from decimal import Decimal
from typing import Optional

from .state import ERROR_DISPLAY, INITIAL_STATE, CalculatorState, Operator

logger = logging.getLogger(__name__)

DIGITS = frozenset("0123456789")
RESULT_DECIMALS = 10

ERROR_STATE = CalculatorState(
    display=ERROR_DISPLAY,
    previous_value=None,
    operator=None,
    awaiting_operand=True,
)


def apply_operator(op: Operator, a: float, b: float) -> float:
    """
    Apply a binary operator.

    Args:
        op: Operator to apply
        a: Left operand
        b: Right operand (non-zero for division, checked by the caller)

    Returns:
        Raw float result
    """
    operations = {
        Operator.ADD: lambda x, y: x + y,
        Operator.SUBTRACT: lambda x, y: x - y,
        Operator.MULTIPLY: lambda x, y: x * y,
        Operator.DIVIDE: lambda x, y: x / y,
    }
    return operations[op](a, b)


def canonical_number(value: float) -> str:
    """Render a float as positional text without redundant zeros."""
    if value == 0:
        return "0"
    if value.is_integer():
        return str(int(value))
    # repr gives the shortest round-tripping digits; Decimal drops the exponent
    return format(Decimal(repr(value)), "f")


def format_result(result: float) -> str:
    """
    Format an arithmetic result for the display.

    Integral values render without a decimal point. Anything else is rounded
    to RESULT_DECIMALS fractional digits and trailing zeros are stripped, so
    1/3 shows as 0.3333333333 and 0.1 + 0.2 as 0.3.
    """
    if result.is_integer():
        return canonical_number(result)
    return canonical_number(float(f"{result:.{RESULT_DECIMALS}f}"))


def parse_number(text: str) -> float:
    return float(text)


def _resolve(state: CalculatorState) -> Optional[str]:
    """Compute the pending operation; None means the Error state."""
    left = parse_number(state.previous_value)
    right = parse_number(state.display)

    if state.operator is Operator.DIVIDE and right == 0:
        logger.info("Division by zero: %s ÷ %s", state.previous_value, state.display)
        return None

    result = apply_operator(state.operator, left, right)
    if not math.isfinite(result):
        logger.info(
            "Result out of range: %s %s %s", state.previous_value, state.operator, state.display
        )
        return None

    text = format_result(result)
    logger.debug("Resolved %s %s %s = %s", state.previous_value, state.operator, state.display, text)
    return text


def clear_all(state: CalculatorState) -> CalculatorState:
    return INITIAL_STATE


def backspace(state: CalculatorState) -> CalculatorState:
    if state.awaiting_operand:
        return state
    trimmed = state.display[:-1]
    if trimmed in ("", "-", "-0"):
        trimmed = "0"
    return replace(state, display=trimmed)


def input_digit(state: CalculatorState, digit: str) -> CalculatorState:
    if state.awaiting_operand:
        return replace(state, display=digit, awaiting_operand=False)
    if state.display == "0":
        return replace(state, display=digit)
    entered = state.display + digit
    if not math.isfinite(parse_number(entered)):
        logger.info("Entry out of range: %d characters", len(entered))
        return ERROR_STATE
    return replace(state, display=entered)


def _with_number(state: CalculatorState, value: float) -> CalculatorState:
    if not math.isfinite(value):
        logger.info("Value out of range: %s", state.display)
        return ERROR_STATE
    return replace(state, display=canonical_number(value))


def input_decimal(state: CalculatorState) -> CalculatorState:
    if state.awaiting_operand:
        return replace(state, display="0.", awaiting_operand=False)
    if "." in state.display:
        return state
    return replace(state, display=state.display + ".")


def toggle_sign(state: CalculatorState) -> CalculatorState:
    if state.is_error:
        return state
    return _with_number(state, -parse_number(state.display))


def percentage(state: CalculatorState) -> CalculatorState:
    if state.is_error:
        return state
    return _with_number(state, parse_number(state.display) / 100)


def perform_operation(state: CalculatorState, next_op: Operator) -> CalculatorState:
    """
    Resolve any pending operation and queue next_op.

    Pressing a second operator before typing a new operand only swaps the
    pending operator. Division by zero enters the Error state and drops
    next_op.
    """
    if state.is_error:
        return state

    if not state.has_pending_operation:
        return replace(
            state,
            previous_value=state.display,
            operator=next_op,
            awaiting_operand=True,
        )

    if state.awaiting_operand:
        return replace(state, operator=next_op)

    text = _resolve(state)
    if text is None:
        return ERROR_STATE

    return CalculatorState(
        display=text,
        previous_value=text,
        operator=next_op,
        awaiting_operand=True,
    )


def calculate(state: CalculatorState) -> CalculatorState:
    """Resolve the pending operation without queuing another one."""
    if not state.has_pending_operation:
        return state

    text = _resolve(state)
    if text is None:
        return ERROR_STATE

    return CalculatorState(
        display=text,
        previous_value=None,
        operator=None,
        awaiting_operand=True,
    )


class Evaluator:
    """Owns the calculator state for one interactive session."""

    def __init__(self, state: CalculatorState = INITIAL_STATE) -> None:
        self.state = state

    @property
    def display(self) -> str:
        return self.state.display

    @property
    def expression(self) -> str:
        return self.state.expression

    def clear_all(self) -> CalculatorState:
        self.state = clear_all(self.state)
        return self.state

    def backspace(self) -> CalculatorState:
        self.state = backspace(self.state)
        return self.state

    def input_digit(self, digit: str) -> CalculatorState:
        if digit not in DIGITS:
            raise ValueError(f"Not a digit: {digit!r}")
        self.state = input_digit(self.state, digit)
        return self.state

    def input_decimal(self) -> CalculatorState:
        self.state = input_decimal(self.state)
        return self.state

    def toggle_sign(self) -> CalculatorState:
        self.state = toggle_sign(self.state)
        return self.state

    def percentage(self) -> CalculatorState:
        self.state = percentage(self.state)
        return self.state

    def perform_operation(self, next_op: Operator) -> CalculatorState:
        self.state = perform_operation(self.state, Operator(next_op))
        return self.state

    def calculate(self) -> CalculatorState:
        self.state = calculate(self.state)
        return self.state

    def dispatch(self, command) -> CalculatorState:
        """Apply a command object from keypad_calc.commands."""
        from .commands import apply_command

        self.state = apply_command(self.state, command)
        return self.state

    def press(self, key: str) -> CalculatorState:
        """Apply a keyboard key; unmapped keys leave the state unchanged."""
        from .commands import command_from_key

        command = command_from_key(key)
        if command is None:
            return self.state
        return self.dispatch(command)
