"""Keypad calculator with left-to-right immediate evaluation."""

from .evaluator import Evaluator, format_result
from .state import ERROR_DISPLAY, INITIAL_STATE, CalculatorState, Operator

__version__ = "0.1.0"

__all__ = [
    "ERROR_DISPLAY",
    "INITIAL_STATE",
    "CalculatorState",
    "Evaluator",
    "Operator",
    "format_result",
]
