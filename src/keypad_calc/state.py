"""
=============================================================================
MODULE NAME: state.py
=============================================================================

INPUT FILES:
- None (value types only).

OUTPUT FILES:
- None written directly; `to_dict()` feeds the JSON adapters.

VERSION HISTORY:
- v1.0 (2026-10-18): Initial calculator state record and operator set.

LAST UPDATED: 2026-10-18

NOTES:
- CalculatorState is immutable; every transition builds a new record.
- display always holds canonical numeric text or the ERROR_DISPLAY sentinel.
=============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

ERROR_DISPLAY = "Error"


class Operator(str, Enum):
    """Binary operators shown on the keypad."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "×"
    DIVIDE = "÷"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class CalculatorState:
    """Display text plus the pending left operand and operator."""

    display: str = "0"
    previous_value: Optional[str] = None
    operator: Optional[Operator] = None
    awaiting_operand: bool = False

    @property
    def is_error(self) -> bool:
        return self.display == ERROR_DISPLAY

    @property
    def has_pending_operation(self) -> bool:
        return self.previous_value is not None and self.operator is not None

    @property
    def expression(self) -> str:
        """Preview of the pending operation, e.g. ``"5 +"``."""
        if not self.has_pending_operation:
            return ""
        return f"{self.previous_value} {self.operator}"

    def to_dict(self) -> Dict:
        return {
            "display": self.display,
            "expression": self.expression,
            "previous_value": self.previous_value,
            "operator": self.operator.value if self.operator else None,
            "awaiting_operand": self.awaiting_operand,
            "error": self.is_error,
        }


INITIAL_STATE = CalculatorState()

__all__ = [
    "ERROR_DISPLAY",
    "INITIAL_STATE",
    "CalculatorState",
    "Operator",
]
