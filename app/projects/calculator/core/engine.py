"""
Calculator engine: an immutable state record and a pure reducer.

Every key press becomes an Event; reduce(state, event) returns the next
state without mutating the old one. Arithmetic failures never raise, they
show up as the "Error" sentinel in current_operand.
"""
import enum
import math
import logging
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from app.projects.calculator.core.constants import (
    BACKSPACE_KEY,
    CLEAR_KEY,
    DECIMAL_KEY,
    EQUALS_KEY,
    ERROR,
    HISTORY_LIMIT,
    OPERATOR_SYMBOLS,
    OPERATOR_VALUES,
    PERCENT_KEY,
)
from app.projects.calculator.core.formatting import (
    equation,
    number_to_string,
    parse_number,
)

logger = logging.getLogger(__name__)

DIGITS = "0123456789"

# characters a partially typed or computed operand can hold; digits typed
# after an exponent result such as "1e-7" keep appending ("1e-75")
_OPERAND_CHARS = set(DIGITS + ".-+e")


class UnknownKeyError(ValueError):
    """Raised for a key label that is not on the keypad."""


class EventType(enum.Enum):
    Digit = "digit"
    Decimal = "decimal"
    Operator = "operator"
    Clear = "clear"
    Backspace = "backspace"
    Percent = "percent"
    Equals = "equals"


class CalculatorMode(enum.Enum):
    Entering = "entering"
    OperatorChosen = "operator_chosen"
    ShowingResult = "showing_result"
    Error = "error"


@dataclass(frozen=True)
class Event:
    type: EventType
    value: Optional[str] = None


def digit(d):
    if not isinstance(d, str) or len(d) != 1 or d not in DIGITS:
        raise UnknownKeyError(f"Not a digit: {d!r}")
    return Event(EventType.Digit, d)


def operator(op):
    """Operator event from a display symbol or its ASCII spelling."""
    value = OPERATOR_VALUES.get(op)
    if value is None:
        raise UnknownKeyError(f"Not an operator: {op!r}")
    return Event(EventType.Operator, value)


DECIMAL = Event(EventType.Decimal)
CLEAR = Event(EventType.Clear)
BACKSPACE = Event(EventType.Backspace)
PERCENT = Event(EventType.Percent)
EQUALS = Event(EventType.Equals)

_ACTION_KEYS = {
    CLEAR_KEY: CLEAR,
    BACKSPACE_KEY: BACKSPACE,
    PERCENT_KEY: PERCENT,
    EQUALS_KEY: EQUALS,
    DECIMAL_KEY: DECIMAL,
}


def event_for_key(label):
    """Map a keypad label ("7", "÷", "AC", ...) to its event."""
    if not isinstance(label, str):
        raise UnknownKeyError(f"Unknown key: {label!r}")
    if label in _ACTION_KEYS:
        return _ACTION_KEYS[label]
    if label in OPERATOR_VALUES:
        return operator(label)
    if len(label) == 1 and label in DIGITS:
        return digit(label)
    raise UnknownKeyError(f"Unknown key: {label!r}")


@dataclass(frozen=True)
class CalculatorState:
    current_operand: str = "0"
    pending_operand: Optional[str] = None
    pending_operator: Optional[str] = None
    overwrite_next: bool = False
    history: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_error(self):
        return self.current_operand == ERROR

    @property
    def has_pending(self):
        return self.pending_operand is not None and self.pending_operator is not None

    @property
    def mode(self):
        if self.is_error:
            return CalculatorMode.Error
        if self.overwrite_next:
            if self.has_pending:
                return CalculatorMode.OperatorChosen
            return CalculatorMode.ShowingResult
        return CalculatorMode.Entering

    def to_dict(self):
        return {
            "current_operand": self.current_operand,
            "pending_operand": self.pending_operand,
            "pending_operator": self.pending_operator,
            "overwrite_next": self.overwrite_next,
            "history": list(self.history),
        }

    @classmethod
    def from_dict(cls, data):
        """
        Rebuild a state from to_dict() output (e.g. the Flask session).
        Missing keys take their defaults. Raises ValueError on malformed data.
        """
        if not isinstance(data, dict):
            raise ValueError("Calculator state must be a dict")

        current = data.get("current_operand", "0")
        pending_operand = data.get("pending_operand")
        pending_operator = data.get("pending_operator")
        overwrite = data.get("overwrite_next", False)
        history = data.get("history") or []

        if not isinstance(current, str) or not current:
            raise ValueError("current_operand must be a non-empty string")
        if current != ERROR and not set(current) <= _OPERAND_CHARS:
            raise ValueError(f"Invalid current_operand: {current!r}")
        if (pending_operand is None) != (pending_operator is None):
            raise ValueError("pending_operand and pending_operator must be set together")
        if pending_operand is not None and not isinstance(pending_operand, str):
            raise ValueError("pending_operand must be a string")
        if pending_operator is not None and pending_operator not in OPERATOR_SYMBOLS:
            raise ValueError(f"Invalid pending_operator: {pending_operator!r}")
        if not isinstance(overwrite, bool):
            raise ValueError("overwrite_next must be a boolean")
        if not isinstance(history, (list, tuple)) or not all(isinstance(h, str) for h in history):
            raise ValueError("history must be a list of strings")

        return cls(
            current_operand=current,
            pending_operand=pending_operand,
            pending_operator=pending_operator,
            overwrite_next=overwrite,
            history=tuple(history[:HISTORY_LIMIT]),
        )


def evaluate(left: str, right: str, op: str) -> str:
    """
    Apply a binary operator to two decimal strings.
    Returns the result as a decimal string, or "Error" when an operand is
    not a finite number, on division by zero, or on overflow.
    """
    a = parse_number(left)
    b = parse_number(right)
    if a is None or b is None:
        return ERROR

    if op == "+":
        result = a + b
    elif op == "-":
        result = a - b
    elif op == "*":
        result = a * b
    elif op == "/":
        if b == 0:
            return ERROR
        result = a / b
    else:
        raise ValueError(f"Unsupported operator: {op!r}")

    if not math.isfinite(result):
        return ERROR
    return number_to_string(result)


# --- Transitions ---

def _clear(state, event):
    return replace(
        state,
        current_operand="0",
        pending_operand=None,
        pending_operator=None,
        overwrite_next=False,
    )


def _digit(state, event):
    if state.is_error or state.overwrite_next:
        return replace(state, current_operand=event.value, overwrite_next=False)
    if state.current_operand == "0":
        return replace(state, current_operand=event.value)
    return replace(state, current_operand=state.current_operand + event.value)


def _decimal(state, event):
    if state.is_error or state.overwrite_next:
        return replace(state, current_operand="0.", overwrite_next=False)
    if "." in state.current_operand:
        return state
    return replace(state, current_operand=state.current_operand + ".")


def _operator(state, event):
    if state.is_error:
        return state

    if state.has_pending and not state.overwrite_next:
        result = evaluate(state.pending_operand, state.current_operand, state.pending_operator)
        if result == ERROR:
            logger.info(
                f"Chained evaluation failed: {state.pending_operand} {state.pending_operator} {state.current_operand}"
            )
            return replace(
                state,
                current_operand=ERROR,
                pending_operand=None,
                pending_operator=None,
                overwrite_next=True,
            )
        return replace(
            state,
            current_operand=result,
            pending_operand=result,
            pending_operator=event.value,
            overwrite_next=True,
        )

    return replace(
        state,
        pending_operand=state.current_operand,
        pending_operator=event.value,
        overwrite_next=True,
    )


def _equals(state, event):
    if not state.has_pending or state.overwrite_next:
        return state

    result = evaluate(state.pending_operand, state.current_operand, state.pending_operator)
    history = state.history
    if result == ERROR:
        # failed evaluations are not recorded
        logger.info(
            f"Evaluation failed: {state.pending_operand} {state.pending_operator} {state.current_operand}"
        )
    else:
        entry = equation(state.pending_operand, state.pending_operator, state.current_operand, result)
        history = (entry,) + history[: HISTORY_LIMIT - 1]

    return replace(
        state,
        current_operand=result,
        pending_operand=None,
        pending_operator=None,
        overwrite_next=True,
        history=history,
    )


def _percent(state, event):
    if state.is_error:
        return state
    value = parse_number(state.current_operand)
    if value is None:
        return replace(state, current_operand=ERROR)
    return replace(state, current_operand=number_to_string(value / 100))


def _backspace(state, event):
    if state.is_error or state.overwrite_next:
        return replace(state, current_operand="0", overwrite_next=False)
    trimmed = state.current_operand[:-1]
    if trimmed in ("", "-"):
        trimmed = "0"
    return replace(state, current_operand=trimmed)


_TRANSITIONS = {
    EventType.Clear: _clear,
    EventType.Digit: _digit,
    EventType.Decimal: _decimal,
    EventType.Operator: _operator,
    EventType.Equals: _equals,
    EventType.Percent: _percent,
    EventType.Backspace: _backspace,
}


def reduce(state: CalculatorState, event: Event) -> CalculatorState:
    """Return the state that follows `state` after `event`."""
    return _TRANSITIONS[event.type](state, event)


def press(state: CalculatorState, *keys) -> CalculatorState:
    """Apply a sequence of keypad labels, e.g. press(state, "5", "+", "3", "=")."""
    for key in keys:
        state = reduce(state, event_for_key(key))
    return state
