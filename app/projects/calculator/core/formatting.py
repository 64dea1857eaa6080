"""
Number <-> string helpers for the Calculator.

Operands travel as decimal strings. Results are rendered the way the widget
has always shown them in the browser: whole numbers without a trailing
".0", positional notation for ordinary magnitudes, exponent notation such as
"1e-7" or "1e+21" outside that range.
"""
import math
import re
from decimal import Decimal

from app.projects.calculator.core.constants import ERROR, OPERATOR_SYMBOLS

_NUMBER_RE = re.compile(r"-?(\d+\.?\d*|\.\d+)(e[+-]?\d+)?", re.IGNORECASE)


def parse_number(text):
    """Parse a decimal string into a finite float. Returns None if it is not one."""
    if not isinstance(text, str) or not _NUMBER_RE.fullmatch(text):
        return None
    value = float(text)
    if not math.isfinite(value):
        return None
    return value


def number_to_string(value: float) -> str:
    """Shortest round-tripping decimal string for a float (see module docstring)."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        # also covers -0.0
        return "0"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))

    text = repr(value)
    if "e" not in text:
        return text
    mantissa, exponent = text.split("e")
    exponent = int(exponent)
    if -7 < exponent < 21:
        return format(Decimal(text), "f")
    sign = "+" if exponent > 0 else "-"
    return f"{mantissa}e{sign}{abs(exponent)}"


def format_number(value: str) -> str:
    """
    Format an operand for display: group the integer digits with commas,
    keep a trailing "." while the user is mid-entry and leave the fractional
    part untouched.

    The error sentinel, NaN and anything that is not a finite number are
    returned unchanged, as are exponent-notation values.
    """
    if value in (ERROR, "NaN", "-NaN"):
        return value
    if parse_number(value) is None:
        return value
    if "e" in value.lower():
        return value

    sign = ""
    digits = value
    if digits.startswith("-"):
        sign, digits = "-", digits[1:]

    int_part, dot, fraction = digits.partition(".")
    grouped = f"{int(int_part or '0'):,}"
    if not dot:
        return f"{sign}{grouped}"
    return f"{sign}{grouped}.{fraction}"


def operator_symbol(operator):
    """Display symbol for an internal operator value (+, -, *, /)."""
    return OPERATOR_SYMBOLS.get(operator, operator)


def pending_display(operand, operator):
    """Upper display line, e.g. "1,200 ×". Empty when nothing is pending."""
    if not operand or not operator:
        return ""
    return f"{format_number(operand)} {operator_symbol(operator)}"


def equation(left, operator, right, result):
    """History line: "<left> <symbol> <right> = <result>"."""
    return (
        f"{format_number(left)} {operator_symbol(operator)} "
        f"{format_number(right)} = {format_number(result)}"
    )
