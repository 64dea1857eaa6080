"""
Constants for the Calculator: error sentinel, history bound, operator symbols
and the keypad layout. Single source of truth for the engine and the template.
"""

ERROR = "Error"

HISTORY_LIMIT = 10

# Internal operator value -> display symbol
OPERATOR_SYMBOLS = {
    "+": "+",
    "-": "−",
    "*": "×",
    "/": "÷",
}

# Display symbol (and ASCII alias) -> internal operator value
OPERATOR_VALUES = {symbol: value for value, symbol in OPERATOR_SYMBOLS.items()}
OPERATOR_VALUES.update({value: value for value in OPERATOR_SYMBOLS})

CLEAR_KEY = "AC"
BACKSPACE_KEY = "⌫"
PERCENT_KEY = "%"
EQUALS_KEY = "="
DECIMAL_KEY = "."

# --- Keypad: rendered in this order, four keys per row ---
BUTTONS = [
    {"label": CLEAR_KEY, "type": "action", "action": "clear"},
    {"label": BACKSPACE_KEY, "type": "action", "action": "backspace"},
    {"label": PERCENT_KEY, "type": "action", "action": "percent"},
    {"label": "÷", "type": "operator", "value": "/"},
    {"label": "7", "type": "number", "value": "7"},
    {"label": "8", "type": "number", "value": "8"},
    {"label": "9", "type": "number", "value": "9"},
    {"label": "×", "type": "operator", "value": "*"},
    {"label": "4", "type": "number", "value": "4"},
    {"label": "5", "type": "number", "value": "5"},
    {"label": "6", "type": "number", "value": "6"},
    {"label": "−", "type": "operator", "value": "-"},
    {"label": "1", "type": "number", "value": "1"},
    {"label": "2", "type": "number", "value": "2"},
    {"label": "3", "type": "number", "value": "3"},
    {"label": "+", "type": "operator", "value": "+"},
    {"label": "0", "type": "number", "value": "0", "span": 2},
    {"label": DECIMAL_KEY, "type": "decimal", "value": "."},
    {"label": EQUALS_KEY, "type": "action", "action": "equals", "accent": True},
]

# Session key holding the serialized CalculatorState
SESSION_KEY = "calculator_state"
