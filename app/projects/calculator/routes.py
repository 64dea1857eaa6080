"""
Calculator - keypad widget backed by the engine in core/engine.py.
State lives in the user's session; loading the page mounts a fresh one.
"""

import logging

from flask import Blueprint, jsonify, redirect, render_template, request, session, url_for

from app.projects.calculator.core.constants import BUTTONS, SESSION_KEY
from app.projects.calculator.core.engine import (
    CalculatorMode,
    CalculatorState,
    UnknownKeyError,
    press,
)
from app.projects.calculator.core.formatting import format_number, pending_display
from app.projects.registry import get_project_by_id
from app.utils.logging import log_project_visit

logger = logging.getLogger(__name__)

calculator_bp = Blueprint("calculator", __name__, template_folder="templates")


def _load_state():
    """Current state from the session; a fresh one if missing or unreadable."""
    data = session.get(SESSION_KEY)
    if data is None:
        return CalculatorState()
    try:
        return CalculatorState.from_dict(data)
    except ValueError as e:
        logger.warning(f"Discarding unreadable calculator state: {e}")
        return CalculatorState()


def _save_state(state):
    session[SESSION_KEY] = state.to_dict()


def _view_model(state):
    """Everything the page needs to render the display, keypad and history."""
    active = state.pending_operator if state.mode == CalculatorMode.OperatorChosen else None
    return {
        "current": state.current_operand,
        "display": format_number(state.current_operand),
        "previous": pending_display(state.pending_operand, state.pending_operator),
        "active_operator": active,
        "mode": state.mode.value,
        "history": list(state.history),
    }


def _render(state):
    return render_template(
        "calculator.html",
        project=get_project_by_id("calculator"),
        buttons=BUTTONS,
        view=_view_model(state),
    )


@calculator_bp.route("/")
def index():
    """Mount the calculator with a fresh state."""
    log_project_visit("calculator", "Calculator")
    state = CalculatorState()
    _save_state(state)
    return _render(state)


@calculator_bp.route("/state")
def current():
    """Re-render from the session without resetting (used after form presses)."""
    return _render(_load_state())


@calculator_bp.route("/api/press", methods=["POST"])
def api_press():
    """Apply one key press. Body: {"key": "<label>"}. Returns the view model or {error}."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Expected a JSON object"}), 400
    key = data.get("key")
    if not key or not isinstance(key, str):
        return jsonify({"error": "Missing key"}), 400

    try:
        state = press(_load_state(), key)
    except UnknownKeyError as e:
        logger.warning(f"Rejected key press: {e}")
        return jsonify({"error": str(e)}), 400

    _save_state(state)
    return jsonify(_view_model(state))


@calculator_bp.route("/press", methods=["POST"])
def form_press():
    """Keypad fallback without JavaScript: apply the key and redirect back."""
    key = request.form.get("key", "")
    try:
        _save_state(press(_load_state(), key))
    except UnknownKeyError as e:
        logger.warning(f"Rejected key press: {e}")
    return redirect(url_for("calculator.current"))
