"""
Flask server for the Imperial calculator.

Exposes one calculator session over a small JSON API so a keypad front end
can send key presses and render the display, errors and history.
"""

import logging

from flask import Flask, jsonify, request

from ..config import SessionConfig
from ..session import CalculatorSession
from ..tokens import InputToken

app = Flask(__name__)

# Global calculator session
session = CalculatorSession(SessionConfig.from_env())


def _state_response(accepted: bool = True):
    payload = session.snapshot()
    payload["accepted"] = accepted
    return jsonify(payload)


@app.route("/api/state", methods=["GET"])
def get_state():
    """Return the current session snapshot."""
    return _state_response()


@app.route("/api/calculate", methods=["POST"])
def calculate():
    """
    Handle calculator key presses via API.

    Expected JSON payload:
        {
            "action": "token|equals|backspace|clear|denominator",
            "pad": "Feet|Inches|Scalar|Operator",   // action=token
            "key": "5|1/4|.|+|...",                 // action=token
            "value": 8                              // action=denominator
        }

    Returns:
        JSON response with the session snapshot plus "accepted"
    """
    data = request.get_json(silent=True)

    if not data:
        return jsonify({"error": "No data provided"}), 400
    if not isinstance(data, dict):
        return jsonify({"error": "Expected a JSON object"}), 400

    action = data.get("action", "")

    if action == "token":
        try:
            token = InputToken(data.get("pad", ""), str(data.get("key", "")))
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        result = session.submit(token)
        return _state_response(result.accepted)
    elif action == "equals":
        outcome = session.request_evaluation()
        return _state_response(outcome.error is None)
    elif action == "backspace":
        session.backspace()
    elif action == "clear":
        session.clear()
    elif action == "denominator":
        try:
            session.set_fraction_denominator(int(data.get("value")))
        except (TypeError, ValueError) as e:
            return jsonify({"error": f"Invalid denominator: {e}"}), 400
    else:
        return jsonify({"error": f"Unknown action: {action}"}), 400

    return _state_response()


@app.route("/api/reset", methods=["POST"])
def reset():
    """Reset calculator to initial state."""
    session.reset()
    logging.info("Calculator session reset")
    return _state_response()


def main(host: str = "0.0.0.0", port: int = 5000, debug: bool = False) -> None:
    """Run the Flask development server."""
    print("Starting imperial-calc web server...")
    print(f"Access at: http://{host}:{port}")
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    main()
