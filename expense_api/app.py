"""Flask REST API exposing the expense tracker services."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request, send_from_directory
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from expense_core.exceptions import RecordNotFoundError, ValidationError
from expense_core.services import ExpenseManager
from expense_core.storage import DATA_FILE_NAME, DEFAULT_DATA_DIR, ExpenseStorage
from expense_core.validators import (
    parse_amount,
    parse_expense_id,
    validate_optional_str,
    validate_required_str,
)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
FRONTEND_DIR = Path(__file__).resolve().parent / "frontend"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def create_app(data_dir: Optional[Path] = None, frontend_dir: Optional[Path] = None) -> Flask:
    app = Flask(__name__, static_folder=None)

    # send_wildcard keeps the literal "*" even when the browser sends an Origin.
    CORS(
        app,
        resources={r"/api/*": {"origins": "*"}},
        send_wildcard=True,
        methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    storage = ExpenseStorage(Path(data_dir or DEFAULT_DATA_DIR) / DATA_FILE_NAME)
    manager = ExpenseManager(storage)
    app.extensions["expense_manager"] = manager
    assets = Path(frontend_dir or FRONTEND_DIR)

    def _success(payload: Any, status: int = 200):
        return jsonify(payload), status

    def _handle_error(exc: Exception, status: int, message: str):
        app.logger.warning("%s: %s", message, exc)
        return jsonify({"error": message, "details": str(exc)}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return _handle_error(exc, 400, "Validation error")

    @app.errorhandler(RecordNotFoundError)
    def handle_not_found(exc: RecordNotFoundError):
        return _handle_error(exc, 404, "Expense not found")

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception):
        if isinstance(exc, HTTPException):
            return exc
        app.logger.exception("Unhandled error for %s %s", request.method, request.path)
        return (
            f"Internal server error: {exc}",
            500,
            {"Content-Type": "text/plain; charset=utf-8"},
        )

    def _json_body() -> Dict[str, Any]:
        # Bodies are parsed as JSON whatever Content-Type the client sent.
        data = request.get_json(force=True, silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Malformed JSON body")
        return data

    @app.get("/api/expenses")
    def list_expenses():
        return _success([expense.to_dict() for expense in manager.list()])

    @app.post("/api/expenses")
    def create_expense():
        payload = _json_body()
        # Validate everything up front so a bad field never reaches the manager.
        category = validate_required_str(payload.get("category"), "category")
        amount = parse_amount(payload.get("amount"), "amount")
        date = validate_required_str(payload.get("date"), "date")
        description = validate_optional_str(payload.get("description"), "description")
        expense = manager.add(category, amount, date, description)
        return _success(expense.to_dict(), 201)

    @app.delete("/api/expenses")
    @app.delete("/api/expenses/")
    def delete_without_id():
        raise ValidationError("Missing expense ID")

    @app.delete("/api/expenses/<expense_id>")
    def delete_expense(expense_id: str):
        target = parse_expense_id(expense_id)
        if not manager.delete(target):
            raise RecordNotFoundError(f"Expense {target} not found")
        return _success({"message": "Expense deleted"})

    @app.get("/api/analytics")
    def analytics():
        return _success(manager.analytics())

    @app.get("/")
    def index():
        return send_from_directory(assets, "index.html", mimetype="text/html")

    @app.get("/style.css")
    def stylesheet():
        return send_from_directory(assets, "style.css", mimetype="text/css")

    @app.get("/app.js")
    def script():
        return send_from_directory(assets, "app.js", mimetype="application/javascript")

    return app


def serve(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    data_dir: Optional[Path] = None,
) -> None:
    """Run the development server until interrupted."""
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    app = create_app(data_dir)
    app.logger.info("Expense tracker listening on http://localhost:%s", port)
    app.run(host=host, port=port)


def main() -> int:
    serve()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
