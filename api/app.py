"""Flask REST API exposing the budget ledger services."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, Response, jsonify, request
from flask_cors import CORS

from ledger_core.exceptions import (
    CurrencyMismatchError,
    EntryNotFoundError,
    InsufficientFundsError,
    PersistenceError,
    ValidationError,
)
from ledger_core.periods import label, validate_period_key
from ledger_core.settings import Settings, build_service
from ledger_core.statement import PAGE_BREAK, render_statement, statement_filename
from ledger_core.storage import KeyValueStorage

# URL segment -> entry kind understood by the service.
KIND_SEGMENTS = {"income": "income", "expenses": "expense", "lending": "lending"}


def create_app(
    data_dir: Optional[Path] = None,
    *,
    storage: Optional[KeyValueStorage] = None,
    primary_currency: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> Flask:
    app = Flask(__name__)
    settings = settings or Settings.from_env()

    if settings.is_development:
        CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)
    elif settings.allowed_origins:
        CORS(app, resources={r"/*": {"origins": settings.allowed_origins}}, supports_credentials=True)
    else:
        CORS(app)

    service = build_service(
        primary_currency or settings.primary_currency,
        data_dir=Path(data_dir or settings.data_dir),
        storage=storage,
    )

    def _success(payload: Any, status: int = 200):
        if status == 204:
            return ("", status)
        return jsonify(payload), status

    def _handle_error(exc: Exception, status: int, message: str):
        app.logger.error("%s: %s", message, exc)
        return jsonify({"error": message, "details": str(exc)}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return _handle_error(exc, 400, "Validation error")

    @app.errorhandler(CurrencyMismatchError)
    def handle_currency_mismatch(exc: CurrencyMismatchError):
        return _handle_error(exc, 400, "Currency mismatch")

    @app.errorhandler(InsufficientFundsError)
    def handle_insufficient_funds(exc: InsufficientFundsError):
        return _handle_error(exc, 409, "Insufficient funds")

    @app.errorhandler(EntryNotFoundError)
    def handle_not_found(exc: EntryNotFoundError):
        return _handle_error(exc, 404, "Entry not found")

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(exc: PersistenceError):
        return _handle_error(exc, 500, "Persistence error")

    def _json_body() -> Dict[str, Any]:
        if not request.is_json:
            raise ValidationError("Request content must be application/json")
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Malformed JSON body")
        return data

    def _kind(segment: str) -> str:
        try:
            return KIND_SEGMENTS[segment]
        except KeyError as exc:
            raise EntryNotFoundError(f"Unknown entry list '{segment}'") from exc

    @app.get("/periods/<period>")
    def get_period(period: str):
        period = validate_period_key(period)
        return _success({"label": label(period), **service.snapshot(period)})

    @app.delete("/periods/<period>")
    def clear_period(period: str):
        service.clear_period(validate_period_key(period))
        return _success({}, 204)

    @app.get("/periods/<period>/summary")
    def summary(period: str):
        period = validate_period_key(period)
        return _success(service.dashboard(period).to_dict())

    @app.get("/periods/<period>/statement")
    def statement(period: str):
        period = validate_period_key(period)
        pages = render_statement(service.ledger(period), service.primary_currency)
        body = (PAGE_BREAK + "\n").join(pages) + "\n"
        return Response(
            body,
            mimetype="text/plain",
            headers={
                "Content-Disposition": f'attachment; filename="{statement_filename(period)}"'
            },
        )

    @app.post("/periods/<period>/transfers/to-savings")
    def transfer_to_savings(period: str):
        payload = _json_body()
        service.transfer_wallet_to_savings(validate_period_key(period), payload.get("amount"))
        return _success(service.dashboard(period).to_dict())

    @app.post("/periods/<period>/transfers/credit-savings")
    def credit_savings(period: str):
        payload = _json_body()
        service.credit_savings(validate_period_key(period), payload.get("amount"))
        return _success(service.dashboard(period).to_dict())

    @app.get("/periods/<period>/<segment>")
    def list_entries(period: str, segment: str):
        entries = service.list_entries(validate_period_key(period), _kind(segment))
        return _success({"items": [entry.to_dict() for entry in entries]})

    @app.post("/periods/<period>/<segment>")
    def create_entry(period: str, segment: str):
        payload = _json_body()
        entry = service.add_entry(validate_period_key(period), _kind(segment), payload)
        return _success(entry.to_dict(), 201)

    @app.get("/periods/<period>/<segment>/<entry_id>")
    def get_entry(period: str, segment: str, entry_id: str):
        entry = service.get_entry(validate_period_key(period), _kind(segment), entry_id)
        return _success(entry.to_dict())

    @app.put("/periods/<period>/<segment>/<entry_id>")
    def update_entry(period: str, segment: str, entry_id: str):
        payload = _json_body()
        entry = service.update_entry(validate_period_key(period), _kind(segment), entry_id, payload)
        return _success(entry.to_dict())

    @app.delete("/periods/<period>/<segment>/<entry_id>")
    def delete_entry(period: str, segment: str, entry_id: str):
        service.delete_entry(validate_period_key(period), _kind(segment), entry_id)
        return _success({}, 204)

    return app
