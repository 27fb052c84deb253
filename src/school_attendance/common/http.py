from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)


def parse_date_param(value: Optional[str], field_name: str) -> date:
    if not value:
        raise ValidationError(f"{field_name} is required (YYYY-MM-DD)")
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def parse_optional_date_param(value: Optional[str], field_name: str) -> Optional[date]:
    return parse_date_param(value, field_name) if value else None


def parse_int_param(value, field_name: str) -> int:
    if value is None or value == "":
        raise ValidationError(f"{field_name} is required")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def register_error_handlers(app: Flask) -> None:
    """Map domain errors onto JSON responses."""

    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        body = {"error": str(e)}
        if e.invalid_student_ids:
            body["invalidStudentIds"] = e.invalid_student_ids
        return jsonify(body), 400

    @app.errorhandler(AuthenticationError)
    def _authentication(e: AuthenticationError):
        return jsonify({"error": str(e)}), 401

    @app.errorhandler(AuthorizationError)
    def _authorization(e: AuthorizationError):
        return jsonify({"error": str(e)}), 403

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return jsonify({"error": str(e)}), 404

    @app.errorhandler(ConflictError)
    def _conflict(e: ConflictError):
        return jsonify({"error": "Request conflicts with stored data"}), 409

    @app.errorhandler(StorageError)
    def _storage(e: StorageError):
        return jsonify({"error": "Storage failure"}), 500

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        logger.exception("Unhandled error")
        return jsonify({"error": "Internal server error"}), 500
