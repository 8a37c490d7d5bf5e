from __future__ import annotations

import logging
from typing import Any, Optional

from flask import jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError, DuplicateError, FormatError, StorageError, ValidationError

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (FormatError, 400),
    (DuplicateError, 409),
    (StorageError, 502),
)


def request_data() -> dict[str, Any]:
    """JSON body if present, otherwise form fields."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def ok(payload: Optional[dict] = None, *, message: Optional[str] = None, status: int = 200):
    body: dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    if payload:
        body.update(payload)
    return jsonify(body), status


def error_response(e: Exception):
    """Map a raised error to a JSON error body and HTTP status."""
    if isinstance(e, DomainError):
        for error_type, status in _STATUS_BY_ERROR:
            if isinstance(e, error_type):
                return jsonify({"success": False, "message": str(e)}), status
        return jsonify({"success": False, "message": str(e)}), 400

    if isinstance(e, HTTPException):
        return jsonify({"success": False, "message": e.description}), e.code

    logger.exception("Unhandled error on %s %s", request.method, request.path)
    return jsonify({"success": False, "message": "Internal server error"}), 500
