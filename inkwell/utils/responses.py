from flask import jsonify, request

from inkwell.errors import DomainError, ValidationError


def json_error(error, code=None):
    """DomainError ya da düz mesaj -> (json, status)"""
    if isinstance(error, DomainError):
        return jsonify(error.payload()), code or error.status_code
    return jsonify({"success": False, "message": str(error)}), code or 400


def json_body() -> dict:
    """Gövde yoksa {}; JSON obje değilse ValidationError."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object", reason="invalid_field")
    return data


def iso(dt):
    return dt.isoformat() if dt else None
