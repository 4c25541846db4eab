from __future__ import annotations

import json
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError, UnauthorizedError, ValidationError
from ..core.logging_config import get_client_ip, security_logger


def error_response(error: DomainError):
    body: dict[str, Any] = {"message": error.message}
    if error.errors:
        body["errors"] = error.errors
    return jsonify(body), error.status_code


def json_endpoint(app: Flask):
    """Decorator factory: map domain errors to JSON, log everything else."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except DomainError as e:
                if e.status_code >= 500:
                    app.logger.error("%s %s failed: %s", request.method, request.path, e.message, exc_info=True)
                    return jsonify({"message": "Internal server error"}), 500
                return error_response(e)
            except HTTPException:
                raise
            except Exception:
                app.logger.exception("Unhandled error on %s %s", request.method, request.path)
                return jsonify({"message": "Internal server error"}), 500

        return wrapper

    return decorator


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            security_logger.log_unauthorized_access(request.endpoint, get_client_ip(request))
            return error_response(UnauthorizedError("Unauthorized"))
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def get_request_data() -> dict[str, Any]:
    """JSON body, or form fields for multipart requests."""

    if request.is_json:
        data = request.get_json(silent=True)
        if data is None:
            raise ValidationError("Request body must be valid JSON")
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data
    return request.form.to_dict()


def parse_json_field(raw: Optional[str], field_name: str, default: Any = None) -> Any:
    """Decode a JSON-encoded form field such as ``faceDescriptor``."""

    if raw is None or raw == "":
        return default
    try:
        return json.loads(raw)
    except ValueError:
        raise ValidationError(f"{field_name} must be valid JSON", errors={field_name: "must be valid JSON"})


def uploaded_bytes(field_name: str) -> Optional[bytes]:
    upload = request.files.get(field_name)
    if upload is None:
        return None
    return upload.read()


def wire_to_fields(data: dict[str, Any], mapping: dict[str, str]) -> dict[str, Any]:
    """Rename camelCase wire keys to entity field names, keeping only known keys."""

    return {field: data[key] for key, field in mapping.items() if key in data}
