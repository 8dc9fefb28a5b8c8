from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, request

from ..core.exceptions import NotFoundError, SaveError, ValidationError

logger = logging.getLogger(__name__)


def json_body() -> dict:
    """Request JSON object; empty when absent, ValidationError when not an object."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("รูปแบบข้อมูลไม่ถูกต้อง")
    return data


def json_errors(view):
    """Map domain errors of a JSON endpoint to status codes.

    ValidationError -> 400, NotFoundError -> 404, SaveError -> 502, other -> 500.
    A SaveError may carry `echo`, returned to the client so it can retry.
    """

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except NotFoundError as e:
            return jsonify({"success": False, "message": str(e)}), 404
        except SaveError as e:
            body = {"success": False, "message": str(e)}
            body.update(getattr(e, "echo", None) or {})
            return jsonify(body), 502
        except Exception:
            logger.exception("Unhandled error in %s", view.__name__)
            return jsonify({"success": False, "message": "เกิดข้อผิดพลาดของระบบ"}), 500

    return wrapper
