"""Reusable decorators for controllers."""

from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar

from flask import jsonify
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

F = TypeVar("F", bound=Callable)


def super_admin_required(fn: F) -> F:
    """Restrict a route to super admins, answering 404 to everyone else.

    Missing tokens, bad tokens and non-admin users all get the same
    not_found body so the route's existence is never revealed.
    """

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        from lifechrono.core.users.services import get_user

        try:
            verify_jwt_in_request()
        except (JWTExtendedException, PyJWTError):
            return jsonify({"ok": False, "error": "not_found"}), 404
        user = get_user(int(get_jwt_identity()))
        if not user or not user.is_super_admin:
            return jsonify({"ok": False, "error": "not_found"}), 404
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]
